"""
Shared helpers for API tests: an app on in-memory SQLite and bearer tokens
signed with the test secret.
"""
import time
from datetime import datetime

from authlib.jose import jwt

from app import create_app, db
from app.models import User
from app.projects.notes.models import Note, Geofence

JWT_SECRET = "test-jwt-secret"


def create_test_app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "SECRET_KEY": "test-secret-key",
        "JWT_SECRET": JWT_SECRET,
        "RELEVANCE_WINDOW_MINUTES": 60,
    })
    with app.app_context():
        db.create_all()
    return app


def make_token(user_id, secret=JWT_SECRET, expires_in=3600, alg="HS256"):
    payload = {"sub": str(user_id), "iat": int(time.time()), "exp": int(time.time()) + expires_in}
    return jwt.encode({"alg": alg}, payload, secret).decode("utf-8")


def auth_headers(user_id):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


def add_user(email):
    user = User(email=email)
    db.session.add(user)
    db.session.commit()
    return user


def add_note(user, title, reminder_time=None, geofence=None, last_edited=None, text=""):
    """geofence: (latitude, longitude, radius) or None."""
    note = Note(
        user_id=user.id,
        title=title,
        text=text,
        reminder_time=reminder_time,
        last_edited=last_edited or datetime.utcnow(),
    )
    if geofence is not None:
        latitude, longitude, radius = geofence
        note.geofence = Geofence(user_id=user.id, latitude=latitude, longitude=longitude, radius=radius)
    db.session.add(note)
    db.session.commit()
    return note
