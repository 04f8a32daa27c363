from flask import Flask, jsonify
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from dotenv import load_dotenv
import os
import logging

load_dotenv()

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()

def create_app(test_config=None):
    if test_config is None:
        # Validate required environment variables
        required_vars = ['SECRET_KEY', 'JWT_SECRET']
        for var in required_vars:
            if not os.getenv(var):
                raise ValueError(f"Required environment variable {var} is not set")

    app = Flask(__name__)
    app.config.from_object('config')
    if test_config is not None:
        app.config.update(test_config)

    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    # Register blueprints
    from app.core.auth import auth_bp
    from app.projects.notes.routes import notes_bp
    from app.projects.geofences.routes import geofences_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(notes_bp)
    app.register_blueprint(geofences_bp)

    # CLI commands
    from app.projects.notes.commands import notes_cli
    app.cli.add_command(notes_cli)

    # Import models to ensure they're known to Flask-SQLAlchemy
    from app.models import User, LogEntry
    from app.projects.notes.models import Note, Geofence, Tag, Attachment

    # User loader for Flask-Login
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Authentication required"}), 401

    return app
