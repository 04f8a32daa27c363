from datetime import datetime

from app import db


note_tags = db.Table(
    'note_tags',
    db.Column('note_id', db.Integer, db.ForeignKey('note.id', ondelete='CASCADE'), primary_key=True),
    db.Column('tag_id', db.Integer, db.ForeignKey('tag.id', ondelete='CASCADE'), primary_key=True),
)


class Geofence(db.Model):
    __tablename__ = 'geofence'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    radius = db.Column(db.Integer, nullable=False)
    address_name = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f'<Geofence {self.id}: ({self.latitude}, {self.longitude}) r={self.radius}m>'


class Tag(db.Model):
    __tablename__ = 'tag'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    color = db.Column(db.String(20), nullable=True)

    def __repr__(self):
        return f'<Tag {self.id}: {self.name}>'


class Attachment(db.Model):
    __tablename__ = 'attachment'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    kind = db.Column(db.String(10), nullable=False)  # 'photo' or 'audio'
    media_url = db.Column(db.String(1000), nullable=False)
    duration_sec = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f'<Attachment {self.id}: {self.kind}>'


class Note(db.Model):
    __tablename__ = 'note'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    title = db.Column(db.String(500), nullable=True)
    text = db.Column(db.Text, nullable=True)
    pinned = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    last_edited = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Both reminder kinds may be set at once
    reminder_time = db.Column(db.DateTime, nullable=True)
    geofence_id = db.Column(db.Integer, db.ForeignKey('geofence.id'), nullable=True)

    image_id = db.Column(db.Integer, db.ForeignKey('attachment.id'), nullable=True)
    audio_id = db.Column(db.Integer, db.ForeignKey('attachment.id'), nullable=True)

    user = db.relationship('User', backref=db.backref('notes', lazy='dynamic'))
    geofence = db.relationship('Geofence', backref=db.backref('notes', lazy=True))
    tags = db.relationship('Tag', secondary=note_tags, lazy='selectin',
                           backref=db.backref('notes', lazy=True))
    image = db.relationship('Attachment', foreign_keys=[image_id])
    audio = db.relationship('Attachment', foreign_keys=[audio_id])

    # Indexes for the relevance queries
    __table_args__ = (
        db.Index('ix_note_user_reminder_time', 'user_id', 'reminder_time'),
        db.Index('ix_note_user_last_edited', 'user_id', 'last_edited'),
    )

    @property
    def has_photo(self):
        return self.image_id is not None

    @property
    def has_audio(self):
        return self.audio_id is not None

    def __repr__(self):
        return f'<Note {self.id}: {(self.title or "")[:30]}>'
