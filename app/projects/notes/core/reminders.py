"""
Reminder mutations on notes. Time and geofence reminders are independent;
setting one never clears the other.
"""
import logging

from app import db
from app.projects.notes.models import Geofence, Note

logger = logging.getLogger(__name__)


class NoteNotFound(Exception):
    """Raised when a note doesn't exist or belongs to another user."""

    def __init__(self, note_id):
        super().__init__(f"Note {note_id} not found")
        self.note_id = note_id


def get_owned_note(user_id, note_id):
    note = Note.query.filter_by(id=note_id, user_id=user_id).first()
    if note is None:
        raise NoteNotFound(note_id)
    return note


def set_time_reminder(user_id, note_id, trigger_at):
    """Set reminder_time (naive UTC) on a note. The geofence is left alone."""
    logger.info(f"Setting time reminder for note {note_id} and user {user_id}")
    note = get_owned_note(user_id, note_id)
    note.reminder_time = trigger_at
    db.session.commit()
    logger.info(f"Time reminder set for note {note_id}: {trigger_at}")
    return note


def set_geofence_reminder(user_id, note_id, latitude, longitude, radius, address_name=None):
    """Attach a new geofence to a note. The time reminder is left alone."""
    logger.info(f"Setting geofence reminder for note {note_id} and user {user_id}")
    note = get_owned_note(user_id, note_id)
    geofence = Geofence(
        user_id=user_id,
        latitude=latitude,
        longitude=longitude,
        radius=radius,
        address_name=address_name,
    )
    db.session.add(geofence)
    note.geofence = geofence
    db.session.commit()
    logger.info(f"Geofence reminder set for note {note_id}")
    return note


def clear_reminders(user_id, note_id):
    """Clear both reminder kinds in a single commit."""
    logger.info(f"Clearing all reminders for note {note_id} and user {user_id}")
    note = get_owned_note(user_id, note_id)
    note.reminder_time = None
    note.geofence = None
    db.session.commit()
    logger.info(f"All reminders cleared for note {note_id}")
    return note
