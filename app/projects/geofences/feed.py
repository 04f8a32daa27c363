import logging

from app.projects.notes.models import Note
from app.projects.notes.serializers import registration_to_dict

logger = logging.getLogger(__name__)


def list_geofences_for_registration(user_id):
    """
    Every geofence attached to one of the user's notes, in the shape a device
    needs to (re)register OS-level monitors after login or reboot.
    """
    logger.info(f"Fetching geofences for registration for user {user_id}")
    notes = Note.query.filter(
        Note.user_id == user_id,
        Note.geofence_id.isnot(None),
    ).order_by(Note.id).all()

    registrations = [registration_to_dict(note) for note in notes if note.geofence is not None]
    logger.info(f"Found {len(registrations)} geofences for user {user_id}")
    return registrations
