"""
JSON shapes for notes as returned by the API. Relevant notes use the same
shape as a single note read so clients can render without another fetch.
"""
from app.projects.notes.core.relevance import geofence_id_for


def isoformat_utc(dt):
    """Naive UTC datetime -> '2025-11-03T17:00:00Z'."""
    if dt is None:
        return None
    return dt.replace(microsecond=0).isoformat() + 'Z'


def tag_to_dict(tag):
    return {
        'id': str(tag.id),
        'name': tag.name,
        'color': tag.color,
    }


def geofence_to_dict(geofence, note_id):
    if geofence is None:
        return None
    return {
        'id': geofence_id_for(note_id),
        'latitude': geofence.latitude,
        'longitude': geofence.longitude,
        'radius': geofence.radius,
        'addressName': geofence.address_name,
    }


def attachment_to_dict(attachment):
    if attachment is None:
        return None
    return {
        'id': str(attachment.id),
        'url': attachment.media_url,
        'durationSec': attachment.duration_sec,
    }


def note_to_dict(note):
    return {
        'id': str(note.id),
        'title': note.title,
        'text': note.text,
        'pinned': note.pinned,
        'createdAt': isoformat_utc(note.created_at),
        'lastEdited': isoformat_utc(note.last_edited),
        'reminderTimeUtc': isoformat_utc(note.reminder_time),
        'tags': [tag_to_dict(t) for t in sorted(note.tags, key=lambda t: t.id)],
        'geofence': geofence_to_dict(note.geofence, note.id),
        'image': attachment_to_dict(note.image),
        'audio': attachment_to_dict(note.audio),
        'hasPhoto': note.has_photo,
        'hasAudio': note.has_audio,
    }


def registration_to_dict(note):
    """Geofence registration entry for a note that has a geofence."""
    return {
        'geofenceId': geofence_id_for(note.id),
        'latitude': note.geofence.latitude,
        'longitude': note.geofence.longitude,
        'radiusMeters': note.geofence.radius,
    }
