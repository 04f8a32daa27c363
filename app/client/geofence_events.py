"""
Routes device geofence transitions into the relevance stores.

Geofence ids have the form 'note_<id>' or 'template_<id>'. Entering a note
geofence makes the note relevant; template geofences are only tracked as
active so matching templates can be highlighted.
"""
import logging
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

NOTE_PREFIX = "note_"
TEMPLATE_PREFIX = "template_"


def extract_note_id(geofence_id):
    """'note_123' -> '123'; None for anything else."""
    if isinstance(geofence_id, str) and geofence_id.startswith(NOTE_PREFIX):
        note_id = geofence_id[len(NOTE_PREFIX):]
        return note_id or None
    return None


def is_template_geofence(geofence_id):
    return isinstance(geofence_id, str) and geofence_id.startswith(TEMPLATE_PREFIX) \
        and len(geofence_id) > len(TEMPLATE_PREFIX)


class GeofenceEventHandler:
    def __init__(self, relevant_notes, active_geofences, client=None):
        self.relevant_notes = relevant_notes
        self.active_geofences = active_geofences
        self.client = client

    def on_enter(self, geofence_ids):
        for geofence_id in geofence_ids or []:
            note_id = extract_note_id(geofence_id)
            if note_id is not None:
                logger.debug(f"Entered geofence for note {note_id}")
                self.relevant_notes.add(note_id)
                self.active_geofences.add(geofence_id)
            elif is_template_geofence(geofence_id):
                self.active_geofences.add(geofence_id)
            else:
                logger.warning(f"Ignoring enter for unrecognized geofence id: {geofence_id!r}")

    def on_exit(self, geofence_ids):
        for geofence_id in geofence_ids or []:
            note_id = extract_note_id(geofence_id)
            if note_id is not None:
                logger.debug(f"Exited geofence for note {note_id}")
                self.relevant_notes.remove(note_id)
                self.active_geofences.remove(geofence_id)
            elif is_template_geofence(geofence_id):
                self.active_geofences.remove(geofence_id)
            else:
                logger.warning(f"Ignoring exit for unrecognized geofence id: {geofence_id!r}")

    def on_time_reminder(self, note_id, duration_millis=None):
        """A time reminder fired: the note is relevant until the timeout (default: store TTL)."""
        if duration_millis is None:
            duration_millis = self.relevant_notes.ttl_millis
        self.relevant_notes.add_with_timeout(str(note_id), duration_millis)

    def refresh_from_server(self, now_utc=None):
        """
        Ask the server which notes are relevant given the active note geofences.

        Does not touch the stores. Raises RetryableApiError on network failure.
        """
        if self.client is None:
            raise RuntimeError("No API client configured")
        if now_utc is None:
            now_utc = datetime.now(timezone.utc)
        inside = [g for g in self.active_geofences.get_all() if extract_note_id(g) is not None]
        return self.client.fetch_relevant_notes(now_utc, inside)
