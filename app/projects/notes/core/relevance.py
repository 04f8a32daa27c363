"""
Relevance queries for notes.

A note is relevant right now when either:
  - its reminder_time is within the relevance window of "now", or
  - the caller reports being inside the note's geofence ("note_<id>").

Relevance is computed per request and never stored.
"""
import logging
from datetime import datetime, timedelta

from flask import current_app

from app.projects.notes.models import Note

logger = logging.getLogger(__name__)

GEOFENCE_ID_PREFIX = "note_"
DEFAULT_WINDOW_MINUTES = 60


def geofence_id_for(note_id):
    """Device-level geofence id for a note, e.g. 'note_12'."""
    return f"{GEOFENCE_ID_PREFIX}{note_id}"


def parse_geofence_id(geofence_id):
    """
    Extract the note id from a geofence id.

    Returns the integer note id for 'note_<int>', or None for anything else
    (template geofences, garbage, non-strings).
    """
    if not isinstance(geofence_id, str) or not geofence_id.startswith(GEOFENCE_ID_PREFIX):
        return None
    suffix = geofence_id[len(GEOFENCE_ID_PREFIX):]
    if not (suffix.isascii() and suffix.isdigit()):
        return None
    return int(suffix)


def relevance_window():
    """Configured window as a timedelta."""
    minutes = current_app.config.get("RELEVANCE_WINDOW_MINUTES", DEFAULT_WINDOW_MINUTES)
    return timedelta(minutes=minutes)


def find_time_relevant_notes(user_id, now_utc, window):
    """Notes whose reminder falls within [now - window, now + window], newest edit first."""
    # Clamp to the representable range near datetime.min / datetime.max
    try:
        start = now_utc - window
    except OverflowError:
        start = datetime.min
    try:
        end = now_utc + window
    except OverflowError:
        end = datetime.max
    return Note.query.filter(
        Note.user_id == user_id,
        Note.reminder_time.isnot(None),
        Note.reminder_time >= start,
        Note.reminder_time <= end,
    ).order_by(Note.last_edited.desc(), Note.id.desc()).all()


def find_geofence_relevant_notes(user_id, inside_geofence_ids):
    """
    Notes the caller is currently inside the geofence of.

    Ids that don't parse, belong to another user, don't exist, or point at a
    note with no geofence (stale device state) are ignored.
    """
    note_ids = set()
    for geofence_id in inside_geofence_ids or []:
        note_id = parse_geofence_id(geofence_id)
        if note_id is None:
            logger.debug(f"Skipping unrecognized geofence id: {geofence_id!r}")
            continue
        note_ids.add(note_id)

    if not note_ids:
        return []

    return Note.query.filter(
        Note.user_id == user_id,
        Note.id.in_(note_ids),
        Note.geofence_id.isnot(None),
    ).order_by(Note.last_edited.desc(), Note.id.desc()).all()


def find_relevant_notes(user_id, now_utc, inside_geofence_ids=None, window=None):
    """
    Union of time-relevant and geofence-relevant notes for a user.

    Args:
        user_id: Owner whose notes are considered; no other user's notes are ever returned
        now_utc: Naive UTC datetime representing "now"
        inside_geofence_ids: Geofence ids ('note_<id>') the device reports being inside
        window: timedelta around now_utc; defaults to RELEVANCE_WINDOW_MINUTES

    Returns:
        list[Note]: Deduplicated, ordered by last_edited descending
    """
    if window is None:
        window = relevance_window()

    time_relevant = find_time_relevant_notes(user_id, now_utc, window)
    logger.info(f"Found {len(time_relevant)} time-relevant notes for user {user_id}")

    geo_relevant = find_geofence_relevant_notes(user_id, inside_geofence_ids)
    logger.info(f"Found {len(geo_relevant)} geofence-relevant notes for user {user_id}")

    by_id = {}
    for note in time_relevant + geo_relevant:
        by_id.setdefault(note.id, note)

    relevant = sorted(by_id.values(), key=lambda n: (n.last_edited, n.id), reverse=True)
    logger.info(f"Total relevant notes for user {user_id}: {len(relevant)}")
    return relevant
