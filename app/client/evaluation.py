"""
Client-side time relevance: marks notes relevant while "now" is within the
note's own time-range window of its reminder, and lets them lapse at the end
of that window.
"""
import logging

import dateutil.parser

logger = logging.getLogger(__name__)


def reminder_millis(note):
    """Epoch millis of a wire-format note's reminderTimeUtc, or None."""
    value = note.get("reminderTimeUtc")
    if not value:
        return None
    try:
        return int(dateutil.parser.isoparse(value).timestamp() * 1000)
    except (ValueError, OverflowError):
        logger.warning(f"Unparseable reminder time on note {note.get('id')}: {value!r}")
        return None


def evaluate_time_relevant_notes(notes, relevant_notes, time_ranges, now_millis):
    """
    Update the relevant-notes store from a list of notes (API wire shape).

    Notes within their window are added with a timeout that ends when the
    window does. Notes outside it, or with no reminder, are removed unless
    they have a geofence (geofence membership is managed by enter/exit events).

    Returns the ids added or refreshed in this pass.
    """
    relevant_notes.clear_expired()
    in_window = []

    for note in notes:
        note_id = note.get("id") if isinstance(note, dict) else None
        if not note_id:
            continue
        has_geofence = note.get("geofence") is not None

        reminder = reminder_millis(note)
        if reminder is None:
            if not has_geofence:
                relevant_notes.remove(note_id)
            continue

        range_millis = time_ranges.range_millis(note_id)
        if abs(reminder - now_millis) <= range_millis:
            duration = max(0, reminder + range_millis - now_millis)
            relevant_notes.add_with_timeout(note_id, duration)
            in_window.append(note_id)
        elif not has_geofence:
            relevant_notes.remove(note_id)

    return in_window
