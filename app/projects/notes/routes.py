import logging
import math

from flask import Blueprint, jsonify, request, abort
from flask_login import login_required, current_user

from app.utils.logging import log_activity
from app.projects.notes.core import reminders
from app.projects.notes.core.relevance import find_relevant_notes
from app.projects.notes.models import Note
from app.projects.notes.serializers import note_to_dict, isoformat_utc
from app.projects.notes.utils import parse_utc_instant, local_to_utc, is_number

logger = logging.getLogger(__name__)

notes_bp = Blueprint('notes', __name__, url_prefix='/api/notes')


# --- Helper Functions ---

def get_note_or_404(note_id):
    """
    Get a note by ID, ensuring it belongs to the current user.
    Returns 404 if note doesn't exist or belongs to different user.
    """
    note = Note.query.filter_by(id=note_id, user_id=current_user.id).first()
    if note is None:
        abort(404)
    return note


def _parse_geofence_request(data):
    """Validate a geofence body. Returns (values, error)."""
    latitude = data.get('latitude')
    longitude = data.get('longitude')
    radius = data.get('radius')

    if not is_number(latitude) or not math.isfinite(latitude) or not -90 <= latitude <= 90:
        return None, "Latitude is required and must be between -90 and 90"
    if not is_number(longitude) or not math.isfinite(longitude) or not -180 <= longitude <= 180:
        return None, "Longitude is required and must be between -180 and 180"
    if isinstance(radius, float) and radius.is_integer():
        radius = int(radius)
    if not isinstance(radius, int) or isinstance(radius, bool) or radius <= 0:
        return None, "Radius is required and must be a positive integer"

    address_name = data.get('addressName')
    if address_name is not None and not isinstance(address_name, str):
        return None, "addressName must be a string"

    return {
        'latitude': float(latitude),
        'longitude': float(longitude),
        'radius': radius,
        'address_name': address_name,
    }, None


def _parse_trigger_time(data):
    """Accept {triggerAtUtc} or {localDateTime, timeZone}. Returns (datetime, error)."""
    if 'triggerAtUtc' in data:
        try:
            return parse_utc_instant(data.get('triggerAtUtc')), None
        except ValueError:
            return None, "triggerAtUtc must be an ISO-8601 timestamp"

    if 'localDateTime' in data or 'timeZone' in data:
        try:
            return local_to_utc(data.get('localDateTime'), data.get('timeZone')), None
        except ValueError:
            return None, "Invalid date time or timezone"

    return None, "triggerAtUtc is required"


# --- Error Handlers ---

@notes_bp.errorhandler(404)
def not_found(error):
    return jsonify({"error": "Note not found"}), 404


@notes_bp.errorhandler(reminders.NoteNotFound)
def note_not_found(error):
    return jsonify({"error": "Note not found"}), 404


# --- Routes ---

@notes_bp.route('/<int:note_id>', methods=['GET'])
@login_required
def get_note(note_id):
    """Full note, including tags, geofence and attachments."""
    note = get_note_or_404(note_id)
    return jsonify(note_to_dict(note))


@notes_bp.route('/relevant-notes', methods=['POST'])
@login_required
def relevant_notes():
    """Notes relevant right now: within the reminder window or inside their geofence."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid request body"}), 400

    if data.get('nowUtc') is None:
        return jsonify({"error": "nowUtc is required"}), 400
    try:
        now_utc = parse_utc_instant(data.get('nowUtc'))
    except ValueError:
        return jsonify({"error": "nowUtc must be an ISO-8601 timestamp"}), 400

    inside = data.get('insideGeofenceIds')
    if inside is None:
        inside = []
    if not isinstance(inside, list):
        return jsonify({"error": "insideGeofenceIds must be a list"}), 400
    inside = [g for g in inside if isinstance(g, str)]

    notes = find_relevant_notes(current_user.id, now_utc, inside)
    return jsonify([note_to_dict(n) for n in notes])


@notes_bp.route('/<int:note_id>/reminder/time', methods=['PUT'])
@login_required
def set_time_reminder(note_id):
    """Set a time reminder. Does NOT clear the geofence."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid request body"}), 400

    trigger_at, err = _parse_trigger_time(data)
    if err:
        return jsonify({"error": err}), 400

    note = reminders.set_time_reminder(current_user.id, note_id, trigger_at)
    log_activity('Reminder Set', f"time reminder on note {note.id} at {isoformat_utc(trigger_at)}")
    return jsonify({
        "noteId": str(note.id),
        "reminderTimeUtc": isoformat_utc(note.reminder_time),
    })


@notes_bp.route('/<int:note_id>/reminder/geofence', methods=['PUT'])
@login_required
def set_geofence_reminder(note_id):
    """Set a geofence reminder. Does NOT clear the time reminder."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid request body"}), 400

    values, err = _parse_geofence_request(data)
    if err:
        return jsonify({"error": err}), 400

    note = reminders.set_geofence_reminder(current_user.id, note_id, **values)
    log_activity('Reminder Set', f"geofence reminder on note {note.id} (r={values['radius']}m)")
    return jsonify(note_to_dict(note))


@notes_bp.route('/<int:note_id>/reminder', methods=['DELETE'])
@login_required
def clear_reminders(note_id):
    """Clear both the time and geofence reminder."""
    note = reminders.clear_reminders(current_user.id, note_id)
    log_activity('Reminder Cleared', f"all reminders on note {note.id}")
    return '', 204
