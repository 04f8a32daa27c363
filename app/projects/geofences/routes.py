from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from app.projects.geofences.feed import list_geofences_for_registration

geofences_bp = Blueprint('geofences', __name__, url_prefix='/api/geofences')


@geofences_bp.route('', methods=['GET'])
@login_required
def list_geofences():
    """All geofences the device should be monitoring for the current user."""
    return jsonify(list_geofences_for_registration(current_user.id))
