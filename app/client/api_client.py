"""
HTTP client for the relevance endpoints of the notes API.
"""
import logging
from datetime import datetime, timezone

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-success response from the API."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class RetryableApiError(ApiError):
    """Network failure or server-side error; the same call may succeed later."""


def format_instant(dt):
    """datetime -> '2025-11-03T17:00:00Z'. Naive datetimes are taken as UTC."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.replace(microsecond=0).isoformat() + "Z"


class AnchorNotesClient:
    """
    Thin wrapper over the notes API. Authenticates with a bearer token issued
    by the auth service.
    """

    def __init__(self, base_url, token, session=None, timeout=10):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch_relevant_notes(self, now_utc=None, inside_geofence_ids=None):
        """Notes relevant at now_utc given the geofences the device is inside."""
        if now_utc is None:
            now_utc = datetime.now(timezone.utc)
        body = {
            "nowUtc": format_instant(now_utc),
            "insideGeofenceIds": sorted(inside_geofence_ids or []),
        }
        return self._request("POST", "/api/notes/relevant-notes", json=body)

    def list_geofences(self):
        """Geofences to register with the device's location subsystem."""
        return self._request("GET", "/api/geofences")

    def get_note(self, note_id):
        return self._request("GET", f"/api/notes/{note_id}")

    def set_time_reminder(self, note_id, trigger_at):
        body = {"triggerAtUtc": format_instant(trigger_at)}
        return self._request("PUT", f"/api/notes/{note_id}/reminder/time", json=body)

    def set_geofence_reminder(self, note_id, latitude, longitude, radius, address_name=None):
        body = {"latitude": latitude, "longitude": longitude, "radius": radius}
        if address_name is not None:
            body["addressName"] = address_name
        return self._request("PUT", f"/api/notes/{note_id}/reminder/geofence", json=body)

    def clear_reminders(self, note_id):
        return self._request("DELETE", f"/api/notes/{note_id}/reminder")

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}{path}"
        headers = {"Authorization": f"Bearer {self.token}"}

        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise RetryableApiError(f"Network error: {e}") from e

        if response.status_code >= 500:
            logger.error(f"{method} {path} returned {response.status_code}")
            raise RetryableApiError(f"Server error ({response.status_code})", response.status_code)

        if not response.ok:
            raise ApiError(_error_message(response), response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()


def _error_message(response):
    try:
        data = response.json()
    except ValueError:
        return f"Request failed ({response.status_code})"
    if isinstance(data, dict) and data.get("error"):
        return data["error"]
    return f"Request failed ({response.status_code})"
