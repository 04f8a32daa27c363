"""
Unit tests for the notes API client. The HTTP session is mocked.

Run (with venv activated):
  python -m unittest tests.client.test_api_client -v
"""
import unittest
from datetime import datetime, timezone, timedelta
from unittest.mock import MagicMock

import requests

from app.client.api_client import AnchorNotesClient, ApiError, RetryableApiError, format_instant


def make_response(status_code=200, json_data=None, content=b"x"):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.content = content
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


class TestFormatInstant(unittest.TestCase):

    def test_naive_is_utc(self):
        self.assertEqual(format_instant(datetime(2025, 11, 3, 17, 0, 0, 123456)), "2025-11-03T17:00:00Z")

    def test_aware_is_converted(self):
        dt = datetime(2025, 11, 3, 9, 0, tzinfo=timezone(timedelta(hours=-8)))
        self.assertEqual(format_instant(dt), "2025-11-03T17:00:00Z")


class TestAnchorNotesClient(unittest.TestCase):

    def setUp(self):
        self.session = MagicMock()
        self.client = AnchorNotesClient("https://notes.example.com/", "tok", session=self.session)

    def test_fetch_relevant_notes_request_shape(self):
        self.session.request.return_value = make_response(200, [{"id": "1"}])
        now = datetime(2025, 11, 3, 17, 0, tzinfo=timezone.utc)

        result = self.client.fetch_relevant_notes(now, {"note_2", "note_1"})

        self.assertEqual(result, [{"id": "1"}])
        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ("POST", "https://notes.example.com/api/notes/relevant-notes"))
        self.assertEqual(kwargs["json"], {
            "nowUtc": "2025-11-03T17:00:00Z",
            "insideGeofenceIds": ["note_1", "note_2"],
        })
        self.assertEqual(kwargs["headers"], {"Authorization": "Bearer tok"})
        self.assertEqual(kwargs["timeout"], 10)

    def test_fetch_without_geofences_sends_empty_list(self):
        self.session.request.return_value = make_response(200, [])
        self.client.fetch_relevant_notes(datetime(2025, 1, 1))
        self.assertEqual(self.session.request.call_args.kwargs["json"]["insideGeofenceIds"], [])

    def test_network_error_is_retryable(self):
        self.session.request.side_effect = requests.exceptions.ConnectionError("unreachable")
        with self.assertLogs("app.client.api_client", level="ERROR"):
            with self.assertRaises(RetryableApiError) as cm:
                self.client.list_geofences()
        self.assertIsNone(cm.exception.status_code)

    def test_server_error_is_retryable(self):
        self.session.request.return_value = make_response(503, {"error": "down"})
        with self.assertLogs("app.client.api_client", level="ERROR"):
            with self.assertRaises(RetryableApiError) as cm:
                self.client.get_note("1")
        self.assertEqual(cm.exception.status_code, 503)

    def test_client_error_carries_server_message(self):
        self.session.request.return_value = make_response(400, {"error": "nowUtc is required"})
        with self.assertRaises(ApiError) as cm:
            self.client.fetch_relevant_notes(datetime(2025, 1, 1))
        self.assertNotIsInstance(cm.exception, RetryableApiError)
        self.assertEqual(str(cm.exception), "nowUtc is required")
        self.assertEqual(cm.exception.status_code, 400)

    def test_client_error_without_json_body(self):
        self.session.request.return_value = make_response(404, ValueError("no json"))
        with self.assertRaises(ApiError) as cm:
            self.client.get_note("99")
        self.assertEqual(str(cm.exception), "Request failed (404)")

    def test_no_content_returns_none(self):
        self.session.request.return_value = make_response(204, None, content=b"")
        self.assertIsNone(self.client.clear_reminders("5"))
        self.assertEqual(
            self.session.request.call_args.args,
            ("DELETE", "https://notes.example.com/api/notes/5/reminder"),
        )

    def test_set_time_reminder_body(self):
        self.session.request.return_value = make_response(200, {"noteId": "5"})
        self.client.set_time_reminder("5", datetime(2025, 11, 3, 18, 30))
        self.assertEqual(self.session.request.call_args.kwargs["json"], {"triggerAtUtc": "2025-11-03T18:30:00Z"})

    def test_set_geofence_reminder_body(self):
        self.session.request.return_value = make_response(200, {"id": "5"})
        self.client.set_geofence_reminder("5", 34.02, -118.28, 150, address_name="Campus")
        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ("PUT", "https://notes.example.com/api/notes/5/reminder/geofence"))
        self.assertEqual(kwargs["json"], {
            "latitude": 34.02, "longitude": -118.28, "radius": 150, "addressName": "Campus",
        })


if __name__ == "__main__":
    unittest.main()
