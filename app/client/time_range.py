import logging
import threading

logger = logging.getLogger(__name__)

KEY_PREFIX = "range_"
DEFAULT_MINUTES = 60
ONE_MINUTE_MILLIS = 60 * 1000


class TimeRangeStore:
    """
    Per-note relevance window in minutes (how far from its reminder time a
    note still counts as relevant on this device). Defaults to 60, minimum 1.
    """

    def __init__(self, state_file, default_minutes=DEFAULT_MINUTES):
        self._state_file = state_file
        self._default_minutes = default_minutes
        self._lock = threading.Lock()
        self._ranges = {}
        for key, minutes in state_file.load().items():
            if key.startswith(KEY_PREFIX) and isinstance(minutes, int) and not isinstance(minutes, bool):
                self._ranges[key] = minutes

    def get_range_minutes(self, note_id):
        if note_id is None:
            return self._default_minutes
        with self._lock:
            return self._ranges.get(KEY_PREFIX + str(note_id), self._default_minutes)

    def set_range_minutes(self, note_id, minutes):
        if note_id is None:
            return
        with self._lock:
            self._ranges[KEY_PREFIX + str(note_id)] = max(1, int(minutes))
            self._save_locked()

    def clear(self, note_id):
        if note_id is None:
            return
        with self._lock:
            if self._ranges.pop(KEY_PREFIX + str(note_id), None) is not None:
                self._save_locked()

    def range_millis(self, note_id):
        return max(1, self.get_range_minutes(note_id)) * ONE_MINUTE_MILLIS

    def _save_locked(self):
        try:
            self._state_file.save(dict(self._ranges))
        except OSError as e:
            logger.error("Failed to persist time ranges: %s", e)
