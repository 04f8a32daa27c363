"""
Active sets of geofence ids and relevant note ids.

Each store is a set of ids (with the time each was added), persisted to a JSON
file after every change and observed through listeners. All mutations for a
store run under one lock: the change, the write to disk, and capturing the
snapshot handed to listeners. Listeners are invoked later on the dispatcher
thread, never while the lock is held.

Listeners are plain callables taking a frozenset of ids.
"""
import logging
import math
import threading
import time
from functools import partial

logger = logging.getLogger(__name__)

ONE_HOUR_MILLIS = 60 * 60 * 1000


def now_millis():
    return int(time.time() * 1000)


class RelevanceStore:
    """Set of active ids with persistence, listener fan-out and timed removal."""

    persist_key = "entries"

    def __init__(self, name, state_file, dispatcher, scheduler=None, clock=None):
        self.name = name
        self._state_file = state_file
        self._dispatcher = dispatcher
        self._scheduler = scheduler
        self._clock = clock or now_millis
        self._lock = threading.RLock()
        self._entries = {}  # id -> added_at (epoch millis)
        self._listeners = []
        self._load()

    # --- Reads ---

    def contains(self, entry_id):
        with self._lock:
            return entry_id in self._entries

    def get_all(self):
        """Snapshot of the current ids. Later changes are not visible through it."""
        with self._lock:
            return frozenset(self._entries)

    def added_at(self, entry_id):
        with self._lock:
            return self._entries.get(entry_id)

    def count(self):
        with self._lock:
            return len(self._entries)

    # --- Mutations ---

    def add(self, entry_id):
        """Add an id. Returns True if it was newly added, False if already present."""
        if not entry_id:
            logger.warning("%s: cannot add null or empty id", self.name)
            return False

        with self._lock:
            if entry_id in self._entries:
                return False
            self._entries[entry_id] = self._clock()
            self._changed_locked()
        logger.debug("%s: added %s", self.name, entry_id)
        return True

    def add_with_timeout(self, entry_id, duration_millis):
        """Add an id and schedule its removal after duration_millis."""
        if not entry_id:
            logger.warning("%s: cannot add null or empty id", self.name)
            return False
        if self._scheduler is None:
            raise RuntimeError(f"{self.name} has no expiry scheduler")

        added = self.add(entry_id)
        self._scheduler.schedule(duration_millis, partial(self._remove_after_timeout, entry_id))
        return added

    def remove(self, entry_id):
        """Remove an id. Returns True if it was present."""
        if not entry_id:
            logger.warning("%s: cannot remove null or empty id", self.name)
            return False

        with self._lock:
            if entry_id not in self._entries:
                return False
            del self._entries[entry_id]
            self._changed_locked()
        logger.debug("%s: removed %s", self.name, entry_id)
        return True

    def clear_all(self):
        with self._lock:
            self._entries.clear()
            self._changed_locked()
        logger.debug("%s: cleared all entries", self.name)

    # --- Listeners ---

    def add_listener(self, listener):
        """
        Register a listener. It is sent the current snapshot right away, then
        again after every change. Registering the same listener twice is a no-op.
        """
        if listener is None:
            return
        with self._lock:
            if listener in self._listeners:
                return
            self._listeners.append(listener)
            snapshot = frozenset(self._entries)
            self._dispatcher.post(partial(listener, snapshot))

    def remove_listener(self, listener):
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # --- Internals ---

    def _remove_after_timeout(self, entry_id):
        if self.remove(entry_id):
            logger.debug("%s: auto-removed %s after timeout", self.name, entry_id)

    def _changed_locked(self):
        # Caller holds self._lock. Posting (not delivering) under the lock keeps
        # delivery order identical to mutation order.
        self._persist_locked()
        snapshot = frozenset(self._entries)
        listeners = list(self._listeners)
        if listeners:
            self._dispatcher.post(partial(_deliver, listeners, snapshot))

    def _persist_locked(self):
        try:
            self._state_file.save({self.persist_key: dict(self._entries)})
        except (OSError, TypeError, ValueError) as e:
            logger.error("%s: failed to persist state: %s", self.name, e)

    def _load(self):
        data = self._state_file.load()
        saved = data.get(self.persist_key)
        if saved is None:
            return

        loaded_at = self._clock()
        if isinstance(saved, dict):
            for entry_id, added_at in saved.items():
                if not entry_id:
                    continue
                if isinstance(added_at, bool) or not isinstance(added_at, (int, float)) \
                        or not math.isfinite(added_at):
                    logger.warning("%s: bad timestamp for %s, using load time", self.name, entry_id)
                    added_at = loaded_at
                self._entries[entry_id] = int(added_at)
        elif isinstance(saved, list):
            # Bare id list: the add time is unknown, so start the clock now
            for entry_id in saved:
                if isinstance(entry_id, str) and entry_id:
                    self._entries[entry_id] = loaded_at
        else:
            logger.error("%s: ignoring unexpected persisted state", self.name)
            return

        logger.info("%s: loaded %d entries from storage", self.name, len(self._entries))


def _deliver(listeners, snapshot):
    for listener in listeners:
        try:
            listener(snapshot)
        except Exception:
            logger.exception("Listener %r failed", listener)


class ActiveGeofencesStore(RelevanceStore):
    """Geofences the device is currently inside ('note_<id>' or 'template_<id>')."""

    persist_key = "active_geofence_ids"

    def __init__(self, state_file, dispatcher, scheduler=None, clock=None):
        super().__init__("ActiveGeofencesStore", state_file, dispatcher, scheduler, clock)


class RelevantNotesStore(RelevanceStore):
    """
    Note ids currently relevant to the user: inside the note's geofence
    (removed on exit) or within the window of its time reminder (removed by
    timeout). Entries older than ttl_millis are dropped by clear_expired().
    """

    persist_key = "relevant_notes"

    def __init__(self, state_file, dispatcher, scheduler=None, clock=None, ttl_millis=ONE_HOUR_MILLIS):
        self.ttl_millis = ttl_millis
        super().__init__("RelevantNotesStore", state_file, dispatcher, scheduler, clock)

    def clear_expired(self):
        """Remove every entry added more than ttl_millis ago. Returns the removed ids."""
        now = self._clock()
        with self._lock:
            expired = [
                entry_id for entry_id, added_at in self._entries.items()
                if now - added_at > self.ttl_millis
            ]
            if not expired:
                return []
            for entry_id in expired:
                del self._entries[entry_id]
            self._changed_locked()

        logger.info("%s: cleared %d expired entries", self.name, len(expired))
        return expired

    def rearm_expiry(self):
        """
        Schedule expiry for every loaded entry at added_at + ttl_millis.

        Timers don't survive a restart, so this is run once at startup. An
        entry re-added after this call keeps its new timestamp and is left alone.
        """
        if self._scheduler is None:
            raise RuntimeError(f"{self.name} has no expiry scheduler")

        now = self._clock()
        with self._lock:
            entries = list(self._entries.items())

        for entry_id, added_at in entries:
            delay = added_at + self.ttl_millis - now
            self._scheduler.schedule(delay, partial(self._expire_if_unchanged, entry_id, added_at))
        return len(entries)

    def _expire_if_unchanged(self, entry_id, added_at):
        with self._lock:
            if self._entries.get(entry_id) != added_at:
                return
            del self._entries[entry_id]
            self._changed_locked()
        logger.debug("%s: expired %s", self.name, entry_id)
