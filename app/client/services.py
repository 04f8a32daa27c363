"""
Client relevance services, constructed once per process and passed to
whatever needs them (UI, geofence receiver, background sync).
"""
import logging
from pathlib import Path

from app.client.dispatcher import NotificationDispatcher
from app.client.geofence_events import GeofenceEventHandler
from app.client.persistence import JsonStateFile
from app.client.scheduler import ExpiryScheduler
from app.client.stores import ActiveGeofencesStore, RelevantNotesStore
from app.client.time_range import TimeRangeStore

logger = logging.getLogger(__name__)

ACTIVE_GEOFENCES_FILE = "active_geofences.json"
RELEVANT_NOTES_FILE = "relevant_notes.json"
TIME_RANGES_FILE = "time_ranges.json"


class RelevanceServices:
    def __init__(self, dispatcher, scheduler, active_geofences, relevant_notes, time_ranges, client=None):
        self.dispatcher = dispatcher
        self.scheduler = scheduler
        self.active_geofences = active_geofences
        self.relevant_notes = relevant_notes
        self.time_ranges = time_ranges
        self.events = GeofenceEventHandler(relevant_notes, active_geofences, client)
        self._started = False

    @classmethod
    def create(cls, state_dir, client=None, clock=None):
        """Build every client store under state_dir (one directory per installation)."""
        state_dir = Path(state_dir)
        dispatcher = NotificationDispatcher()
        scheduler = ExpiryScheduler()
        active_geofences = ActiveGeofencesStore(
            JsonStateFile(state_dir / ACTIVE_GEOFENCES_FILE), dispatcher, scheduler, clock=clock)
        relevant_notes = RelevantNotesStore(
            JsonStateFile(state_dir / RELEVANT_NOTES_FILE), dispatcher, scheduler, clock=clock)
        time_ranges = TimeRangeStore(JsonStateFile(state_dir / TIME_RANGES_FILE))
        return cls(dispatcher, scheduler, active_geofences, relevant_notes, time_ranges, client)

    def start(self):
        """Start listener delivery, drop stale entries and re-arm expiry timers."""
        if self._started:
            return
        self.dispatcher.start()
        expired = self.relevant_notes.clear_expired()
        rearmed = self.relevant_notes.rearm_expiry()
        self._started = True
        logger.info(f"Relevance services started ({len(expired)} expired, {rearmed} timers re-armed)")

    def shutdown(self):
        self.scheduler.shutdown()
        self.dispatcher.shutdown()
        self._started = False
        logger.info("Relevance services stopped")
