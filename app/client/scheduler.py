"""
One-shot delayed callbacks for entry expiry.

Scheduling is fire-and-forget: there is no per-timer cancellation. Callbacks
that fire after their entry is already gone are no-ops because store removal
is idempotent.
"""
import logging
import threading

logger = logging.getLogger(__name__)


class ExpiryScheduler:
    def __init__(self):
        self._timers = set()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def pending_count(self):
        with self._lock:
            return len(self._timers)

    def schedule(self, delay_millis, callback):
        """
        Run callback once after delay_millis (negative delays fire immediately).

        Returns True if scheduled, False if the scheduler has been shut down.
        """
        delay_seconds = max(0, delay_millis) / 1000.0
        timer = threading.Timer(delay_seconds, self._fire)
        timer.args = (timer, callback)
        timer.daemon = True

        with self._lock:
            if self._closed:
                logger.warning("Expiry scheduler is shut down; dropping timer")
                return False
            self._timers.add(timer)
        timer.start()
        return True

    def shutdown(self):
        """Cancel everything still pending. Used at process exit."""
        with self._lock:
            self._closed = True
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        if timers:
            logger.debug("Cancelled %d pending expiry timers", len(timers))

    def _fire(self, timer, callback):
        with self._lock:
            self._timers.discard(timer)
        try:
            callback()
        except Exception:
            logger.exception("Expiry callback failed")
