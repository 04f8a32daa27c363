"""
Listener delivery on a single designated thread.

Stores post notifications here instead of calling listeners directly, so a
listener never runs on the mutating caller's thread and may safely call back
into the store.
"""
import logging
import queue
import threading

logger = logging.getLogger(__name__)

_STOP = object()


class NotificationDispatcher:
    """Runs posted callables one at a time, in post order, on one worker thread."""

    def __init__(self, name="relevance-notify"):
        self._name = name
        self._queue = queue.Queue()
        self._thread = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        with self._lock:
            if self.running:
                return
            self._closed = False
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()
            logger.debug("Notification dispatcher %s started", self._name)

    def post(self, fn):
        """
        Queue fn for delivery. Posted work waits until start() if not running
        yet. After shutdown() the work is dropped. Returns True if queued.
        """
        with self._lock:
            if self._closed:
                logger.debug("Notification dispatcher %s is shut down; dropping work", self._name)
                return False
            self._queue.put(fn)
            return True

    def flush(self, timeout=5.0):
        """Block until everything posted so far has been delivered. Returns False on timeout or after shutdown."""
        done = threading.Event()
        if not self.post(done.set):
            return False
        return done.wait(timeout)

    def shutdown(self, wait=True, timeout=5.0):
        with self._lock:
            self._closed = True
            thread = self._thread
            if thread is None:
                return
            self._queue.put(_STOP)
            self._thread = None
        if wait and thread is not threading.current_thread():
            thread.join(timeout)
        logger.debug("Notification dispatcher %s stopped", self._name)

    def _run(self):
        while True:
            fn = self._queue.get()
            if fn is _STOP:
                return
            try:
                fn()
            except Exception:
                logger.exception("Listener notification failed")
