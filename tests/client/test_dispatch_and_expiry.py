"""
Unit tests for the notification dispatcher and the expiry scheduler.

Run (with venv activated):
  python -m unittest tests.client.test_dispatch_and_expiry -v
"""
import threading
import time
import unittest

from app.client.dispatcher import NotificationDispatcher
from app.client.scheduler import ExpiryScheduler


class TestNotificationDispatcher(unittest.TestCase):

    def setUp(self):
        self.dispatcher = NotificationDispatcher(name="test-dispatch")

    def tearDown(self):
        self.dispatcher.shutdown()

    def test_runs_in_post_order(self):
        seen = []
        self.dispatcher.start()
        for i in range(10):
            self.dispatcher.post(lambda i=i: seen.append(i))
        self.assertTrue(self.dispatcher.flush())
        self.assertEqual(seen, list(range(10)))

    def test_work_posted_before_start_runs_after_start(self):
        seen = []
        self.dispatcher.post(lambda: seen.append("early"))
        self.assertFalse(self.dispatcher.running)
        self.dispatcher.start()
        self.assertTrue(self.dispatcher.flush())
        self.assertEqual(seen, ["early"])

    def test_failure_is_logged_and_delivery_continues(self):
        seen = []

        def broken():
            raise ValueError("bad listener")

        self.dispatcher.start()
        with self.assertLogs("app.client.dispatcher", level="ERROR"):
            self.dispatcher.post(broken)
            self.dispatcher.post(lambda: seen.append("after"))
            self.assertTrue(self.dispatcher.flush())
        self.assertEqual(seen, ["after"])

    def test_start_twice_uses_one_thread(self):
        names = set()
        self.dispatcher.start()
        self.dispatcher.start()
        for _ in range(5):
            self.dispatcher.post(lambda: names.add(threading.current_thread().ident))
        self.dispatcher.flush()
        self.assertEqual(len(names), 1)

    def test_shutdown_stops_thread(self):
        self.dispatcher.start()
        self.assertTrue(self.dispatcher.running)
        self.dispatcher.shutdown()
        self.assertFalse(self.dispatcher.running)

    def test_work_posted_after_shutdown_is_dropped(self):
        seen = []
        self.dispatcher.start()
        self.dispatcher.shutdown()
        with self.assertLogs("app.client.dispatcher", level="DEBUG"):
            self.assertFalse(self.dispatcher.post(lambda: seen.append("late")))
        self.assertTrue(self.dispatcher._queue.empty())
        self.assertFalse(self.dispatcher.flush(timeout=0.1))

    def test_restart_after_shutdown_delivers_again(self):
        seen = []
        self.dispatcher.start()
        self.dispatcher.shutdown()
        self.dispatcher.start()
        self.assertTrue(self.dispatcher.post(lambda: seen.append("again")))
        self.assertTrue(self.dispatcher.flush())
        self.assertEqual(seen, ["again"])


class TestExpiryScheduler(unittest.TestCase):

    def setUp(self):
        self.scheduler = ExpiryScheduler()

    def tearDown(self):
        self.scheduler.shutdown()

    def test_callback_fires_after_delay(self):
        fired = threading.Event()
        self.assertTrue(self.scheduler.schedule(20, fired.set))
        self.assertTrue(fired.wait(2))

    def test_negative_delay_fires_immediately(self):
        fired = threading.Event()
        self.scheduler.schedule(-5000, fired.set)
        self.assertTrue(fired.wait(2))

    def test_shutdown_cancels_pending(self):
        fired = threading.Event()
        self.scheduler.schedule(60 * 1000, fired.set)
        self.assertEqual(self.scheduler.pending_count, 1)
        self.scheduler.shutdown()
        self.assertEqual(self.scheduler.pending_count, 0)
        self.assertFalse(fired.wait(0.1))

    def test_schedule_after_shutdown_is_refused(self):
        self.scheduler.shutdown()
        with self.assertLogs("app.client.scheduler", level="WARNING"):
            self.assertFalse(self.scheduler.schedule(10, lambda: None))

    def test_callback_exception_is_logged(self):
        def broken():
            raise RuntimeError("expiry failed")

        with self.assertLogs("app.client.scheduler", level="ERROR") as logs:
            self.scheduler.schedule(0, broken)
            for _ in range(200):
                if logs.output:
                    break
                time.sleep(0.01)
        self.assertIn("Expiry callback failed", logs.output[0])


if __name__ == "__main__":
    unittest.main()
