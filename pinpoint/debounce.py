"""
Debouncer - fires a callback once events stop arriving for a quiet period.
"""

import threading


class ThreadTimerScheduler:
    """Schedules callbacks on threading.Timer; handles support cancel()"""

    def schedule(self, delay, callback):
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class Debouncer:
    """
    Resettable timer around an event stream.

    Every call to trigger() restarts the countdown; the callback runs once
    `delay` seconds pass without another trigger.

    A scheduler is any object with schedule(delay, callback) returning a
    handle with cancel(). GUI hosts pass one bound to their event loop so
    the callback runs on the UI thread.
    """

    def __init__(self, delay, callback, scheduler=None):
        self.delay = delay
        self.callback = callback
        self.scheduler = scheduler if scheduler is not None else ThreadTimerScheduler()
        self._pending = None

    def trigger(self):
        """Register an event and restart the countdown"""
        self.cancel()
        self._pending = self.scheduler.schedule(self.delay, self._fire)

    def cancel(self):
        """Drop the pending callback, if any"""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _fire(self):
        self._pending = None
        self.callback()
