"""
Tests for the debounce helper.
"""

import threading

from pinpoint.debounce import Debouncer


def test_callback_runs_once_after_burst(scheduler):
    calls = []
    debouncer = Debouncer(1.0, lambda: calls.append(1), scheduler=scheduler)

    debouncer.trigger()
    debouncer.trigger()
    debouncer.trigger()

    assert len(scheduler.handles) == 3
    assert len(scheduler.pending()) == 1

    scheduler.run_pending()
    assert calls == [1]


def test_cancel_drops_pending_callback(scheduler):
    calls = []
    debouncer = Debouncer(0.5, lambda: calls.append(1), scheduler=scheduler)

    debouncer.trigger()
    debouncer.cancel()
    scheduler.run_pending()

    assert calls == []


def test_default_scheduler_uses_real_timer():
    fired = threading.Event()
    debouncer = Debouncer(0.01, fired.set)

    debouncer.trigger()

    assert fired.wait(timeout=2.0)
