"""Cancellation helpers built on threading events."""

from __future__ import annotations

import datetime
import threading
from collections.abc import Callable

_POLL_INTERVAL = 0.01


def with_delay(
    done: threading.Event, delay: float | datetime.timedelta
) -> tuple[threading.Event, Callable[[], None]]:
    """Return an event that is set ``delay`` seconds after ``done`` is set.

    The second item cancels the returned event immediately.
    """
    if isinstance(delay, datetime.timedelta):
        delay = delay.total_seconds()

    cancelled = threading.Event()

    def watch() -> None:
        while not cancelled.is_set():
            if done.wait(_POLL_INTERVAL):
                cancelled.wait(delay)
                cancelled.set()

    threading.Thread(target=watch, name="with-delay", daemon=True).start()
    return cancelled, cancelled.set