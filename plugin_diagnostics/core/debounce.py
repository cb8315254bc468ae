# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Coalescing and periodic triggers for runtime refreshes."""

from __future__ import annotations

import logging
import threading
from threading import Event
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ["Debouncer", "PeriodicRefresher"]

_LOGGER = logging.getLogger(__name__)


class Debouncer:
    """Run ``callback`` once after a burst of triggers has gone quiet.

    Every :meth:`trigger` restarts the delay. A zero delay runs the callback
    synchronously, which keeps tests deterministic.
    """

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        """Create a debouncer for ``callback``."""
        self._delay = delay
        self._callback = callback
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None

    @property
    def pending(self) -> bool:
        """Return whether a delayed call is scheduled."""
        with self._lock:
            return self._timer is not None

    def trigger(self) -> None:
        """Schedule the callback, replacing any pending call."""
        if self._delay <= 0:
            self._callback()
            return
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self._delay, self._fire)
            timer.args = (timer,)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        """Drop a pending call without running it."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _fire(self, timer: threading.Timer) -> None:
        # A superseded timer may already be running; only the current one fires.
        with self._lock:
            if timer is not self._timer:
                return
            self._timer = None
        self._callback()


class PeriodicRefresher:
    """Call ``callback`` every ``interval`` seconds on a daemon thread."""

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        """Create a stopped refresher."""
        self._interval = interval
        self._callback = callback
        self._stop_event = Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        """Return whether the refresh thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the refresh loop; a running loop is left alone."""
        if self.running:
            return
        self._stop_event = Event()
        self._thread = threading.Thread(target=self._run, name="diagnostics-refresh", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Signal the loop to stop and wait for it."""
        self._stop_event.set()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run(self) -> None:
        _LOGGER.debug("Periodic refresh started every %.1fs", self._interval)
        while not self._stop_event.wait(self._interval):
            try:
                self._callback()
            except Exception:
                _LOGGER.exception("Periodic refresh failed")
        _LOGGER.debug("Periodic refresh stopped")
