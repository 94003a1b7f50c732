"""Self-rescheduling background refresh loop."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Runs *action* every *delay_seconds* on a daemon thread until stopped.

    The next wait only starts once the previous action has returned, so the
    action's own latency adds to the period. ``stop()`` is one-way: a
    firing already in progress finishes, but nothing is scheduled after it.
    An action that raises stops the loop for good.
    """

    def __init__(
        self,
        action: Callable[[], None],
        delay_seconds: float,
        name: str = "hotpotato-refresh",
        stop_event: threading.Event | None = None,
    ) -> None:
        if delay_seconds <= 0:
            raise ValueError(f"delay_seconds must be positive, got {delay_seconds}")
        self._action = action
        self._delay = delay_seconds
        self._name = name
        self._stop_event = stop_event or threading.Event()
        self._thread: threading.Thread | None = None
        self.fire_count = 0

    @property
    def delay_seconds(self) -> float:
        return self._delay

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Arm the first firing. A stopped scheduler cannot be restarted."""
        if self._thread is not None or self.stopped:
            return
        self._thread = threading.Thread(target=self._loop, name=self._name, daemon=True)
        self._thread.start()
        logger.debug("Refresh loop armed every %.3fs", self._delay)

    def stop(self) -> None:
        """Suppress all future firings."""
        if not self._stop_event.is_set():
            self._stop_event.set()
            logger.debug("Refresh loop stopped")

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)

    def _loop(self) -> None:
        # wait() returns True as soon as the flag is set
        while not self._stop_event.wait(self._delay):
            if self._stop_event.is_set():
                break
            try:
                self._action()
            except Exception:
                logger.exception("Refresh action failed; periodic updates stopped")
                self._stop_event.set()
                break
            self.fire_count += 1
