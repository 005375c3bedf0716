"""Wall-clock service for a game session.

``GameClock`` measures elapsed whole seconds since the session started and can
be frozen at game end. ``Ticker`` drives a periodic elapsed-time display on a
daemon thread; it only reads the clock and never touches game state.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from ..logging_utils import get_logger

logger = get_logger("labyrinth.ticker")


class GameClock:
    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self.started_at = clock()
        self.stopped_at: Optional[float] = None

    def elapsed_seconds(self) -> int:
        """Whole seconds since start (truncated), pinned once frozen."""
        end = self.stopped_at if self.stopped_at is not None else self._clock()
        return int(max(0.0, end - self.started_at))

    def freeze(self) -> int:
        if self.stopped_at is None:
            self.stopped_at = self._clock()
        return self.elapsed_seconds()

    @property
    def frozen(self) -> bool:
        return self.stopped_at is not None


class Ticker:
    """Call ``callback(elapsed())`` every ``interval`` seconds until stopped."""

    def __init__(self, interval: float, callback: Callable[[int], None], elapsed: Callable[[], int]):
        self.interval = interval
        self._callback = callback
        self._elapsed = elapsed
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "Ticker":
        if self._thread is None:
            self._thread = threading.Thread(target=self._run, name="labyrinth-ticker", daemon=True)
            self._thread.start()
        return self

    def _run(self):
        while not self._stop.wait(self.interval):
            try:
                self._callback(self._elapsed())
            except Exception as e:
                # a failed tick stops the ticker
                logger.error(event="ticker_error", error=repr(e))
                self._stop.set()
                return

    def stop(self) -> None:
        self._stop.set()
        t = self._thread
        if t is not None and t is not threading.current_thread():
            t.join(timeout=max(1.0, self.interval * 2))

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()
