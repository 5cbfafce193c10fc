"""
Tick sources that drive gravity.

The game never waits on real time. It only tells its tick source when to
run, when to stop and how long the interval is; whoever owns the loop calls
``TetrisGame.tick()`` whenever the source fires.
"""

from __future__ import annotations


class TickSource:
    """Periodic tick with a settable interval.

    Subclasses hook ``_apply`` to push the current running state and interval
    to a real scheduler. The base class only keeps the bookkeeping, which is
    all tests need.

    Attributes:
        interval: Milliseconds between ticks.
        running: Whether ticks are currently being delivered.
    """

    def __init__(self, interval: int = 500) -> None:
        self.interval = interval
        self.running = False

    def start(self) -> None:
        self.running = True
        self._apply()

    def stop(self) -> None:
        self.running = False
        self._apply()

    def set_interval(self, interval: int) -> None:
        self.interval = interval
        self._apply()

    def _apply(self) -> None:
        pass


class ManualTicker(TickSource):
    """Tick source driven by hand.

    ``advance(ms)`` reports how many ticks would have fired during ``ms``
    milliseconds of running time, carrying the remainder over to the next
    call. Nothing fires while stopped.
    """

    def __init__(self, interval: int = 500) -> None:
        super().__init__(interval)
        self._elapsed = 0

    def stop(self) -> None:
        super().stop()
        self._elapsed = 0

    def advance(self, ms: int) -> int:
        if not self.running or self.interval <= 0:
            return 0
        self._elapsed += ms
        fired, self._elapsed = divmod(self._elapsed, self.interval)
        return fired
