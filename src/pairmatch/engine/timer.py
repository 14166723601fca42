from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SessionTimer:
    """Cooperative periodic tick driven by the caller's clock.

    The owner polls with the current time and receives the number of whole
    intervals that elapsed since the last poll. Once cancelled, the timer
    never reports a tick again.
    """

    interval: float = 1.0
    _next_due: float | None = None
    _cancelled: bool = False

    @property
    def running(self) -> bool:
        return self._next_due is not None and not self._cancelled

    def start(self, now: float) -> None:
        self._cancelled = False
        self._next_due = now + self.interval

    def poll(self, now: float) -> int:
        if not self.running:
            return 0
        assert self._next_due is not None
        ticks = 0
        while self._next_due <= now:
            ticks += 1
            self._next_due += self.interval
        return ticks

    def cancel(self) -> None:
        self._cancelled = True
        self._next_due = None
