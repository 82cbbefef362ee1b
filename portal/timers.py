"""Countdown timers driven by an injectable clock."""

import math
import time
from typing import Callable, Optional

Clock = Callable[[], float]


class Countdown:
    """
    A deadline counted down in whole seconds.

    Reading ``remaining`` never mutates the timer, so several countdowns
    sharing one clock stay independent of each other.
    """

    def __init__(self, clock: Clock = time.monotonic):
        self._clock = clock
        self._deadline: Optional[float] = None

    def start(self, seconds: float) -> None:
        self._deadline = self._clock() + max(0.0, seconds)

    def clear(self) -> None:
        self._deadline = None

    @property
    def started(self) -> bool:
        return self._deadline is not None

    @property
    def remaining(self) -> int:
        if self._deadline is None:
            return 0
        return max(0, math.ceil(self._deadline - self._clock()))

    @property
    def running(self) -> bool:
        return self.remaining > 0

    def __repr__(self) -> str:
        return f"Countdown(remaining={self.remaining})"


def format_mmss(seconds: int) -> str:
    """Render seconds as M:SS for the OTP expiry display."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes}:{secs:02d}"
