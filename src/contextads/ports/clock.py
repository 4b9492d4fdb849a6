"""Port: time source for expiry checks."""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Return the current time in seconds."""

    def now(self) -> float: ...


class MonotonicClock:
    """Uses time.monotonic, unaffected by wall-clock changes."""

    def now(self) -> float:
        return time.monotonic()
