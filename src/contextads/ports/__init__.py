"""Port interfaces (Protocols).

Application services depend only on these, never on concrete adapters.
No httpx or other infrastructure imports allowed here.
"""

from .ad_source import AdSource
from .beacon import TrackingBeacon
from .clock import Clock, MonotonicClock

__all__ = [
    "AdSource",
    "Clock",
    "MonotonicClock",
    "TrackingBeacon",
]
