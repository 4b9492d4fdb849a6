"""Infrastructure adapters implementing the ports."""

from .tracking_beacon import HttpTrackingBeacon
from .vivos_ad_source import VivosAdSource

__all__ = [
    "HttpTrackingBeacon",
    "VivosAdSource",
]
