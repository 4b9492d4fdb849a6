"""Port: fire-and-forget tracking requests."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TrackingBeacon(Protocol):
    """Send a tracking ping without blocking the caller or raising."""

    def fire(self, url: str | None) -> None: ...
