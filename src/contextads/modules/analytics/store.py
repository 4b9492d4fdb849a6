"""Bounded in-memory click log with aggregate reporting.

Nothing is persisted; events are lost on restart.
"""

from __future__ import annotations

import threading
from collections import Counter, deque
from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import BaseModel, Field

DEFAULT_MAX_EVENTS = 1000
DEFAULT_RECENT_CLICKS = 20


class ClickEvent(BaseModel):
    """A single ad click reported by the chat client."""

    ad_id: str | None = Field(default=None, description="Ad network creative identifier")
    advertiser: str = Field(..., description="Advertiser (ad title)")
    link: str = Field(..., description="Click-through URL")
    bid_value: float | None = Field(default=None, description="Bid of the clicked ad")
    relevance_score: float | None = Field(default=None, description="Relevance at display time")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: str | None = Field(default=None, description="Client session identifier")


@dataclass(frozen=True)
class ClickAnalytics:
    """Aggregated click stats for reporting."""

    total_clicks: int
    clicks_by_advertiser: dict[str, int] = field(default_factory=dict)
    recent_clicks: list[ClickEvent] = field(default_factory=list)


class ClickStore:
    """Keeps the last ``max_events`` clicks and summarises them."""

    def __init__(self, max_events: int = DEFAULT_MAX_EVENTS) -> None:
        if max_events < 1:
            raise ValueError(f"max_events must be >= 1, got {max_events}")
        self._events: deque[ClickEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def record(
        self,
        *,
        advertiser: str,
        link: str,
        ad_id: str | None = None,
        bid_value: float | None = None,
        relevance_score: float | None = None,
        session_id: str | None = None,
        ts: datetime | None = None,
    ) -> ClickEvent:
        if not link or not advertiser:
            raise ValueError("link and advertiser are required")
        event = ClickEvent(
            ad_id=ad_id or None,
            advertiser=advertiser,
            link=link,
            bid_value=bid_value,
            relevance_score=relevance_score,
            timestamp=(ts or datetime.now(timezone.utc)).astimezone(timezone.utc),
            session_id=session_id,
        )
        with self._lock:
            self._events.append(event)
        return event

    def analytics(self, recent: int = DEFAULT_RECENT_CLICKS) -> ClickAnalytics:
        with self._lock:
            events = list(self._events)
        by_advertiser = Counter(event.advertiser for event in events)
        return ClickAnalytics(
            total_clicks=len(events),
            clicks_by_advertiser=dict(by_advertiser),
            recent_clicks=events[-recent:] if recent > 0 else [],
        )

    def __len__(self) -> int:
        return len(self._events)
