"""Conversation and ad domain models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalize_dt(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ConversationTurn(BaseModel):
    """A single message in the chat transcript."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant", "ad"] = Field(
        ..., description="Message author; 'ad' marks an ad-display turn"
    )
    content: str = Field(default="", description="Message text")
    timestamp: datetime | None = Field(default=None, description="UTC time the message was sent")

    @field_validator("timestamp")
    @classmethod
    def _ensure_tz(cls, value: datetime | None) -> datetime | None:
        return _normalize_dt(value)


class CandidateAd(BaseModel):
    """An ad as returned by the ad network, before scoring."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="Advertiser headline")
    link: str = Field(default="#", description="Click-through URL")
    snippet: str = Field(default="", description="Ad body text")
    thumbnail: str | None = Field(default=None, description="Image URL")
    source: str | None = Field(default=None, description="Advertiser / source label")
    bid_value: float = Field(default=0.0, ge=0, description="Cost-per-click bid in USD")
    ad_creative_id: str | None = Field(default=None, description="Ad network creative identifier")
    impression_url: str | None = Field(default=None, description="Tracking URL fired when shown")
    click_url: str | None = Field(default=None, description="Tracking URL fired when clicked")
    format: str | None = Field(default=None, description="Creative format hint")

    @property
    def match_text(self) -> str:
        """Lowercased text used for keyword matching (title + snippet + source)."""
        return " ".join([self.title or "", self.snippet or "", self.source or ""]).lower()


class ScoredAd(CandidateAd):
    """Candidate ad with the scores derived for one ranking call."""

    relevance_score: float = Field(..., ge=0.0, le=1.0, description="Share of keywords found in the ad text")
    combined_score: float = Field(..., ge=0.0, le=1.0, description="Weighted relevance + bid score")
    matching_keywords: int = Field(..., ge=0, description="Number of keywords found in the ad text")
