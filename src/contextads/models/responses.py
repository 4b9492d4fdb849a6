"""Response DTOs for the engine tools."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from ..domain.advertising import ScoredAd


class AdSelection(BaseModel):
    """Outcome of one ad selection."""

    ad: ScoredAd | None = Field(default=None, description="Winning ad, or None when no ads were found")
    recommendations: list[ScoredAd] = Field(
        default_factory=list,
        description="Additional ranked ads",
    )
    total_ads: int = Field(default=0, ge=0, description="Number of ads ranked")
    source: Literal["cache", "network", "none"] = Field(..., description="Where the winning ad came from")
    query: str = Field(default="", description="Query the selection was made for")
    keywords: list[str] = Field(default_factory=list, description="Keywords used for fetching and scoring")


class TurnResult(BaseModel):
    """Per-turn ad decision returned to the chat host."""

    show_ad: bool = Field(..., description="Whether the gate allowed an ad this turn")
    turn: int = Field(..., ge=1, description="Process-wide turn number")
    reason: str = Field(..., description="Gate or selection outcome")
    conversation_keywords: list[str] = Field(default_factory=list)
    search_query: str = Field(default="")
    commercial_intent: float = Field(default=0.0, ge=0.0, le=1.0)
    ad: ScoredAd | None = Field(default=None)
    recommendations: list[ScoredAd] = Field(default_factory=list)
