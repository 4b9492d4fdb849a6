"""Request DTOs for the engine tools."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from ..domain.advertising import ConversationTurn

MAX_QUERY_LENGTH = 1_000


def _not_blank(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class AdRequest(BaseModel):
    """Cache-aware ad selection for a search query."""

    query: str = Field(
        ...,
        min_length=1,
        max_length=MAX_QUERY_LENGTH,
        description="Search query; also the cache key",
    )
    keywords: list[str] = Field(
        default_factory=list,
        description="Keywords sent to the ad network and used for scoring",
    )

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, v: str) -> str:
        return _not_blank(v)

    @field_validator("keywords")
    @classmethod
    def _drop_blank_keywords(cls, v: list[str]) -> list[str]:
        return [k.strip() for k in v if k and k.strip()]


class PublisherAdRequest(BaseModel):
    """Uncached ad lookup for a publisher page context."""

    context: str = Field(
        ...,
        min_length=1,
        max_length=10_000,
        description="Page or conversation context",
    )
    publisher_key: str | None = Field(default=None, description="Publisher key forwarded to the ad network")

    @field_validator("context")
    @classmethod
    def _context_not_blank(cls, v: str) -> str:
        return _not_blank(v)


class ChatTurnRequest(BaseModel):
    """One chat turn: the transcript so far and the latest user message."""

    messages: list[ConversationTurn] = Field(
        default_factory=list,
        description="Conversation transcript, oldest first",
    )
    current_message: str = Field(
        ...,
        min_length=1,
        max_length=10_000,
        description="Latest user message",
    )

    @field_validator("current_message")
    @classmethod
    def _message_not_blank(cls, v: str) -> str:
        return _not_blank(v)


class ClickRequest(BaseModel):
    """Click report from the chat client."""

    advertiser: str = Field(..., min_length=1, description="Advertiser (ad title)")
    link: str = Field(..., min_length=1, description="Click-through URL")
    ad_id: str | None = Field(default=None, description="Ad network creative identifier")
    bid_value: float | None = Field(default=None, ge=0, description="Bid of the clicked ad")
    relevance_score: float | None = Field(default=None, ge=0, le=1, description="Relevance at display time")
    session_id: str | None = Field(default=None, description="Client session identifier")
