"""Domain and tool request/response models."""

from ..domain.advertising import CandidateAd, ConversationTurn, ScoredAd
from .requests import AdRequest, ChatTurnRequest, ClickRequest, PublisherAdRequest
from .responses import AdSelection, TurnResult

__all__ = [
    # Domain
    "CandidateAd",
    "ConversationTurn",
    "ScoredAd",
    # Requests
    "AdRequest",
    "ChatTurnRequest",
    "ClickRequest",
    "PublisherAdRequest",
    # Responses
    "AdSelection",
    "TurnResult",
]
