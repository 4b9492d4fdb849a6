"""ContextAds application package."""

from .domain import (
    CandidateAd,
    ConversationTurn,
    ScoredAd,
    build_conversation_query,
    calculate_commercial_intent,
    extract_conversation_keywords,
    extract_keywords,
    score_ads,
)

__version__ = "0.1.0"
__all__ = [
    "CandidateAd",
    "ConversationTurn",
    "ScoredAd",
    "build_conversation_query",
    "calculate_commercial_intent",
    "extract_conversation_keywords",
    "extract_keywords",
    "score_ads",
]
