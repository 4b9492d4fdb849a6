"""Domain layer for ContextAds."""

from .advertising import CandidateAd, ConversationTurn, ScoredAd
from .conversation import (
    DEFAULT_CONVERSATION_WINDOW,
    MAX_CONVERSATION_WINDOW,
    build_conversation_query,
    extract_conversation_keywords,
)
from .display_policy import AdDisplayGate, DisplayDecision
from .keywords import (
    COMMERCIAL_INTENT_TERMS,
    STOP_WORDS,
    build_search_query,
    calculate_commercial_intent,
    extract_keywords,
)
from .ranking_engine import RankingEngine, score_ads

__all__ = [
    "AdDisplayGate",
    "CandidateAd",
    "ConversationTurn",
    "DisplayDecision",
    "RankingEngine",
    "ScoredAd",
    "COMMERCIAL_INTENT_TERMS",
    "DEFAULT_CONVERSATION_WINDOW",
    "MAX_CONVERSATION_WINDOW",
    "STOP_WORDS",
    "build_conversation_query",
    "build_search_query",
    "calculate_commercial_intent",
    "extract_conversation_keywords",
    "extract_keywords",
    "score_ads",
]
