"""Recency-weighted keyword aggregation over a conversation."""

from __future__ import annotations

from typing import Iterable

from .advertising import ConversationTurn
from .keywords import extract_keywords

DEFAULT_CONVERSATION_WINDOW = 5
# Turn i of the window weighs 2**i; the window is capped so weights stay small.
MAX_CONVERSATION_WINDOW = 16
TOP_CONVERSATION_KEYWORDS = 7

QUERY_CONTEXT_TERMS = 4
QUERY_MESSAGE_TERMS = 2
MAX_QUERY_TERMS = 5

_CONVERSATION_ROLES = frozenset({"user", "assistant"})


def extract_conversation_keywords(
    turns: Iterable[ConversationTurn],
    max_turns: int = DEFAULT_CONVERSATION_WINDOW,
) -> list[str]:
    """Rank keywords of the last ``max_turns`` user/assistant turns.

    The oldest retained turn contributes weight 1 to each of its keywords,
    the next one 2, then 4 and so on. Keywords are ordered by accumulated
    weight; ties keep the order in which keywords were first seen.
    """
    if not 1 <= max_turns <= MAX_CONVERSATION_WINDOW:
        raise ValueError(
            f"max_turns must be between 1 and {MAX_CONVERSATION_WINDOW}, got {max_turns}"
        )
    window = [turn for turn in turns if turn.role in _CONVERSATION_ROLES][-max_turns:]

    scores: dict[str, int] = {}
    for index, turn in enumerate(window):
        weight = 2 ** index
        for keyword in extract_keywords(turn.content):
            scores[keyword] = scores.get(keyword, 0) + weight

    ranked = sorted(scores, key=scores.__getitem__, reverse=True)
    return ranked[:TOP_CONVERSATION_KEYWORDS]


def build_conversation_query(current_message: str, conversation_keywords: list[str]) -> str:
    """Build the ad search query, biased toward conversation context."""
    message_keywords = extract_keywords(current_message)
    combined = conversation_keywords[:QUERY_CONTEXT_TERMS] + message_keywords[:QUERY_MESSAGE_TERMS]
    unique = list(dict.fromkeys(combined))
    return " ".join(unique[:MAX_QUERY_TERMS])
