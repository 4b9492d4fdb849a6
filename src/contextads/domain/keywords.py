"""Keyword extraction and commercial-intent heuristics.

Keywords are lowercased unigrams longer than two characters that are not stop
words, plus bigrams of adjacent tokens where neither token is a stop word.
"""

from __future__ import annotations

import re

STOP_WORDS = frozenset({
    "i", "me", "my", "myself", "we", "our", "ours", "ourselves", "you", "your",
    "yours", "yourself", "yourselves", "he", "him", "his", "himself", "she",
    "her", "hers", "herself", "it", "its", "itself", "they", "them", "their",
    "theirs", "themselves", "what", "which", "who", "whom", "this", "that",
    "these", "those", "am", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "having", "do", "does", "did", "doing", "a", "an",
    "the", "and", "but", "if", "or", "because", "as", "until", "while", "of",
    "at", "by", "for", "with", "about", "against", "between", "into", "through",
    "during", "before", "after", "above", "below", "to", "from", "up", "down",
    "in", "out", "on", "off", "over", "under", "again", "further", "then",
    "once", "here", "there", "when", "where", "why", "how", "all", "both",
    "each", "few", "more", "most", "other", "some", "such", "no", "nor", "not",
    "only", "own", "same", "so", "than", "too", "very", "s", "t", "can", "will",
    "just", "don", "should", "now",
    # chat filler
    "want", "need", "looking", "get", "help",
})

COMMERCIAL_INTENT_TERMS = frozenset({
    "buy", "purchase", "shop", "order", "price", "cost", "deal", "discount",
    "sale", "cheap", "best", "review", "recommend", "store", "online",
})

INTENT_TERM_WEIGHT = 0.2
PRODUCT_MATCH_WEIGHT = 0.3
MAX_INTENT = 1.0
DEFAULT_QUERY_TERMS = 5

_NON_WORD_RE = re.compile(r"[^\w\s]")
_PRODUCT_RE = re.compile(
    r"\b(laptop|phone|shoes|camera|headphone|watch|tv|book|game|computer)\b",
    re.IGNORECASE,
)


def _significant_tokens(text: str) -> list[str]:
    """Lowercase, blank out punctuation, keep tokens longer than two chars."""
    cleaned = _NON_WORD_RE.sub(" ", (text or "").lower())
    return [token for token in cleaned.split() if len(token) > 2]


def extract_keywords(text: str) -> list[str]:
    """Return the deduplicated unigrams and bigrams of ``text``.

    Unigrams come first in order of appearance, followed by bigrams. Bigrams
    pair adjacent tokens of the length-filtered stream, so two content words
    separated only by a short word (e.g. "a") still form a bigram.
    """
    tokens = _significant_tokens(text)
    unigrams = [token for token in tokens if token not in STOP_WORDS]
    bigrams = [
        f"{left} {right}"
        for left, right in zip(tokens, tokens[1:])
        if left not in STOP_WORDS and right not in STOP_WORDS
    ]
    return list(dict.fromkeys(unigrams + bigrams))


def calculate_commercial_intent(text: str) -> float:
    """Heuristic purchase-readiness score in [0, 1].

    Each whitespace token found in the intent lexicon adds 0.2 and a product
    category mention adds 0.3. The sum saturates at 1.0.
    """
    text = text or ""
    score = sum(INTENT_TERM_WEIGHT for word in text.lower().split() if word in COMMERCIAL_INTENT_TERMS)
    if _PRODUCT_RE.search(text):
        score += PRODUCT_MATCH_WEIGHT
    return round(min(score, MAX_INTENT), 3)


def build_search_query(keywords: list[str], limit: int = DEFAULT_QUERY_TERMS) -> str:
    """Join the first ``limit`` keywords into a search string."""
    return " ".join(keywords[:limit])
