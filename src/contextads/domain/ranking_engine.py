"""RankingEngine: relevance + bid scoring of candidate ads."""

from __future__ import annotations

from typing import Iterable, Sequence

from .advertising import CandidateAd, ScoredAd

DEFAULT_RELEVANCE_WEIGHT = 0.7
DEFAULT_BID_CEILING = 10.0
FALLBACK_KEYWORD = "general"
SCORE_PRECISION = 3


class RankingEngine:
    """Score candidate ads against a keyword set and order them best first.

    ``relevance`` is the share of keywords contained (as substrings) in the ad
    text; ``bid`` is the bid divided by ``bid_ceiling``, saturating at 1.0.
    The combined score blends them ``relevance_weight : 1 - relevance_weight``.
    """

    def __init__(
        self,
        relevance_weight: float = DEFAULT_RELEVANCE_WEIGHT,
        bid_ceiling: float = DEFAULT_BID_CEILING,
        fallback_keyword: str = FALLBACK_KEYWORD,
    ) -> None:
        if not 0.0 <= relevance_weight <= 1.0:
            raise ValueError(f"relevance_weight must be within [0, 1], got {relevance_weight}")
        if bid_ceiling <= 0:
            raise ValueError(f"bid_ceiling must be positive, got {bid_ceiling}")
        self._relevance_weight = relevance_weight
        self._bid_weight = 1.0 - relevance_weight
        self._bid_ceiling = bid_ceiling
        self._fallback = fallback_keyword.lower()

    def rank(self, candidates: Sequence[CandidateAd], keywords: Iterable[str]) -> list[ScoredAd]:
        """Return scored copies of ``candidates``, highest combined score first."""
        terms = self._normalize_keywords(keywords)
        scored = [self._score(ad, terms) for ad in candidates]
        # list.sort is stable, so equal scores keep their input order
        scored.sort(key=lambda ad: ad.combined_score, reverse=True)
        return scored

    def _normalize_keywords(self, keywords: Iterable[str]) -> list[str]:
        terms = list(dict.fromkeys(k.strip().lower() for k in keywords if k and k.strip()))
        return terms or [self._fallback]

    def _score(self, ad: CandidateAd, terms: list[str]) -> ScoredAd:
        text = ad.match_text
        matches = sum(1 for term in terms if term in text)
        relevance = matches / len(terms)
        bid_normalized = min(ad.bid_value / self._bid_ceiling, 1.0)
        combined = self._relevance_weight * relevance + self._bid_weight * bid_normalized

        payload = ad.model_dump()
        payload.update(
            relevance_score=round(relevance, SCORE_PRECISION),
            combined_score=min(1.0, round(combined, SCORE_PRECISION)),
            matching_keywords=matches,
        )
        return ScoredAd.model_validate(payload)


_DEFAULT_ENGINE = RankingEngine()


def score_ads(candidates: Sequence[CandidateAd], keywords: Iterable[str]) -> list[ScoredAd]:
    """Rank ``candidates`` with the default 70/30 relevance/bid weighting."""
    return _DEFAULT_ENGINE.rank(candidates, keywords)
