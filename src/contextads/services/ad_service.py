"""AdSelectionService: fetch, rank, cache and suppress repeats."""

from __future__ import annotations

import logging

from ..domain.advertising import ScoredAd
from ..domain.ranking_engine import RankingEngine
from ..exceptions import AdSourceError
from ..models.requests import AdRequest, PublisherAdRequest
from ..models.responses import AdSelection
from ..modules.cache.store import AdCache
from ..ports.ad_source import AdSource
from ..ports.beacon import TrackingBeacon

_LOGGER = logging.getLogger("contextads.services.ads")

DEFAULT_MAX_CANDIDATES = 8
DEFAULT_TOP_ADS = 5


def _context_keywords(text: str) -> list[str]:
    """Whitespace tokens longer than two characters, lowercased."""
    return [word for word in text.lower().split() if len(word) > 2]


class AdSelectionService:
    """Orchestrates ad selection on top of the cache and the ad source."""

    def __init__(
        self,
        ad_source: AdSource,
        cache: AdCache,
        ranking_engine: RankingEngine | None = None,
        beacon: TrackingBeacon | None = None,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
        top_ads: int = DEFAULT_TOP_ADS,
        logger: logging.Logger | None = None,
    ) -> None:
        self._source = ad_source
        self._cache = cache
        self._ranking = ranking_engine or RankingEngine()
        self._beacon = beacon
        self._max_candidates = max_candidates
        self._top_ads = top_ads
        self._logger = logger or _LOGGER

    async def select(self, request: AdRequest) -> AdSelection:
        """Select an ad for ``request.query``.

        A cached winner is reused unless it was shown recently; otherwise fresh
        candidates are fetched, ranked, and the new winner is cached and
        marked as shown.
        """
        keywords = request.keywords or _context_keywords(request.query)
        self._logger.info("ad_request", extra={"query": request.query, "keywords": keywords})

        cached = self._cache.get(request.query)
        if cached is not None and not self._cache.was_recently_shown(cached.title):
            self._cache.mark_as_shown(cached.title)
            self._logger.info("ad_cache_hit", extra={"query": request.query, "title": cached.title})
            return AdSelection(
                ad=cached,
                total_ads=1,
                source="cache",
                query=request.query,
                keywords=keywords,
            )

        ranked = await self._fetch_ranked(keywords)
        if not ranked:
            return AdSelection(source="none", query=request.query, keywords=keywords)

        top = ranked[: self._top_ads]
        winner = top[0]
        self._cache.set(request.query, winner)
        self._cache.mark_as_shown(winner.title)
        self._logger.info(
            "ad_selected",
            extra={
                "title": winner.title,
                "bid_value": winner.bid_value,
                "combined_score": winner.combined_score,
                "relevance_score": winner.relevance_score,
                "recommendations": len(top) - 1,
            },
        )
        return AdSelection(
            ad=winner,
            recommendations=top,
            total_ads=len(ranked),
            source="network",
            query=request.query,
            keywords=keywords,
        )

    async def lookup(self, request: PublisherAdRequest) -> AdSelection:
        """Uncached lookup for a publisher context; fires the impression beacon."""
        keywords = _context_keywords(request.context)
        ranked = await self._fetch_ranked(keywords, publisher_key=request.publisher_key)
        if not ranked:
            return AdSelection(source="none", query=request.context, keywords=keywords)

        top = ranked[: self._top_ads]
        winner = top[0]
        if self._beacon is not None:
            self._beacon.fire(winner.impression_url)
        return AdSelection(
            ad=winner,
            recommendations=top[1:],
            total_ads=len(ranked),
            source="network",
            query=request.context,
            keywords=keywords,
        )

    async def _fetch_ranked(
        self,
        keywords: list[str],
        publisher_key: str | None = None,
    ) -> list[ScoredAd]:
        try:
            candidates = await self._source.fetch(keywords, publisher_key=publisher_key)
        except AdSourceError as e:
            self._logger.warning("ad_source_failed", extra={"error": str(e), "status_code": e.status_code})
            return []
        if not candidates:
            self._logger.info("ad_source_empty", extra={"keywords": keywords})
            return []
        ranked = self._ranking.rank(candidates[: self._max_candidates], keywords)
        self._log_ranking(ranked)
        return ranked

    def _log_ranking(self, ranked: list[ScoredAd]) -> None:
        if not self._logger.isEnabledFor(logging.DEBUG):
            return
        for rank, ad in enumerate(ranked, start=1):
            self._logger.debug(
                "ad_rank",
                extra={
                    "rank": rank,
                    "combined_score": ad.combined_score,
                    "relevance_score": ad.relevance_score,
                    "bid_value": ad.bid_value,
                    "title": ad.title,
                },
            )
