"""Vivos ad network adapter (AdSource port)."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..domain.advertising import CandidateAd
from ..exceptions import AdSourceError

_LOGGER = logging.getLogger("contextads.adapters.vivos")

DEFAULT_TIMEOUT_SECONDS = 10.0


class VivosAdSource:
    """Async client for the Vivos ad network.

    Issues a single GET per fetch with the keywords joined by spaces. There
    is no retry; every failure surfaces as ``AdSourceError``.
    """

    def __init__(
        self,
        base_url: str,
        publisher_key: str = "",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._base_url = base_url
        self._publisher_key = publisher_key
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._logger = logger or _LOGGER

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch(
        self,
        keywords: list[str],
        publisher_key: str | None = None,
    ) -> list[CandidateAd]:
        client = await self._ensure_client()
        params = {"keywords": " ".join(keywords)}
        key = publisher_key or self._publisher_key
        if key:
            params["publisher_key"] = key

        self._logger.info("ad_fetch_start", extra={"keywords": params["keywords"]})
        try:
            response = await client.get(self._base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise AdSourceError(
                f"Ad network HTTP error: {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise AdSourceError(f"Ad network request error: {e}") from e
        except ValueError as e:
            raise AdSourceError(f"Ad network returned invalid JSON: {e}") from e

        raw_ads = data.get("ads") if isinstance(data, dict) else None
        ads: list[CandidateAd] = []
        for index, item in enumerate(raw_ads or []):
            try:
                ads.append(_to_candidate(item))
            except (ValidationError, TypeError, ValueError) as e:
                self._logger.warning("ad_item_skipped", extra={"index": index, "error": str(e)})
        self._logger.info("ad_fetch_done", extra={"count": len(ads)})
        return ads


def _to_candidate(item: Any) -> CandidateAd:
    """Map one ad network record onto a CandidateAd."""
    if not isinstance(item, dict):
        raise TypeError(f"expected an object, got {type(item).__name__}")
    title = item.get("title")
    creative_id = item.get("id")
    return CandidateAd(
        title=title or "Sponsored Ad",
        link=item.get("target_url") or "#",
        snippet=item.get("message") or title or "Click to learn more",
        thumbnail=item.get("image_url") or None,
        source=title or "Sponsored",
        bid_value=float(item.get("cpc_bid") or 0),
        ad_creative_id=str(creative_id) if creative_id is not None else None,
        impression_url=item.get("impression_url") or None,
        click_url=item.get("click_url") or None,
        format=item.get("format") or None,
    )
