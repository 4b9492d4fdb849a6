"""Port: external ad network."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..domain.advertising import CandidateAd


@runtime_checkable
class AdSource(Protocol):
    """Fetch candidate ads for a keyword list.

    Implementations raise ``AdSourceError`` on transport or payload failures
    and never retry.
    """

    async def fetch(
        self,
        keywords: list[str],
        publisher_key: str | None = None,
    ) -> list[CandidateAd]: ...
