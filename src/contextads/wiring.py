"""Composition root: single place where all wiring happens.

``build_engine_context()`` creates the process-wide state (cache, display
gate, click store) together with the services that share it. The server
creates one context at start-up; tests build a fresh one per test.
"""

from __future__ import annotations

from dataclasses import dataclass

from .adapters.tracking_beacon import HttpTrackingBeacon
from .adapters.vivos_ad_source import VivosAdSource
from .config.runtime import RuntimeSettings, get_settings
from .domain.display_policy import AdDisplayGate
from .domain.ranking_engine import RankingEngine
from .modules.analytics.store import ClickStore
from .modules.cache.store import AdCache
from .modules.cache.sweeper import CacheSweeper
from .ports.ad_source import AdSource
from .ports.beacon import TrackingBeacon
from .ports.clock import Clock
from .services.ad_service import AdSelectionService
from .services.chat_service import ChatTurnService


@dataclass
class EngineContext:
    """Shared state and services for one engine process."""

    settings: RuntimeSettings
    cache: AdCache
    gate: AdDisplayGate
    clicks: ClickStore
    ad_source: AdSource
    beacon: TrackingBeacon
    sweeper: CacheSweeper
    ad_service: AdSelectionService
    chat_service: ChatTurnService

    async def aclose(self) -> None:
        """Stop the sweeper and release HTTP clients."""
        await self.sweeper.stop()
        for resource in (self.beacon, self.ad_source):
            close = getattr(resource, "close", None)
            if close is not None:
                await close()


def build_engine_context(
    settings: RuntimeSettings | None = None,
    *,
    ad_source: AdSource | None = None,
    beacon: TrackingBeacon | None = None,
    clock: Clock | None = None,
) -> EngineContext:
    """Construct an EngineContext with real adapters unless overridden."""
    settings = settings or get_settings()
    cache = AdCache(
        max_entries=settings.cache_max_entries,
        ttl_seconds=settings.cache_ttl_seconds,
        recent_window=settings.recently_shown_size,
        clock=clock,
    )
    gate = AdDisplayGate(
        frequency=settings.ad_frequency,
        intent_threshold=settings.commercial_intent_threshold,
    )
    source = ad_source or VivosAdSource(
        base_url=settings.ad_network_url,
        publisher_key=settings.publisher_key,
        timeout=settings.ad_request_timeout_seconds,
    )
    tracker = beacon or HttpTrackingBeacon(timeout=settings.beacon_timeout_seconds)
    ad_service = AdSelectionService(
        ad_source=source,
        cache=cache,
        ranking_engine=RankingEngine(),
        beacon=tracker,
        max_candidates=settings.max_candidates,
        top_ads=settings.top_ads,
    )
    return EngineContext(
        settings=settings,
        cache=cache,
        gate=gate,
        clicks=ClickStore(max_events=settings.click_log_max),
        ad_source=source,
        beacon=tracker,
        sweeper=CacheSweeper(cache, interval_seconds=settings.cache_sweep_interval_seconds),
        ad_service=ad_service,
        chat_service=ChatTurnService(
            ad_service=ad_service,
            gate=gate,
            conversation_window=settings.conversation_window,
        ),
    )
