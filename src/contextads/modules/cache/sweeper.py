"""Periodic background sweep of expired cache entries."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from .store import AdCache

DEFAULT_SWEEP_INTERVAL_SECONDS = 10 * 60

_LOGGER = logging.getLogger("contextads.cache")


class CacheSweeper:
    """Run ``AdCache.cleanup`` on a fixed timer, independent of traffic."""

    def __init__(
        self,
        cache: AdCache,
        interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        logger: logging.Logger | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self._cache = cache
        self._interval = interval_seconds
        self._logger = logger or _LOGGER
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    def sweep_once(self) -> int:
        """Run one sweep; failures are logged and reported as zero removals."""
        try:
            removed = self._cache.cleanup()
        except Exception:
            self._logger.exception("cache_sweep_failed")
            return 0
        if removed:
            self._logger.info("cache_sweep", extra={"removed": removed, "size": len(self._cache)})
        return removed

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.sweep_once()
