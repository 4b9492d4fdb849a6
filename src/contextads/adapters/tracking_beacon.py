"""Fire-and-forget HTTP tracking beacon (TrackingBeacon port)."""

from __future__ import annotations

import asyncio
import logging

import httpx

_LOGGER = logging.getLogger("contextads.adapters.beacon")

DEFAULT_TIMEOUT_SECONDS = 5.0


class HttpTrackingBeacon:
    """GET tracking URLs in detached tasks.

    Failures are logged and never reach the caller. Pending tasks are
    referenced until they finish so they are not garbage collected mid-flight.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._logger = logger or _LOGGER
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def fire(self, url: str | None) -> None:
        if not url:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._logger.warning("beacon_dropped", extra={"url": url, "error": "no running event loop"})
            return
        task = loop.create_task(self._send(url))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for all in-flight beacons."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        await self.drain()
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _send(self, url: str) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.warning("beacon_failed", extra={"url": url, "error": str(e)})
        except Exception:
            self._logger.exception("beacon_failed", extra={"url": url})
        else:
            self._logger.debug("beacon_sent", extra={"url": url, "status": response.status_code})
