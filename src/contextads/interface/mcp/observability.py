"""Observability: structured logs (trace_id, tool, latency_ms), optional metrics stub."""

from __future__ import annotations

import logging
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

_LOGGER = logging.getLogger("contextads.mcp")

# Optional metrics stub: tool_calls[name] = count, errors[name] = count
METRICS: dict[str, dict[str, int]] = {"tool_calls": {}, "errors": {}}


def configure_logging(level: str = "INFO") -> None:
    """Send JSON log lines for the ``contextads`` loggers to stderr.

    stdout is reserved for the stdio MCP transport.
    """
    root = logging.getLogger("contextads")
    root.setLevel(level)
    if root.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "@timestamp", "levelname": "log_level"},
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)


def log_tool_invocation(
    tool: str,
    trace_id: str | None,
    latency_ms: float,
    error: str | None = None,
    extra: dict[str, Any] | None = None,
) -> None:
    """Emit structured log and update metrics stub."""
    payload: dict[str, Any] = {
        "tool": tool,
        "trace_id": trace_id,
        "latency_ms": round(latency_ms, 2),
    }
    if error:
        payload["error"] = error
    if extra:
        payload.update(extra)
    _LOGGER.info("tool_invocation", extra=payload)
    METRICS["tool_calls"][tool] = METRICS["tool_calls"].get(tool, 0) + 1
    if error:
        METRICS["errors"][tool] = METRICS["errors"].get(tool, 0) + 1


def metrics_snapshot() -> dict[str, dict[str, int]]:
    """Return current metrics (for the cache stats tool)."""
    return {k: dict(v) for k, v in METRICS.items()}
