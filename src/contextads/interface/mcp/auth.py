"""MCP auth: gate the engine behind an optional shared key."""

from __future__ import annotations

import os

from ...config.runtime import RuntimeSettings, get_settings


def require_engine_scope(settings: RuntimeSettings | None = None) -> None:
    """Require engine scope. Raises PermissionError if not allowed."""
    settings = settings or get_settings()
    if not settings.require_engine_key:
        return
    if not os.environ.get("MCP_ENGINE_KEY"):
        raise PermissionError("Engine requires MCP_ENGINE_KEY to be set")
