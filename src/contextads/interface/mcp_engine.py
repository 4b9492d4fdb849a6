"""Engine entrypoint.

Starts the MCP engine server (LLM-host facing) on stdio.

Usage:
    python -m contextads.interface.mcp_engine
    # or via the script entrypoint:
    contextads-engine
"""

from __future__ import annotations

from ..config.runtime import get_settings
from .mcp.auth import require_engine_scope
from .mcp.observability import configure_logging
from .mcp.server import create_server


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    require_engine_scope(settings)
    server = create_server()
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
