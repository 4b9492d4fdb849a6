"""MCP server factory.

Creates the engine server bound to one EngineContext. The context's cache
sweeper runs for the lifetime of the server.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP

from ...wiring import EngineContext, build_engine_context
from .tools import register_engine_tools

_SERVER_NAME = "contextads-engine"


def create_server(context: EngineContext | None = None) -> FastMCP:
    """Build and return a configured FastMCP server.

    Args:
        context: Shared engine state; a fresh one is built from settings
            when omitted.

    Returns:
        A FastMCP instance with the engine tools registered.
    """
    context = context or build_engine_context()

    @asynccontextmanager
    async def lifespan(_server: FastMCP) -> AsyncIterator[EngineContext]:
        context.sweeper.start()
        try:
            yield context
        finally:
            await context.aclose()

    server = FastMCP(_SERVER_NAME, lifespan=lifespan)
    register_engine_tools(server, context)
    return server


if __name__ == "__main__":
    create_server().run(transport="stdio")
