"""MCP server surface for the ContextAds engine."""

from .server import create_server
from .tools import ENGINE_ALLOWED_TOOLS, register_engine_tools

__all__ = ["ENGINE_ALLOWED_TOOLS", "create_server", "register_engine_tools"]
