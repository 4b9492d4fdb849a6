"""Delivery surfaces: MCP engine server and CLI."""
