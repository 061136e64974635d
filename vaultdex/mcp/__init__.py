"""MCP stdio transport for the vault service."""

from .server import handle_tool_call, main, serve

__all__ = ["handle_tool_call", "main", "serve"]
