"""MCP tool definitions and server wiring."""

from cardoracle.mcp.server import create_mcp_server, open_tool_context
from cardoracle.mcp.tools import TOOL_DEFINITIONS, ToolContext, ToolDefinition, execute_tool

__all__ = [
    "TOOL_DEFINITIONS",
    "ToolContext",
    "ToolDefinition",
    "create_mcp_server",
    "execute_tool",
    "open_tool_context",
]
