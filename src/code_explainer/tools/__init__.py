"""MCP tools for code analysis and documentation."""

from .analysis_tools import register_analysis_tools
from .assistant_tools import register_assistant_tools


def register_all_tools(mcp) -> None:
    """Register all MCP tools with the server.

    Args:
        mcp: FastMCP server instance
    """
    register_analysis_tools(mcp)
    register_assistant_tools(mcp)


__all__ = [
    "register_all_tools",
    "register_analysis_tools",
    "register_assistant_tools",
]
