"""MCP tools that query the text-generation backend."""

import asyncio
import logging
from typing import Any

from fastmcp import Context

from ..analysis import ProjectAnalyzer
from ..exceptions import CodeExplainerError
from ..llm import DocumentationClient

logger = logging.getLogger(__name__)


def register_assistant_tools(mcp) -> None:
    """Register documentation tools with the MCP server.

    Args:
        mcp: FastMCP server instance
    """

    @mcp.tool()
    async def explain_codebase(ctx: Context, directory: str) -> dict[str, Any]:
        """Generate an overview, per-component analysis and dependency graph for a project.

        The project is analyzed, chunked to fit the model's input budget and
        sent to the configured text-generation backend chunk by chunk.

        Args:
            directory: Absolute path of the project root

        Returns:
            {"success": true, "data": {"codeOutput": ..., "aiAnalysis": ...}}
            or {"success": false, "error": ...}
        """
        analyzer: ProjectAnalyzer = ctx.request_context.lifespan_context["analyzer"]
        client: DocumentationClient = ctx.request_context.lifespan_context["client"]
        try:
            analysis = await analyzer.analyze_project(directory)
            ai_analysis = await asyncio.to_thread(client.analyze_chunked_codebase, analysis.result)
        except CodeExplainerError as e:
            logger.error(f"Codebase explanation failed: {e.message}")
            return {"success": False, "error": e.message}

        return {
            "success": True,
            "data": {
                "codeOutput": analysis.result.to_context(),
                "aiAnalysis": ai_analysis,
            },
        }
