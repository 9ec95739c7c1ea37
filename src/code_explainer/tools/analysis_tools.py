"""MCP tools for project and code analysis."""

import logging
from typing import Any

from fastmcp import Context

from ..analysis import ContextChunker, ProjectAnalyzer
from ..exceptions import CodeExplainerError
from ..parser import ParserRegistry, TreeSitterParser

logger = logging.getLogger(__name__)


def register_analysis_tools(mcp) -> None:
    """Register analysis tools with the MCP server.

    Args:
        mcp: FastMCP server instance
    """

    @mcp.tool()
    async def analyze_project(ctx: Context, directory: str) -> dict[str, Any]:
        """Extract functions and classes from every supported file in a directory.

        Files that fail to parse are listed under "failures" and do not
        stop the analysis.

        Args:
            directory: Absolute path of the project root

        Returns:
            {"success": true, "data": {...}} or {"success": false, "error": ...}
        """
        analyzer: ProjectAnalyzer = ctx.request_context.lifespan_context["analyzer"]
        try:
            analysis = await analyzer.analyze_project(directory)
        except CodeExplainerError as e:
            return {"success": False, "error": e.message}

        return {"success": True, "data": analysis.model_dump(mode="json", by_alias=True, exclude_none=True)}

    @mcp.tool()
    def analyze_code(ctx: Context, code: str, file_path: str) -> dict[str, Any]:
        """Extract functions and classes from a snippet of TypeScript or JavaScript.

        Args:
            code: Source code
            file_path: Name used to pick the language (e.g. "snippet.ts")

        Returns:
            {"success": true, "data": {...}} or {"success": false, "error": ...}
        """
        registry: ParserRegistry = ctx.request_context.lifespan_context["registry"]
        parser = registry.get_parser_for_file(file_path)
        if not isinstance(parser, TreeSitterParser):
            return {"success": False, "error": f"Unsupported file type: {file_path}"}

        try:
            result = parser.parse_source(code, file_path)
        except CodeExplainerError as e:
            return {"success": False, "error": e.message}

        return {"success": True, "data": result.to_context()}

    @mcp.tool()
    async def chunk_analysis(
        ctx: Context,
        directory: str,
        max_chunk_size: int | None = None,
    ) -> dict[str, Any]:
        """Analyze a directory and split the result into size-bounded chunks.

        Args:
            directory: Absolute path of the project root
            max_chunk_size: Budget per chunk in ~4-character units
                            (default: configured max_chunk_size)

        Returns:
            Chunks in order, with their estimated sizes
        """
        analyzer: ProjectAnalyzer = ctx.request_context.lifespan_context["analyzer"]
        chunker: ContextChunker = ctx.request_context.lifespan_context["chunker"]
        try:
            analysis = await analyzer.analyze_project(directory)
            chunks = chunker.chunk(analysis.result, max_chunk_size)
        except CodeExplainerError as e:
            return {"success": False, "error": e.message}
        except ValueError as e:
            return {"success": False, "error": str(e)}

        return {
            "success": True,
            "data": {
                "count": len(chunks),
                "sizes": [chunker.payload_size(chunk) for chunk in chunks],
                "chunks": [chunk.to_context() for chunk in chunks],
            },
        }
