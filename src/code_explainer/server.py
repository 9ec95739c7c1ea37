"""FastMCP server for Code Explainer - project analysis and LLM documentation."""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP

from .analysis import ContextChunker, ProjectAnalyzer
from .config import Settings, setup_logging
from .llm import DocumentationClient, OllamaBackend
from .parser import create_default_registry
from .tools import register_all_tools

logger = logging.getLogger(__name__)


def build_context(config: Settings) -> dict[str, Any]:
    """Wire the analysis pipeline from configuration.

    Args:
        config: Application settings

    Returns:
        Context dict shared with the tools
    """
    registry = create_default_registry()
    analyzer = ProjectAnalyzer(registry, max_concurrency=config.max_concurrency)
    chunker = ContextChunker(config.max_chunk_size)
    client = DocumentationClient(OllamaBackend.from_config(config), chunker)

    return {
        "config": config,
        "registry": registry,
        "analyzer": analyzer,
        "chunker": chunker,
        "client": client,
    }


@asynccontextmanager
async def lifespan(server: FastMCP):
    """Manage server lifecycle - initialize and cleanup resources."""
    try:
        config = Settings()
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise

    setup_logging(config.log_level)
    logger.info(f"Starting Code Explainer (chunk budget {config.max_chunk_size})")

    context = build_context(config)
    logger.info(f"Parsers: {', '.join(repr(p) for p in context['registry'].parsers)}")

    yield context

    logger.info("Code Explainer stopped")


# Create the MCP server
mcp = FastMCP("Code Explainer", lifespan=lifespan)

# Register all tools
register_all_tools(mcp)


def main():
    """Entry point for the Code Explainer MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
