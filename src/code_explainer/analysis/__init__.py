"""Project traversal, aggregation and context chunking."""

from .chunker import (
    DEFAULT_MAX_CHUNK_SIZE,
    TRUNCATED_BODY,
    ContextChunker,
    chunk_analysis,
    estimate_tokens,
)
from .project import ProjectAnalyzer, analyze_project
from .traverser import list_files_recursively

__all__ = [
    "DEFAULT_MAX_CHUNK_SIZE",
    "TRUNCATED_BODY",
    "ContextChunker",
    "ProjectAnalyzer",
    "analyze_project",
    "chunk_analysis",
    "estimate_tokens",
    "list_files_recursively",
]
