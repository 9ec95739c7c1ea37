"""Project-wide analysis: traverse, dispatch each file to its parser, aggregate."""

import asyncio
import logging
from pathlib import Path

from ..exceptions import FileSystemError
from ..parser.entities import (
    AnalysisResult,
    ClassEntity,
    FileFailure,
    FunctionEntity,
    ProjectAnalysis,
)
from ..parser.registry import ParserRegistry, create_default_registry
from .traverser import list_files_recursively

logger = logging.getLogger(__name__)


class ProjectAnalyzer:
    """Aggregate functions and classes across a directory tree.

    A file that fails to parse is recorded in ``ProjectAnalysis.failures`` and
    contributes nothing; the run only fails when the root itself is invalid.
    """

    def __init__(self, registry: ParserRegistry, max_concurrency: int = 1):
        """Initialize the analyzer.

        Args:
            registry: Parsers to dispatch files to
            max_concurrency: Files parsed at once. Results are merged in
                traversal order whatever the value.
        """
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")
        self._registry = registry
        self._max_concurrency = max_concurrency

    @property
    def registry(self) -> ParserRegistry:
        return self._registry

    async def analyze_project(self, root_path: Path | str) -> ProjectAnalysis:
        """Analyze every supported file under a directory.

        Args:
            root_path: Project root; surrounding whitespace is ignored

        Returns:
            Aggregated result plus the files that failed

        Raises:
            FileSystemError: If the root does not exist or cannot be read
        """
        root = Path(str(root_path).strip()).expanduser()
        if not root.exists():
            logger.error(f"Folder does not exist: {root}")
            raise FileSystemError(f"Folder does not exist: {root}", path=str(root))

        logger.info(f"Starting project analysis: {root}")
        files = list_files_recursively(root)
        code_files = [f for f in files if self._registry.can_handle(f)]
        logger.info(f"Found {len(files)} files, {len(code_files)} with a parser")

        if self._max_concurrency == 1:
            outcomes = [await self._analyze_file(f) for f in code_files]
        else:
            semaphore = asyncio.Semaphore(self._max_concurrency)

            async def bounded(file_path: Path) -> AnalysisResult | FileFailure:
                async with semaphore:
                    return await self._analyze_file(file_path)

            # gather keeps argument order, so merging below stays in traversal order
            outcomes = await asyncio.gather(*(bounded(f) for f in code_files))

        functions: list[FunctionEntity] = []
        classes: list[ClassEntity] = []
        failures: list[FileFailure] = []
        for outcome in outcomes:
            if isinstance(outcome, FileFailure):
                failures.append(outcome)
                continue
            functions.extend(outcome.functions)
            classes.extend(outcome.classes)

        logger.info(
            f"Analysis complete: {len(functions)} functions, {len(classes)} classes, "
            f"{len(failures)} failed files"
        )
        return ProjectAnalysis(
            result=AnalysisResult(functions=functions, classes=classes),
            failures=failures,
            files_scanned=len(files),
            files_analyzed=len(code_files),
        )

    async def _analyze_file(self, file_path: Path) -> AnalysisResult | FileFailure:
        """Parse one file, turning any failure into a FileFailure."""
        parser = self._registry.get_parser_for_file(file_path)
        if parser is None:
            logger.debug(f"No parser for {file_path}")
            return AnalysisResult()

        logger.debug(f"Analyzing {file_path} with {type(parser).__name__}")
        try:
            result = await parser.parse_file(file_path)
        except Exception as e:
            logger.error(f"Failed to analyze {file_path}: {e}")
            return FileFailure(file=str(file_path), error=str(e) or type(e).__name__)

        logger.debug(
            f"{file_path}: {len(result.functions)} functions, {len(result.classes)} classes"
        )
        return result


async def analyze_project(
    root_path: Path | str,
    registry: ParserRegistry | None = None,
    max_concurrency: int = 1,
) -> ProjectAnalysis:
    """Analyze a project with the given registry (default parsers if omitted)."""
    if registry is None:
        registry = create_default_registry()
    analyzer = ProjectAnalyzer(registry, max_concurrency)
    return await analyzer.analyze_project(root_path)
