"""Ordered dispatch from file paths to language parsers."""

import logging
from pathlib import Path
from typing import Iterable

from .base import LanguageParser
from .treesitter import JavaScriptParser, TypeScriptParser
from .yaml_parser import YAMLParser

logger = logging.getLogger(__name__)


class ParserRegistry:
    """Ordered collection of parsers.

    The first registered parser whose ``can_handle`` accepts a path wins, so
    registration order breaks ties between parsers with overlapping extensions.
    """

    def __init__(self, parsers: Iterable[LanguageParser] = ()):
        """Initialize the registry.

        Args:
            parsers: Parsers in priority order (highest first)
        """
        self._parsers: list[LanguageParser] = list(parsers)

    def register_parser(self, parser: LanguageParser) -> None:
        """Append a parser at the lowest priority.

        Args:
            parser: Parser to register
        """
        self._parsers.append(parser)
        logger.debug(f"Registered parser {parser!r}")

    def get_parser_for_file(self, file_path: Path | str) -> LanguageParser | None:
        """Select the parser for a file.

        Args:
            file_path: Path to the file

        Returns:
            The first parser that can handle the file, or None
        """
        for parser in self._parsers:
            if parser.can_handle(file_path):
                return parser
        return None

    def can_handle(self, file_path: Path | str) -> bool:
        """Check if any registered parser accepts the file."""
        return self.get_parser_for_file(file_path) is not None

    @property
    def parsers(self) -> tuple[LanguageParser, ...]:
        return tuple(self._parsers)

    def __len__(self) -> int:
        return len(self._parsers)


def create_default_registry() -> ParserRegistry:
    """Create a registry with the built-in TypeScript, JavaScript and YAML parsers."""
    return ParserRegistry([TypeScriptParser(), JavaScriptParser(), YAMLParser()])
