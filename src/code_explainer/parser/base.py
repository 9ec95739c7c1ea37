"""Capability interface shared by all language parsers."""

from abc import ABC, abstractmethod
from pathlib import Path

from .entities import AnalysisResult


class LanguageParser(ABC):
    """Abstract base class for language parsers.

    A parser declares which paths it accepts and turns an accepted file into
    an AnalysisResult. Files that cannot be parsed raise ParseError; callers
    decide whether that is fatal.
    """

    #: Human-readable language name, used in log messages.
    name: str = "unknown"

    #: Lower-case file suffixes this parser accepts.
    extensions: tuple[str, ...] = ()

    def can_handle(self, file_path: Path | str) -> bool:
        """Check if this parser accepts the given file.

        Args:
            file_path: Path to the file

        Returns:
            True if the file extension is one of ``extensions``
        """
        return Path(file_path).suffix.lower() in self.extensions

    @abstractmethod
    async def parse_file(self, file_path: Path | str) -> AnalysisResult:
        """Parse a file and return its functions and classes.

        Args:
            file_path: Path to the file to parse

        Returns:
            AnalysisResult for this file alone

        Raises:
            ParseError: If the file cannot be parsed
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(extensions={self.extensions!r})"
