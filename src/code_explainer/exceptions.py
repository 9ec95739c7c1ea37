"""Exception hierarchy for project analysis and documentation queries."""

from typing import Any


class CodeExplainerError(Exception):
    """Base exception for all code-explainer errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class FileSystemError(CodeExplainerError):
    """Raised when the project root is missing or cannot be read."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message, {"path": path})
        self.path = path


class ParseError(CodeExplainerError):
    """Raised when a single source file cannot be parsed."""

    def __init__(self, message: str, file_path: str | None = None, line_number: int | None = None):
        super().__init__(message, {"file_path": file_path, "line_number": line_number})
        self.file_path = file_path
        self.line_number = line_number


class UnsupportedFileError(CodeExplainerError):
    """Raised when no registered parser accepts a file."""

    def __init__(self, file_path: str):
        super().__init__(f"No parser registered for file: {file_path}", {"file_path": file_path})
        self.file_path = file_path


class TextGenerationError(CodeExplainerError):
    """Raised when the text-generation backend fails or returns nothing usable."""


class InvalidResponseStructure(TextGenerationError):
    """Raised when a text-generation response does not match the expected schema."""

    def __init__(self, message: str, response: Any = None):
        super().__init__(message, {"response": response})
        self.response = response
