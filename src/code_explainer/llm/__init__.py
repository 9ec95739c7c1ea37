"""Text-generation collaborator: backends, request context and response validation."""

from .backend import OllamaBackend, TextGenerationBackend
from .client import (
    DocumentationClient,
    extract_json_object,
    prepare_context,
    validate_response_structure,
)

__all__ = [
    "DocumentationClient",
    "OllamaBackend",
    "TextGenerationBackend",
    "extract_json_object",
    "prepare_context",
    "validate_response_structure",
]
