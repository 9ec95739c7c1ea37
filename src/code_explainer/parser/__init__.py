"""Parser module for extracting functions and classes from source files."""

from .base import LanguageParser
from .entities import (
    AnalysisResult,
    ClassEntity,
    FileFailure,
    FunctionEntity,
    Location,
    MethodEntity,
    Parameter,
    ProjectAnalysis,
    PropertyEntity,
)
from .languages import (
    IGNORED_DIRECTORIES,
    LANGUAGE_CONFIGS,
    LanguageConfig,
    get_language_config,
    get_language_for_file,
)
from .registry import ParserRegistry, create_default_registry
from .treesitter import JavaScriptParser, TreeSitterParser, TypeScriptParser
from .yaml_parser import YAMLParser

__all__ = [
    # Entities
    "AnalysisResult",
    "ClassEntity",
    "FileFailure",
    "FunctionEntity",
    "Location",
    "MethodEntity",
    "Parameter",
    "ProjectAnalysis",
    "PropertyEntity",
    # Languages
    "IGNORED_DIRECTORIES",
    "LANGUAGE_CONFIGS",
    "LanguageConfig",
    "get_language_config",
    "get_language_for_file",
    # Parsers
    "JavaScriptParser",
    "LanguageParser",
    "ParserRegistry",
    "TreeSitterParser",
    "TypeScriptParser",
    "YAMLParser",
    "create_default_registry",
]
