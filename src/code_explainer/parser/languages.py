"""Language configurations for Tree-sitter parsing."""

from dataclasses import dataclass
from pathlib import Path

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language


@dataclass
class LanguageConfig:
    """Configuration for a programming language."""

    name: str
    extensions: tuple[str, ...]
    language: Language
    # Tree-sitter query patterns for extracting entities
    function_query: str
    class_query: str
    # Class body members that declare properties, and the field holding their name
    property_node_types: frozenset[str]
    property_name_field: str
    # Whether parameter/return type annotations can be read from the tree
    typed: bool = False


# Tree-sitter query patterns shared by TypeScript and JavaScript.
# Only top-level function and generator declarations are collected; arrow
# functions and function or generator expressions are collected at any depth
# when bound to a variable.
FUNCTION_QUERY = """
; Top-level function declaration: function foo() {} / function* gen() {}
(program
  [
    (function_declaration
      name: (identifier) @function.name)
    (generator_function_declaration
      name: (identifier) @function.name)
  ] @function.def
)

; Exported function declaration: export function foo() {}
(program
  (export_statement
    declaration: [
      (function_declaration
        name: (identifier) @function.name)
      (generator_function_declaration
        name: (identifier) @function.name)
    ] @function.def
  )
)

; Variable-bound function: const foo = () => {} / const foo = function() {}
(variable_declarator
  name: (identifier) @function.name
  value: [
    (arrow_function)
    (function_expression)
    (generator_function)
  ] @function.def
)
"""

# TypeScript names classes with type_identifier
TS_CLASS_QUERY = """
(class_declaration
  name: (type_identifier) @class.name
) @class.def

(abstract_class_declaration
  name: (type_identifier) @class.name
) @class.def
"""

# JavaScript class query (uses identifier, not type_identifier)
JS_CLASS_QUERY = """
(class_declaration
  name: (identifier) @class.name
) @class.def
"""


def _create_language_configs() -> dict[str, LanguageConfig]:
    """Create language configurations with Tree-sitter languages."""
    return {
        "typescript": LanguageConfig(
            name="typescript",
            extensions=(".ts",),
            language=Language(tsts.language_typescript()),
            function_query=FUNCTION_QUERY,
            class_query=TS_CLASS_QUERY,
            property_node_types=frozenset({"public_field_definition"}),
            property_name_field="name",
            typed=True,
        ),
        "tsx": LanguageConfig(
            name="tsx",
            extensions=(".tsx",),
            language=Language(tsts.language_tsx()),
            function_query=FUNCTION_QUERY,
            class_query=TS_CLASS_QUERY,
            property_node_types=frozenset({"public_field_definition"}),
            property_name_field="name",
            typed=True,
        ),
        "javascript": LanguageConfig(
            name="javascript",
            extensions=(".js", ".jsx"),
            language=Language(tsjs.language()),
            function_query=FUNCTION_QUERY,
            class_query=JS_CLASS_QUERY,
            property_node_types=frozenset({"field_definition"}),
            property_name_field="property",
        ),
    }


# Singleton instance of language configs
LANGUAGE_CONFIGS = _create_language_configs()

# Map file extensions to language names
EXTENSION_TO_LANGUAGE: dict[str, str] = {}
for lang_name, config in LANGUAGE_CONFIGS.items():
    for ext in config.extensions:
        EXTENSION_TO_LANGUAGE[ext] = lang_name


def get_language_for_file(file_path: Path | str) -> str | None:
    """Get the language name for a file based on its extension.

    Args:
        file_path: Path to the file

    Returns:
        Language name or None if not supported
    """
    return EXTENSION_TO_LANGUAGE.get(Path(file_path).suffix.lower())


def get_language_config(language: str) -> LanguageConfig | None:
    """Get the language configuration for a language.

    Args:
        language: Language name

    Returns:
        LanguageConfig or None if not supported
    """
    return LANGUAGE_CONFIGS.get(language)


# Directory names pruned during traversal, together with everything below them
IGNORED_DIRECTORIES = frozenset({
    "node_modules",
    ".git",
    "dist",
    ".idea",
    ".vscode",
})
