"""Tree-sitter parsers for extracting functions and classes from TypeScript and JavaScript."""

import asyncio
import logging
import re
from pathlib import Path

from tree_sitter import Node, Parser, Query, QueryCursor

from ..exceptions import ParseError, UnsupportedFileError
from .base import LanguageParser
from .entities import (
    AnalysisResult,
    ClassEntity,
    FunctionEntity,
    Location,
    MethodEntity,
    Parameter,
    PropertyEntity,
)
from .languages import LanguageConfig, get_language_config, get_language_for_file

logger = logging.getLogger(__name__)

UNRESOLVED_TYPE = "any"
ANONYMOUS = "<anonymous>"


class TreeSitterParser(LanguageParser):
    """Parser for extracting code entities using Tree-sitter.

    Subclasses pick the grammars they cover through ``languages``; the
    extraction rules are shared because the TypeScript grammar extends the
    JavaScript one.
    """

    languages: tuple[str, ...] = ()

    def __init__(self) -> None:
        self._queries: dict[str, dict[str, Query]] = {}
        self._configs: dict[str, LanguageConfig] = {}
        self._init_parsers()
        self.extensions = tuple(
            ext for lang in self.languages for ext in self._configs[lang].extensions
        )

    def _init_parsers(self) -> None:
        """Load language configurations and compile queries for this parser's languages."""
        for lang_name in self.languages:
            config = get_language_config(lang_name)
            if config is None:
                raise ValueError(f"No language configuration for: {lang_name}")
            self._configs[lang_name] = config

            # Pre-compile queries
            self._queries[lang_name] = {
                "function": Query(config.language, config.function_query),
                "class": Query(config.language, config.class_query),
            }

    async def parse_file(self, file_path: Path | str) -> AnalysisResult:
        """Read and parse a source file.

        Args:
            file_path: Path to the file to parse

        Returns:
            Functions and classes declared in the file

        Raises:
            ParseError: If the file cannot be read or contains syntax errors
        """
        file_path = Path(file_path)
        try:
            source = await asyncio.to_thread(file_path.read_bytes)
        except OSError as e:
            raise ParseError(f"Failed to read file {file_path}: {e}", file_path=str(file_path)) from e

        return await asyncio.to_thread(self.parse_source, source, file_path)

    def parse_source(self, source: bytes | str, file_path: Path | str) -> AnalysisResult:
        """Parse in-memory source code as if it were stored at ``file_path``.

        Args:
            source: Source code
            file_path: Path used to choose the grammar and fill in locations

        Returns:
            Functions and classes declared in the source
        """
        language = get_language_for_file(file_path)
        if language not in self._configs:
            raise UnsupportedFileError(str(file_path))

        if isinstance(source, str):
            source = source.encode("utf-8")

        config = self._configs[language]
        # Parser objects are not shared between threads; queries are read-only
        tree = Parser(config.language).parse(source)
        root = tree.root_node

        if root.has_error:
            error_node = self._find_error_node(root)
            line = error_node.start_point[0] + 1 if error_node else None
            raise ParseError(
                f"Syntax error in {file_path}" + (f" at line {line}" if line else ""),
                file_path=str(file_path),
                line_number=line,
            )

        functions = self._extract_functions(root, source, str(file_path), config)
        classes = self._extract_classes(root, source, str(file_path), config)
        logger.debug(
            f"Parsed {file_path}: {len(functions)} functions, {len(classes)} classes"
        )
        return AnalysisResult(functions=functions, classes=classes)

    def _run_query(self, query: Query, node: Node) -> list[dict[str, list[Node]]]:
        """Run a query and return the captures of each match, in source order."""
        cursor = QueryCursor(query)
        matches = [captures for _, captures in cursor.matches(node)]
        return sorted(matches, key=lambda captures: self._match_start(captures))

    @staticmethod
    def _match_start(captures: dict[str, list[Node]]) -> int:
        return min(nodes[0].start_byte for nodes in captures.values() if nodes)

    def _extract_functions(
        self,
        root: Node,
        source: bytes,
        file_path: str,
        config: LanguageConfig,
    ) -> list[FunctionEntity]:
        """Extract function definitions from the AST."""
        functions: list[FunctionEntity] = []
        query = self._queries[config.name]["function"]

        for captures in self._run_query(query, root):
            def_nodes = captures.get("function.def", [])
            name_nodes = captures.get("function.name", [])
            if not def_nodes or not name_nodes:
                continue

            functions.append(
                self._build_function(
                    def_nodes[0],
                    self._node_text(name_nodes[0], source),
                    source,
                    file_path,
                    config,
                )
            )

        return functions

    def _extract_classes(
        self,
        root: Node,
        source: bytes,
        file_path: str,
        config: LanguageConfig,
    ) -> list[ClassEntity]:
        """Extract class definitions from the AST."""
        classes: list[ClassEntity] = []
        query = self._queries[config.name]["class"]

        for captures in self._run_query(query, root):
            def_nodes = captures.get("class.def", [])
            name_nodes = captures.get("class.name", [])
            if not def_nodes or not name_nodes:
                continue

            def_node = def_nodes[0]
            methods: list[MethodEntity] = []
            properties: list[PropertyEntity] = []

            body_node = def_node.child_by_field_name("body")
            if body_node is not None:
                for member in body_node.named_children:
                    if member.type == "method_definition":
                        name_node = member.child_by_field_name("name")
                        method_name = self._node_text(name_node, source) or ANONYMOUS
                        methods.append(
                            self._build_function(
                                member, method_name, source, file_path, config, MethodEntity
                            )
                        )
                    elif member.type in config.property_node_types:
                        properties.append(self._build_property(member, source, config))

            classes.append(
                ClassEntity(
                    name=self._node_text(name_nodes[0], source),
                    methods=methods,
                    properties=properties,
                    documentation=self._extract_documentation(def_node, source),
                    location=self._location(def_node, file_path),
                )
            )

        return classes

    def _build_function(
        self,
        node: Node,
        name: str,
        source: bytes,
        file_path: str,
        config: LanguageConfig,
        entity_cls: type[FunctionEntity] = FunctionEntity,
    ) -> FunctionEntity:
        """Build a function or method entity from its definition node."""
        body_node = node.child_by_field_name("body")
        return entity_cls(
            name=name,
            parameters=self._extract_parameters(node, source, config),
            return_type=self._extract_return_type(node, source, config),
            body=self._node_text(body_node if body_node is not None else node, source),
            documentation=self._extract_documentation(node, source),
            location=self._location(node, file_path),
        )

    def _build_property(self, node: Node, source: bytes, config: LanguageConfig) -> PropertyEntity:
        """Build a property entity from a class field definition."""
        name_node = node.child_by_field_name(config.property_name_field)
        type_text = UNRESOLVED_TYPE
        if config.typed:
            type_node = node.child_by_field_name("type")
            if type_node is not None:
                type_text = self._annotation_text(type_node, source)

        return PropertyEntity(
            name=self._node_text(name_node, source) or ANONYMOUS,
            type=type_text,
            documentation=self._extract_documentation(node, source),
        )

    def _extract_parameters(
        self, node: Node, source: bytes, config: LanguageConfig
    ) -> list[Parameter]:
        """Extract ordered parameters from a function-like node."""
        params_node = node.child_by_field_name("parameters")
        if params_node is None:
            # Arrow function with a single bare parameter: x => x * 2
            single = node.child_by_field_name("parameter")
            if single is None:
                return []
            return [Parameter(name=self._node_text(single, source), type=UNRESOLVED_TYPE)]

        parameters: list[Parameter] = []
        for child in params_node.named_children:
            if child.type == "comment":
                continue

            type_text = UNRESOLVED_TYPE
            if child.type in {"required_parameter", "optional_parameter"}:
                pattern = child.child_by_field_name("pattern")
                name = self._pattern_name(pattern if pattern is not None else child, source)
                type_node = child.child_by_field_name("type")
                if config.typed and type_node is not None:
                    type_text = self._annotation_text(type_node, source)
            else:
                name = self._pattern_name(child, source)

            parameters.append(Parameter(name=name, type=type_text))

        return parameters

    def _pattern_name(self, node: Node, source: bytes) -> str:
        """Get the bound name of a parameter pattern.

        Defaults and rest parameters resolve to their identifier; destructuring
        patterns keep their source text.
        """
        if node.type == "assignment_pattern":
            left = node.child_by_field_name("left")
            if left is not None:
                return self._pattern_name(left, source)
        elif node.type == "rest_pattern":
            for child in node.named_children:
                if child.type == "identifier":
                    return self._node_text(child, source)
        return self._node_text(node, source)

    def _extract_return_type(self, node: Node, source: bytes, config: LanguageConfig) -> str:
        """Get the declared return type, or the unresolved sentinel."""
        if not config.typed:
            return UNRESOLVED_TYPE
        return_node = node.child_by_field_name("return_type")
        if return_node is None:
            return UNRESOLVED_TYPE
        return self._annotation_text(return_node, source)

    def _annotation_text(self, node: Node, source: bytes) -> str:
        """Strip the leading colon of a type annotation."""
        return self._node_text(node, source).lstrip(":").strip() or UNRESOLVED_TYPE

    def _extract_documentation(self, node: Node, source: bytes) -> str:
        """Extract the block comments immediately preceding a declaration."""
        anchor = self._documentation_anchor(node)

        prev = anchor.prev_sibling
        while prev is not None and prev.type == "decorator":
            prev = prev.prev_sibling

        comments: list[str] = []
        while prev is not None and prev.type == "comment":
            text = self._node_text(prev, source)
            if not text.startswith("/*"):
                break
            comments.append(self._clean_comment(text))
            prev = prev.prev_sibling

        return "\n".join(reversed(comments))

    def _documentation_anchor(self, node: Node) -> Node:
        """Find the statement a documentation comment would be attached to."""
        anchor = node
        parent = anchor.parent
        if parent is not None and parent.type == "variable_declarator":
            anchor = parent
            parent = anchor.parent
            if parent is not None and parent.type in {"lexical_declaration", "variable_declaration"}:
                anchor = parent
                parent = anchor.parent
        if parent is not None and parent.type == "export_statement":
            anchor = parent
        return anchor

    @staticmethod
    def _clean_comment(text: str) -> str:
        """Remove comment delimiters and leading asterisks."""
        text = re.sub(r"^/\*\*?", "", text)
        text = re.sub(r"\*/$", "", text)
        lines = [re.sub(r"^\s*\*(?!/)\s?", "", line) for line in text.splitlines()]
        return "\n".join(lines).strip()

    def _find_error_node(self, node: Node) -> Node | None:
        """Find the first ERROR or MISSING node below ``node``."""
        if node.is_error or node.is_missing:
            return node
        for child in node.children:
            if child.has_error or child.is_missing:
                found = self._find_error_node(child)
                if found is not None:
                    return found
        return None

    def _location(self, node: Node, file_path: str) -> Location:
        return Location(
            file=file_path,
            start_line=node.start_point[0] + 1,
            end_line=node.end_point[0] + 1,
        )

    def _node_text(self, node: Node | None, source: bytes) -> str:
        """Get the text content of a node."""
        if node is None:
            return ""
        return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


class TypeScriptParser(TreeSitterParser):
    """Parser for ``.ts`` and ``.tsx`` files."""

    name = "typescript"
    languages = ("typescript", "tsx")


class JavaScriptParser(TreeSitterParser):
    """Parser for ``.js`` and ``.jsx`` files. Types are never resolved."""

    name = "javascript"
    languages = ("javascript",)
