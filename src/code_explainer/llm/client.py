"""Documentation queries against a text-generation backend.

The client serializes a (chunked) analysis as request context, asks the backend
for a JSON answer and rejects answers that do not have the expected shape.
"""

import copy
import json
import logging
import re
from datetime import datetime, timezone
from pathlib import PurePath
from typing import Any

from ..analysis.chunker import DEFAULT_MAX_CHUNK_SIZE, TRUNCATED_BODY, ContextChunker
from ..exceptions import InvalidResponseStructure
from ..parser.entities import AnalysisResult
from .backend import TextGenerationBackend

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a documentation assistant that analyzes code and answers with structured JSON only.
Never add text before or after the JSON object.

Expected response format:
{
  "analysis": {
    "functions": [{"name": ..., "description": ..., "parameters": [...], "returnType": ...}],
    "classes": [{"name": ..., "description": ..., "methods": [...], "properties": [...]}],
    "modules": [{"name": ..., "description": ...}]
  }
}

Guidelines:
1. Keep code examples whole; never cut a block in the middle.
2. Usage examples must be self-contained.
3. Quote code from the context where it helps.
4. Describe function calls, inheritance, composition and data flow between components."""

OVERVIEW_PROMPT = (
    "Give a concise system overview of the whole codebase: architecture, main components, "
    "data flow and technical stack, with concrete details from the code."
)

COMPONENT_PROMPT = (
    "Analyze each function and class in the provided code: explain what it does, its "
    "parameters and return type, how it is used, and how it relates to other components."
)

DEPENDENCY_PROMPT = (
    "Build the dependency graph of the codebase: every relationship between functions, "
    "classes and modules, including calls, inheritance, composition and data flow."
)

OVERVIEW_FORMAT: dict[str, Any] = {
    "type": "object",
    "properties": {
        "description": {"type": "string"},
        "architecture": {"type": "string"},
        "mainComponents": {"type": "array", "items": {"type": "string"}},
        "dataFlow": {"type": "string"},
        "technicalStack": {"type": "array", "items": {"type": "string"}},
    },
}

DEPENDENCY_FORMAT: dict[str, Any] = {
    "type": "object",
    "properties": {
        "nodes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "type": {"type": "string", "enum": ["function", "class", "component", "module"]},
                    "description": {"type": "string"},
                },
            },
        },
        "edges": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "from": {"type": "string"},
                    "to": {"type": "string"},
                    "type": {"type": "string"},
                    "description": {"type": "string"},
                },
            },
        },
    },
}

MAX_BODY_CHARS = 500
_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_LINE_COMMENT = re.compile(r"//.*")
_CONSOLE_CALL = re.compile(r"console\.(log|warn|error|info|debug)\([^)]*\);?")
_WHITESPACE = re.compile(r"\s+")


def optimize_code(code: str) -> str:
    """Strip comments, console calls and redundant whitespace from source text."""
    if not code:
        return ""
    code = _BLOCK_COMMENT.sub("", code)
    code = _LINE_COMMENT.sub("", code)
    code = _CONSOLE_CALL.sub("", code)
    return _WHITESPACE.sub(" ", code).strip()


def extract_essential_code(body: str | None) -> str:
    """Compact a body, keeping only its head and tail when it is long."""
    if body == TRUNCATED_BODY:
        return body
    clean = optimize_code(body or "")
    if len(clean) > MAX_BODY_CHARS:
        return f"{clean[:300]} /* ... implementation ... */ {clean[-100:]}"
    return clean


def _compact_location(location: dict[str, Any] | None) -> dict[str, Any] | None:
    if not location:
        return None
    return {
        "file": PurePath(location.get("file", "")).name,
        "startLine": location.get("startLine"),
        "endLine": location.get("endLine"),
    }


def prepare_context(context: AnalysisResult | dict[str, Any]) -> dict[str, Any]:
    """Build the request context: compacted bodies, short file names, metadata.

    The input is never modified.
    """
    data = context.to_context() if isinstance(context, AnalysisResult) else copy.deepcopy(context)

    if isinstance(data.get("functions"), list):
        data["functions"] = [
            {
                "name": func.get("name"),
                "parameters": func.get("parameters", []),
                "returnType": func.get("returnType"),
                "body": extract_essential_code(func.get("body")),
                "documentation": func.get("documentation", ""),
                "location": _compact_location(func.get("location")),
            }
            for func in data["functions"]
        ]

    if isinstance(data.get("classes"), list):
        classes = []
        for cls in data["classes"]:
            compact = {
                "name": cls.get("name"),
                "methods": [
                    {
                        "name": method.get("name"),
                        "parameters": method.get("parameters", []),
                        "returnType": method.get("returnType"),
                        "body": extract_essential_code(method.get("body")),
                        "documentation": method.get("documentation", ""),
                    }
                    for method in cls.get("methods", [])
                ],
                "properties": cls.get("properties", []),
                "documentation": cls.get("documentation", ""),
                "location": _compact_location(cls.get("location")),
            }
            if cls.get("note"):
                compact["note"] = cls["note"]
            classes.append(compact)
        data["classes"] = classes

    data["_meta"] = {
        "optimized": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "note": "Code bodies are compacted; signatures and structure are preserved",
    }
    return data


def _require_fields(kind: str, item: Any, fields: tuple[str, ...], truthy: bool) -> None:
    if not isinstance(item, dict):
        raise InvalidResponseStructure(f"Invalid {kind}: expected an object", item)
    for field in fields:
        missing = not item.get(field) if truthy else field not in item
        if missing:
            raise InvalidResponseStructure(f"{kind.capitalize()} missing required field: {field}", item)


def _require_list(kind: str, item: dict[str, Any], field: str, optional: bool = False) -> None:
    value = item.get(field)
    if optional and value is None:
        return
    if not isinstance(value, list):
        raise InvalidResponseStructure(f"{kind.capitalize()} {field} is not an array", item)


def validate_response_structure(response: Any, response_format: dict[str, Any] | None = None) -> None:
    """Check a parsed response against the documentation contract.

    A response is valid when it is an object and either has a ``components``
    array whose items carry type, name and description, or an ``analysis``
    object with at least one non-empty ``functions``/``classes``/``modules``
    array. With an explicit ``response_format`` any object is accepted.

    Raises:
        InvalidResponseStructure: If the response does not match
    """
    if not isinstance(response, dict):
        raise InvalidResponseStructure("Response is not an object", response)

    if response_format:
        return

    components = response.get("components")
    if isinstance(components, list):
        for component in components:
            _require_fields("component", component, ("type", "name", "description"), truthy=True)
        return

    analysis = response.get("analysis")
    if not isinstance(analysis, dict):
        raise InvalidResponseStructure(
            "Expected a components array or an analysis object with functions/classes/modules",
            response,
        )

    has_content = False
    for key, check in (("functions", _check_function), ("classes", _check_class), ("modules", _check_module)):
        items = analysis.get(key)
        if not items:
            continue
        if not isinstance(items, list):
            raise InvalidResponseStructure(f"{key.capitalize()} is not an array", items)
        for item in items:
            check(item)
        has_content = True

    if not has_content:
        raise InvalidResponseStructure("Analysis object has no valid content arrays", response)


def _check_function(func: Any) -> None:
    _require_fields("function", func, ("name", "description", "parameters", "returnType"), truthy=False)
    _require_list("function", func, "parameters")


def _check_class(cls: Any) -> None:
    _require_fields("class", cls, ("name", "methods", "properties"), truthy=False)
    _require_list("class", cls, "methods")
    _require_list("class", cls, "properties")


def _check_module(module: Any) -> None:
    _require_fields("module", module, ("name", "description"), truthy=True)
    for field in ("imports", "exports", "dependencies"):
        _require_list("module", module, field, optional=True)


def extract_json_object(text: str) -> Any:
    """Parse the outermost ``{...}`` in a reply, ignoring surrounding prose."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        raise InvalidResponseStructure("Response contains no JSON object", text)
    try:
        return json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        raise InvalidResponseStructure(f"Failed to parse response as JSON: {e}", text) from e


class DocumentationClient:
    """Send analysis context to a text-generation backend and validate the answers."""

    def __init__(
        self,
        backend: TextGenerationBackend,
        chunker: ContextChunker | None = None,
    ):
        """Initialize the client.

        Args:
            backend: Backend that produces the answers
            chunker: Chunker used by ``analyze_chunked_codebase``
        """
        self._backend = backend
        self._chunker = chunker or ContextChunker(DEFAULT_MAX_CHUNK_SIZE)

    def send_query(
        self,
        prompt: str,
        context: AnalysisResult | dict[str, Any],
        response_format: dict[str, Any] | None = None,
    ) -> Any:
        """Ask one question about the given context.

        Args:
            prompt: What to ask
            context: Analysis (or chunk) the question is about
            response_format: Optional JSON schema the answer should follow

        Returns:
            The whole answer when ``response_format`` is given, otherwise its
            ``analysis`` object or ``components`` array

        Raises:
            InvalidResponseStructure: If the answer is not valid JSON of the expected shape
            TextGenerationError: If the backend fails
        """
        context_text = json.dumps(prepare_context(context), indent=2)
        logger.info(f"Sending query ({len(context_text)} characters of context)")

        user_content = f"{prompt}\n\nContext:\n{context_text}\n\n{SYSTEM_PROMPT}"
        if response_format:
            user_content += (
                "\n\nRespond with a JSON object matching this schema instead:\n"
                f"{json.dumps(response_format)}"
            )

        reply = self._backend.complete(SYSTEM_PROMPT, user_content)
        parsed = extract_json_object(reply)
        validate_response_structure(parsed, response_format)

        if response_format:
            return parsed
        return parsed.get("analysis") or parsed.get("components")

    def analyze_chunked_codebase(self, result: AnalysisResult) -> dict[str, Any]:
        """Document a whole codebase, one chunk at a time.

        The overview and the dependency graph are asked over the full result;
        component analysis runs once per chunk.

        Returns:
            ``{"overview": ..., "components": [...], "dependencies": ...}``
        """
        logger.info("Requesting system overview")
        overview = self.send_query(OVERVIEW_PROMPT, result, OVERVIEW_FORMAT)

        chunks = self._chunker.chunk(result)
        components: list[Any] = []
        for i, chunk in enumerate(chunks, 1):
            logger.info(f"Analyzing chunk {i}/{len(chunks)}")
            analysis = self.send_query(COMPONENT_PROMPT, chunk)
            if isinstance(analysis, list):
                components.extend(analysis)
            else:
                components.append(analysis)

        logger.info("Requesting dependency graph")
        dependencies = self.send_query(DEPENDENCY_PROMPT, result, DEPENDENCY_FORMAT)

        return {
            "overview": overview,
            "components": components,
            "dependencies": dependencies,
        }
