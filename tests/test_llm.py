"""Tests for documentation queries against a text-generation backend."""

import json

import pytest

from code_explainer.analysis import TRUNCATED_BODY, ContextChunker
from code_explainer.exceptions import InvalidResponseStructure, TextGenerationError
from code_explainer.llm import (
    DocumentationClient,
    TextGenerationBackend,
    extract_json_object,
    prepare_context,
    validate_response_structure,
)
from code_explainer.llm.client import extract_essential_code, optimize_code
from code_explainer.parser import AnalysisResult, ClassEntity, FunctionEntity, Location, MethodEntity

VALID_ANALYSIS = {
    "analysis": {
        "functions": [{"name": "f", "description": "does f", "parameters": [], "returnType": "void"}],
    }
}


class ScriptedBackend(TextGenerationBackend):
    """Backend replaying canned replies and recording the prompts it receives."""

    def __init__(self, replies: list[str]):
        self.replies = list(replies)
        self.calls: list[tuple[str, str]] = []

    def complete(self, system_prompt: str, user_content: str) -> str:
        self.calls.append((system_prompt, user_content))
        if not self.replies:
            raise TextGenerationError("No more replies")
        return self.replies.pop(0)


def sample_result() -> AnalysisResult:
    return AnalysisResult(
        functions=[
            FunctionEntity(
                name="add",
                body="{\n  // sum\n  console.log(a);\n  return a + b;\n}",
                location=Location(file="/repo/src/math.ts", start_line=3, end_line=7),
            )
        ],
        classes=[
            ClassEntity(
                name="Calc",
                methods=[
                    MethodEntity(
                        name="run",
                        body=TRUNCATED_BODY,
                        location=Location(file="/repo/src/calc.ts", start_line=2, end_line=4),
                    )
                ],
                location=Location(file="/repo/src/calc.ts", start_line=1, end_line=5),
                note="Part 1/2 of large class",
            )
        ],
    )


class TestValidateResponseStructure:
    """Tests for validate_response_structure function."""

    def test_valid_analysis(self):
        validate_response_structure(VALID_ANALYSIS)

    def test_valid_components(self):
        validate_response_structure(
            {"components": [{"type": "class", "name": "Calc", "description": "Calculator"}]}
        )

    def test_valid_classes_and_modules(self):
        validate_response_structure(
            {
                "analysis": {
                    "functions": [],
                    "classes": [{"name": "C", "methods": [], "properties": []}],
                    "modules": [{"name": "m", "description": "module", "imports": ["x"]}],
                }
            }
        )

    @pytest.mark.parametrize(
        "response",
        [
            [],
            "text",
            {},
            {"analysis": {}},
            {"analysis": {"functions": [], "classes": []}},
            {"analysis": {"functions": [{"name": "f", "description": "d", "parameters": []}]}},
            {"analysis": {"functions": [{"name": "f", "description": "d", "parameters": "a", "returnType": "x"}]}},
            {"analysis": {"classes": [{"name": "C", "methods": {}, "properties": []}]}},
            {"analysis": {"modules": [{"name": "m", "description": ""}]}},
            {"analysis": {"modules": [{"name": "m", "description": "d", "exports": "all"}]}},
            {"components": [{"type": "class", "name": "C"}]},
        ],
    )
    def test_invalid(self, response):
        with pytest.raises(InvalidResponseStructure):
            validate_response_structure(response)

    def test_response_format_accepts_any_object(self):
        validate_response_structure({"nodes": [], "edges": []}, {"type": "object"})
        with pytest.raises(InvalidResponseStructure):
            validate_response_structure(["not", "an", "object"], {"type": "object"})


class TestExtractJsonObject:
    """Tests for extract_json_object function."""

    def test_plain_json(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_surrounding_prose(self):
        assert extract_json_object('Here you go:\n{"a": {"b": 2}}\nThanks!') == {"a": {"b": 2}}

    @pytest.mark.parametrize("text", ["", "no json here", "{broken", '{"a": }'])
    def test_invalid(self, text):
        with pytest.raises(InvalidResponseStructure):
            extract_json_object(text)


class TestPrepareContext:
    """Tests for request context compaction."""

    def test_optimize_code(self):
        code = "/* block */ const a = 1; // trailing\nconsole.log(a);\n   return a;"
        assert optimize_code(code) == "const a = 1; return a;"

    def test_long_body_keeps_head_and_tail(self):
        body = "a" * 300 + "b" * 300 + "c" * 100
        compact = extract_essential_code(body)
        assert compact.startswith("a" * 300)
        assert compact.endswith("c" * 100)
        assert "/* ... implementation ... */" in compact

    def test_truncated_placeholder_is_kept(self):
        assert extract_essential_code(TRUNCATED_BODY) == TRUNCATED_BODY

    def test_prepare_context(self):
        result = sample_result()
        data = prepare_context(result)

        func = data["functions"][0]
        assert func["body"] == "{ return a + b; }"
        assert func["location"] == {"file": "math.ts", "startLine": 3, "endLine": 7}
        assert func["returnType"] == "any"

        cls = data["classes"][0]
        assert cls["note"] == "Part 1/2 of large class"
        assert cls["methods"][0]["body"] == TRUNCATED_BODY
        assert cls["location"]["file"] == "calc.ts"

        assert data["_meta"]["optimized"] is True
        assert result.functions[0].location.file == "/repo/src/math.ts"

    def test_prepare_context_from_dict(self):
        raw = {"functions": [{"name": "f", "body": "{ }"}], "extra": 1}
        data = prepare_context(raw)

        assert data["extra"] == 1
        assert data["functions"][0]["location"] is None
        assert "_meta" not in raw


class TestDocumentationClient:
    """Tests for DocumentationClient class."""

    def test_send_query_returns_analysis(self):
        backend = ScriptedBackend([json.dumps(VALID_ANALYSIS)])
        client = DocumentationClient(backend)

        answer = client.send_query("Explain", sample_result())

        assert answer == VALID_ANALYSIS["analysis"]
        system_prompt, user_content = backend.calls[0]
        assert user_content.startswith("Explain")
        assert '"name": "add"' in user_content

    def test_send_query_with_format_returns_whole_object(self):
        backend = ScriptedBackend(['{"nodes": [], "edges": []}'])
        client = DocumentationClient(backend)

        answer = client.send_query("Graph", AnalysisResult(), {"type": "object"})

        assert answer == {"nodes": [], "edges": []}
        assert "matching this schema" in backend.calls[0][1]

    def test_send_query_rejects_invalid_answer(self):
        client = DocumentationClient(ScriptedBackend(['{"analysis": {}}']))

        with pytest.raises(InvalidResponseStructure):
            client.send_query("Explain", sample_result())

    def test_analyze_chunked_codebase(self):
        """Test one overview query, one query per chunk, then the dependency query."""
        result = AnalysisResult(
            functions=[
                FunctionEntity(
                    name=f"f{i}",
                    body="{" + "x" * 200 + "}",
                    location=Location(file="a.ts", start_line=1, end_line=2),
                )
                for i in range(3)
            ]
        )
        chunker = ContextChunker()
        limit = chunker.size_of(result.functions[0])
        chunker = ContextChunker(max_chunk_size=limit)
        component_reply = json.dumps(
            {"components": [{"type": "function", "name": "f", "description": "d"}]}
        )
        backend = ScriptedBackend(
            ['{"description": "overview"}']
            + [component_reply] * 3
            + ['{"nodes": [], "edges": []}']
        )

        output = DocumentationClient(backend, chunker).analyze_chunked_codebase(result)

        assert len(backend.calls) == 5
        assert output["overview"] == {"description": "overview"}
        assert len(output["components"]) == 3
        assert output["dependencies"] == {"nodes": [], "edges": []}

    def test_backend_failure_propagates(self):
        client = DocumentationClient(ScriptedBackend([]))

        with pytest.raises(TextGenerationError):
            client.analyze_chunked_codebase(sample_result())
