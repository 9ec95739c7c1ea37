"""Tests for settings and server wiring."""

import pytest
from pydantic import ValidationError

from code_explainer.analysis import ContextChunker, ProjectAnalyzer
from code_explainer.config import Settings
from code_explainer.parser import ParserRegistry


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate settings from the developer's environment and .env file."""
    for name in (
        "LOG_LEVEL",
        "MAX_CHUNK_SIZE",
        "MAX_CONCURRENCY",
        "OLLAMA_BASE_URL",
        "OLLAMA_MODEL",
        "TEMPERATURE",
        "SEED",
    ):
        monkeypatch.delenv(f"CODE_EXPLAINER_{name}", raising=False)
    monkeypatch.chdir(tmp_path)


class TestSettings:
    """Tests for Settings class."""

    def test_defaults(self):
        settings = Settings()

        assert settings.log_level == "INFO"
        assert settings.max_chunk_size == 32000
        assert settings.max_concurrency == 1
        assert settings.ollama_base_url == "http://localhost:11434"
        assert settings.seed == 123

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("CODE_EXPLAINER_MAX_CHUNK_SIZE", "500")
        monkeypatch.setenv("CODE_EXPLAINER_MAX_CONCURRENCY", "8")
        monkeypatch.setenv("CODE_EXPLAINER_LOG_LEVEL", "debug")

        settings = Settings()

        assert settings.max_chunk_size == 500
        assert settings.max_concurrency == 8
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")

    @pytest.mark.parametrize("field", ["max_chunk_size", "max_concurrency"])
    def test_non_positive_rejected(self, field):
        with pytest.raises(ValidationError):
            Settings(**{field: 0})


class TestBuildContext:
    """Tests for server context wiring."""

    def test_build_context(self, monkeypatch):
        import code_explainer.server as server

        class FakeBackend:
            @classmethod
            def from_config(cls, config):
                return cls()

            def complete(self, system_prompt, user_content):
                return "{}"

        monkeypatch.setattr(server, "OllamaBackend", FakeBackend)
        context = server.build_context(Settings(max_chunk_size=1000, max_concurrency=2))

        assert isinstance(context["registry"], ParserRegistry)
        assert len(context["registry"]) == 3
        assert isinstance(context["analyzer"], ProjectAnalyzer)
        assert isinstance(context["chunker"], ContextChunker)
        assert context["chunker"].max_chunk_size == 1000
        assert context["analyzer"].registry is context["registry"]
