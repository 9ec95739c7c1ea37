"""Text-generation backends for documentation queries."""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..exceptions import TextGenerationError

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


class TextGenerationBackend(ABC):
    """Abstract base class for text-generation backends."""

    @abstractmethod
    def complete(self, system_prompt: str, user_content: str) -> str:
        """Generate a JSON reply for a conversation.

        Args:
            system_prompt: Instructions for the model
            user_content: Prompt plus serialized context

        Returns:
            Raw reply text, expected to contain a JSON object
        """


class OllamaBackend(TextGenerationBackend):
    """Text-generation backend using an Ollama server."""

    def __init__(
        self,
        model: str,
        base_url: str,
        temperature: float = 0.3,
        seed: int | None = 123,
    ):
        """Initialize the Ollama backend.

        Args:
            model: Name of the Ollama model to use
            base_url: Ollama server base URL
            temperature: Sampling temperature
            seed: Sampling seed, for repeatable answers
        """
        import ollama

        self._model = model
        self._client = ollama.Client(host=base_url)
        self._options: dict[str, float | int] = {"temperature": temperature}
        if seed is not None:
            self._options["seed"] = seed
        logger.info(f"Ollama client initialized with model: {model} at {base_url}")

    @classmethod
    def from_config(cls, config: "Settings") -> "OllamaBackend":
        return cls(
            model=config.ollama_model,
            base_url=config.ollama_base_url,
            temperature=config.temperature,
            seed=config.seed,
        )

    def complete(self, system_prompt: str, user_content: str) -> str:
        try:
            response = self._client.chat(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content},
                ],
                format="json",
                options=self._options,
            )
        except Exception as e:
            raise TextGenerationError(f"Ollama request failed: {e}") from e

        content = response["message"]["content"]
        if not content:
            raise TextGenerationError("No response content received from Ollama")
        return content
