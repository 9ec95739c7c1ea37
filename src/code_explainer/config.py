"""Configuration management for Code Explainer."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CODE_EXPLAINER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    # Analysis settings
    max_chunk_size: int = Field(
        default=32000,
        description="Maximum estimated size of one context chunk (about 4 characters per unit)",
    )
    max_concurrency: int = Field(
        default=1,
        description="Files parsed concurrently during project analysis",
    )

    # Ollama settings
    ollama_base_url: str = Field(
        default="http://localhost:11434",
        description="Ollama server base URL",
    )
    ollama_model: str = Field(
        default="llama3.1",
        description="Ollama model used for documentation queries",
    )
    temperature: float = Field(
        default=0.3,
        description="Sampling temperature for documentation queries",
    )
    seed: int | None = Field(
        default=123,
        description="Sampling seed for repeatable answers",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @field_validator("max_chunk_size", "max_concurrency")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Sizes and worker counts must be at least 1."""
        if v < 1:
            raise ValueError(f"Must be at least 1, got {v}")
        return v


def setup_logging(level: str) -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
