"""YAML parser: configuration files carry no functions or classes."""

import asyncio
import logging
from pathlib import Path

import yaml

from ..exceptions import ParseError
from .base import LanguageParser
from .entities import AnalysisResult

logger = logging.getLogger(__name__)


class YAMLParser(LanguageParser):
    """Accepts ``.yml``/``.yaml`` files and always yields an empty result.

    The documents are still loaded so that the log shows what was skipped;
    malformed YAML is reported as a warning, not a failure.
    """

    name = "yaml"
    extensions = (".yml", ".yaml")

    async def parse_file(self, file_path: Path | str) -> AnalysisResult:
        file_path = Path(file_path)
        try:
            content = await asyncio.to_thread(file_path.read_text, encoding="utf-8", errors="replace")
        except OSError as e:
            raise ParseError(f"Failed to read file {file_path}: {e}", file_path=str(file_path)) from e

        try:
            documents = list(yaml.safe_load_all(content))
            logger.debug(f"Loaded {len(documents)} YAML document(s) from {file_path}")
        except yaml.YAMLError as e:
            logger.warning(f"Malformed YAML in {file_path}: {e}")

        return AnalysisResult()
