"""Partition an AnalysisResult into size-bounded chunks for a text-generation service.

Functions and classes are packed greedily in their original order. A function
that alone exceeds the budget keeps its signature but loses its body; a class
that alone exceeds the budget is split into partial records by method groups.
Entities reduced this way are placed into the current chunk without counting
against its running size, so the bound is soft for such chunks.
"""

import logging
import math
from typing import Callable, TypeVar

from ..parser.entities import AnalysisResult, ClassEntity, EntityModel, FunctionEntity, MethodEntity

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHUNK_SIZE = 32000
TRUNCATED_BODY = "/* Body too large, truncated */"

SizeEstimator = Callable[[str], int]
E = TypeVar("E", bound=EntityModel)


def estimate_tokens(text: str) -> int:
    """Approximate token count: one token per four characters, rounded up."""
    return math.ceil(len(text) / 4)


class ContextChunker:
    """Greedy packer producing chunks whose estimated size fits a budget."""

    def __init__(
        self,
        max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE,
        estimator: SizeEstimator = estimate_tokens,
    ):
        """Initialize the chunker.

        Args:
            max_chunk_size: Default budget per chunk, in estimator units
            estimator: Maps serialized text to its size; swap in an exact
                tokenizer here
        """
        self._check_size(max_chunk_size)
        self.max_chunk_size = max_chunk_size
        self._estimate = estimator

    def size_of(self, entity: EntityModel) -> int:
        """Estimated size of an entity's serialized form."""
        return self._estimate(entity.to_json())

    def payload_size(self, chunk: AnalysisResult) -> int:
        """Sum of the estimated sizes of the entities in a chunk.

        This is the quantity kept within the budget; the enclosing JSON object
        is not counted.
        """
        return sum(self.size_of(e) for e in chunk.functions) + sum(self.size_of(c) for c in chunk.classes)

    def chunk(self, result: AnalysisResult, max_chunk_size: int | None = None) -> list[AnalysisResult]:
        """Split a result into chunks.

        Function chunks come first, then class chunks; each chunk holds only
        one kind of entity. ``result`` itself is never modified.

        The budget bounds ``payload_size(chunk)``, the sum of the entity
        estimates. The serialized chunk is somewhat larger because the
        enclosing JSON object and list separators are not counted, and chunks
        holding truncated functions or partial classes may exceed it.

        Args:
            result: Aggregated analysis
            max_chunk_size: Budget for this call (defaults to the instance budget)

        Returns:
            Non-empty list of chunks; ``[result]`` when there is nothing to pack
        """
        limit = self.max_chunk_size if max_chunk_size is None else max_chunk_size
        self._check_size(limit)
        logger.info(f"Chunking {len(result.functions)} functions and {len(result.classes)} classes (max {limit})")

        function_groups = self._pack(result.functions, limit, self._reduce_function)
        class_groups = self._pack(result.classes, limit, self._split_class)

        chunks = [AnalysisResult(functions=group) for group in function_groups]
        chunks.extend(AnalysisResult(classes=group) for group in class_groups)

        if not chunks:
            return [result]

        for i, chunk in enumerate(chunks, 1):
            logger.debug(f"Chunk {i}/{len(chunks)}: ~{self.payload_size(chunk)} units")
        logger.info(f"Created {len(chunks)} chunks")
        return chunks

    def _pack(
        self,
        entities: list[E],
        limit: int,
        reduce_oversized: Callable[[E, int, int], list[E]],
    ) -> list[list[E]]:
        """Greedy packing shared by functions and classes."""
        groups: list[list[E]] = []
        current: list[E] = []
        current_size = 0

        for entity in entities:
            size = self.size_of(entity)

            if size > limit:
                current.extend(reduce_oversized(entity, size, limit))
                continue

            if current_size + size > limit and current:
                groups.append(current)
                current = []
                current_size = 0

            current.append(entity)
            current_size += size

        if current:
            groups.append(current)

        return groups

    def _reduce_function(self, func: FunctionEntity, size: int, limit: int) -> list[FunctionEntity]:
        """Replace the body of an oversized function with a placeholder."""
        reduced = func.model_copy(update={"body": TRUNCATED_BODY})
        reduced_size = self.size_of(reduced)
        logger.warning(f"Function '{func.name}' is {size} units, body truncated to {reduced_size}")
        if reduced_size > limit:
            logger.warning(f"Function '{func.name}' still exceeds {limit} units after truncation")
        return [reduced]

    def _split_class(self, cls: ClassEntity, size: int, limit: int) -> list[ClassEntity]:
        """Split an oversized class into partial records by method groups."""
        method_groups = self._group_methods(cls.methods, limit)
        logger.warning(f"Class '{cls.name}' is {size} units, split into {len(method_groups)} parts")

        if not method_groups:
            logger.warning(f"Class '{cls.name}' has no methods to split, emitting it whole")
            return [cls]

        total = len(method_groups)
        return [
            cls.model_copy(update={"methods": methods, "note": f"Part {i}/{total} of large class"})
            for i, methods in enumerate(method_groups, 1)
        ]

    def _group_methods(self, methods: list[MethodEntity], limit: int) -> list[list[MethodEntity]]:
        groups: list[list[MethodEntity]] = []
        current: list[MethodEntity] = []
        current_size = 0

        for method in methods:
            size = self.size_of(method)
            if current_size + size > limit and current:
                groups.append(current)
                current = []
                current_size = 0
            current.append(method)
            current_size += size

        if current:
            groups.append(current)

        return groups

    @staticmethod
    def _check_size(max_chunk_size: int) -> None:
        if max_chunk_size < 1:
            raise ValueError(f"max_chunk_size must be at least 1, got {max_chunk_size}")


def chunk_analysis(
    result: AnalysisResult,
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE,
    estimator: SizeEstimator = estimate_tokens,
) -> list[AnalysisResult]:
    """Split a result into chunks with a one-off chunker."""
    return ContextChunker(max_chunk_size, estimator).chunk(result)
