"""
Validation utilities for chunks and chunking results.

Checks that a result is a faithful partition of its source buffer and that
chunk sizes respect the configured bounds.
"""

import logging
from typing import Any, List, Optional

from rabin_cdc.core.base import BytesLike, Chunk, ChunkingResult
from rabin_cdc.core.config import CDCConfig
from rabin_cdc.core.identity import identity_hash

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


class ChunkValidator:
    """
    Validator for chunks and chunking results.

    Provides partition, ordering and size-bound checks.
    """

    def __init__(self, config: Optional[CDCConfig] = None, strict_mode: bool = False):
        """
        Initialize chunk validator.

        Args:
            config: Size bounds to check against, defaults to ``CDCConfig()``
            strict_mode: Also reject empty results
        """
        self.config = config or CDCConfig()
        self.strict_mode = strict_mode
        self.logger = logging.getLogger(f"{__name__}.ChunkValidator")

    def validate_chunk(self, chunk: Chunk) -> List[str]:
        """
        Validate a single chunk.

        Args:
            chunk: Chunk to validate

        Returns:
            List of validation issues (empty if valid)
        """
        issues = []

        if chunk.content is None:
            issues.append("Chunk content is None")
            return issues

        if len(chunk.content) != chunk.size:
            issues.append(f"Chunk size mismatch: range={chunk.size}, content={len(chunk.content)}")

        if chunk.size == 0:
            issues.append("Chunk is empty")

        if chunk.size > self.config.max_chunk_size:
            issues.append(f"Chunk exceeds max size: {chunk.size} > {self.config.max_chunk_size}")

        if chunk.hash is not None and chunk.hash != identity_hash(chunk.content, self.config.polynomial):
            issues.append("Chunk hash does not match its content")

        return issues

    def validate_result(self, result: ChunkingResult, data: Optional[BytesLike] = None) -> List[str]:
        """
        Validate a chunking result.

        Args:
            result: Chunking result to validate
            data: Source buffer; when given, chunk bytes are checked against it

        Returns:
            List of validation issues (empty if valid)
        """
        issues = []

        if not result.chunks:
            if data is not None and len(data) > 0:
                issues.append("Result contains no chunks for non-empty input")
            elif self.strict_mode:
                issues.append("Result contains no chunks")
            return issues

        for i, chunk in enumerate(result.chunks):
            for issue in self.validate_chunk(chunk):
                issues.append(f"Chunk {i}: {issue}")

            if chunk.index != i:
                issues.append(f"Chunk {i}: index out of order ({chunk.index})")

        # Every chunk but the last must have reached the minimum size
        for i, chunk in enumerate(result.chunks[:-1]):
            if chunk.size < self.config.min_chunk_size:
                issues.append(
                    f"Chunk {i}: below min size: {chunk.size} < {self.config.min_chunk_size}"
                )

        issues.extend(self._validate_coverage(result, data))

        if result.total_chunks != len(result.chunks):
            issues.append(f"Total chunks mismatch: declared={result.total_chunks}, actual={len(result.chunks)}")

        if result.processing_time is not None and result.processing_time < 0:
            issues.append("Processing time cannot be negative")

        return issues

    def _validate_coverage(self, result: ChunkingResult, data: Optional[BytesLike]) -> List[str]:
        """Check that chunk ranges tile the source with no gaps or overlaps."""
        issues = []

        expected_start = 0
        for i, chunk in enumerate(result.chunks):
            if chunk.start > expected_start:
                issues.append(f"Gap before chunk {i}: {expected_start}..{chunk.start}")
            elif chunk.start < expected_start:
                issues.append(f"Chunk {i} overlaps previous chunk at {chunk.start}")
            expected_start = chunk.end

        if data is not None:
            if expected_start != len(data):
                issues.append(f"Chunks cover {expected_start} bytes, source has {len(data)}")
            elif b"".join(chunk.content for chunk in result.chunks) != bytes(data):
                issues.append("Concatenated chunks do not reproduce the source")

        return issues

    def validate_and_raise(self, obj: Any, data: Optional[BytesLike] = None) -> None:
        """
        Validate and raise exception if invalid.

        Args:
            obj: Object to validate (Chunk or ChunkingResult)
            data: Source buffer for result validation

        Raises:
            ValidationError: If validation fails
        """
        if isinstance(obj, Chunk):
            issues = self.validate_chunk(obj)
        elif isinstance(obj, ChunkingResult):
            issues = self.validate_result(obj, data)
        else:
            raise ValidationError(f"Cannot validate object of type {type(obj)}")

        if issues:
            raise ValidationError(f"Validation failed: {'; '.join(issues)}")

    def is_valid(self, obj: Any, data: Optional[BytesLike] = None) -> bool:
        try:
            self.validate_and_raise(obj, data)
            return True
        except ValidationError:
            return False
