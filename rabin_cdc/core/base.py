"""
Base classes and chunk schema for the rabin_cdc library.

This module defines the data structures every chunker produces (byte ranges,
chunks and chunking results) and the abstract chunker interface.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


class InvalidArgumentError(ValueError):
    """Raised when a caller passes an argument the chunker cannot accept."""
    pass


@dataclass(frozen=True)
class ByteRange:
    """Half-open byte range ``[start, end)`` of an input buffer."""

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise InvalidArgumentError(f"Invalid byte range [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        return self.end - self.start

    def slice(self, data: BytesLike) -> bytes:
        """Return an owned copy of this range of ``data``."""
        return bytes(data[self.start:self.end])

    def __len__(self) -> int:
        return self.length


@dataclass
class Chunk:
    """
    A single content-defined chunk.

    Examples:
        ```python
        chunk = Chunk(
            index=0,
            range=ByteRange(0, 4096),
            content=data[0:4096],
            hash=identity_hash(data[0:4096])
        )
        ```
    """

    index: int  # Position in the chunk sequence
    range: ByteRange  # Location in the source buffer
    content: bytes  # Owned copy of the chunk bytes
    hash: Optional[int] = None  # Identity hash, not collision resistant
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def start(self) -> int:
        return self.range.start

    @property
    def end(self) -> int:
        return self.range.end

    @property
    def size(self) -> int:
        return self.range.length

    def to_dict(self, include_content: bool = False) -> Dict[str, Any]:
        """
        Convert chunk to dictionary format for serialization.

        Args:
            include_content: Include the raw bytes as a hex string

        Returns:
            Dictionary representation compatible with JSON serialization.
        """
        result = {
            "index": self.index,
            "start": self.start,
            "end": self.end,
            "size": self.size,
            "hash": f"0x{self.hash:016X}" if self.hash is not None else None,
        }
        if self.metadata:
            result["metadata"] = dict(self.metadata)
        if include_content:
            result["content"] = self.content.hex()
        return result


@dataclass
class ChunkingResult:
    """
    Complete result from a chunking operation.

    Contains the generated chunks along with processing metadata and statistics.
    """

    chunks: List[Chunk]
    total_chunks: int = field(init=False)
    total_bytes: int = field(init=False)
    processing_time: Optional[float] = None
    strategy_used: Optional[str] = None
    source_info: Optional[Dict[str, Any]] = None

    avg_chunk_size: Optional[float] = None
    min_chunk_size: Optional[int] = None
    max_chunk_size: Optional[int] = None

    def __post_init__(self):
        """Compute derived fields after initialization."""
        self.total_chunks = len(self.chunks)
        self.total_bytes = sum(chunk.size for chunk in self.chunks)
        if self.source_info is None:
            self.source_info = {}

        if self.chunks:
            sizes = [chunk.size for chunk in self.chunks]
            self.avg_chunk_size = self.total_bytes / len(sizes)
            self.min_chunk_size = min(sizes)
            self.max_chunk_size = max(sizes)

    def ranges(self) -> List[ByteRange]:
        return [chunk.range for chunk in self.chunks]

    def hashes(self) -> List[Optional[int]]:
        return [chunk.hash for chunk in self.chunks]

    def get_summary_stats(self) -> Dict[str, Any]:
        """Get summary statistics about the chunking result."""
        return {
            "total_chunks": self.total_chunks,
            "total_bytes": self.total_bytes,
            "avg_chunk_size": self.avg_chunk_size,
            "min_chunk_size": self.min_chunk_size,
            "max_chunk_size": self.max_chunk_size,
            "processing_time": self.processing_time,
            "strategy_used": self.strategy_used,
        }

    def to_dict(self, include_content: bool = False) -> Dict[str, Any]:
        result = self.get_summary_stats()
        result["source_info"] = dict(self.source_info)
        result["chunks"] = [chunk.to_dict(include_content) for chunk in self.chunks]
        return result


class BaseChunker(ABC):
    """
    Abstract base class for chunkers.

    Subclasses implement ``chunk()``. Scan state must not be kept on the
    instance between calls.

    Attributes:
        name: Human-readable name for the chunker
    """

    def __init__(self, name: str, **kwargs):
        self.name = name
        self.options = kwargs
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @abstractmethod
    def chunk(
        self,
        content: Union[BytesLike, Path],
        source_info: Optional[Dict[str, Any]] = None
    ) -> ChunkingResult:
        """
        Chunk the input content.

        Args:
            content: Input bytes or a path to read them from
            source_info: Information about the source

        Returns:
            ChunkingResult containing the generated chunks and metadata
        """
        raise NotImplementedError("Subclasses must implement the chunk() method")

    def validate_input(self, content: Any) -> None:
        """
        Validate input content before processing.

        Raises:
            InvalidArgumentError: If input is None or not bytes-like
        """
        validate_bytes(content)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


def validate_bytes(content: Any) -> None:
    """Reject anything that is not an in-memory byte buffer."""
    if content is None:
        raise InvalidArgumentError("Content cannot be None")
    if not isinstance(content, (bytes, bytearray, memoryview)):
        raise InvalidArgumentError(
            f"Content must be bytes-like, got {type(content).__name__}"
        )
    if isinstance(content, memoryview) and (content.format != "B" or content.ndim != 1):
        # Wider or signed items would be scanned as values, not bytes
        raise InvalidArgumentError(
            f"memoryview must be one-dimensional with format 'B', got format '{content.format}' "
            f"(itemsize {content.itemsize}, ndim {content.ndim}); use .cast('B')"
        )
