"""
Rabin-style content-defined chunking.

This module implements the chunk driver: a single pass over the input that
feeds a rolling window, checks the boundary predicate, and cuts chunks
bounded by a minimum and maximum size. Cut points depend only on content,
so a local edit leaves chunks away from the edit unchanged once the
fingerprints line up again.
"""

import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from rabin_cdc.core.base import (
    BaseChunker,
    ByteRange,
    BytesLike,
    Chunk,
    ChunkingResult,
    validate_bytes,
)
from rabin_cdc.core.config import CDCConfig
from rabin_cdc.core.fingerprint import RollingWindow, build_lookup_table, is_boundary
from rabin_cdc.core.identity import identity_hash

logger = logging.getLogger(__name__)


def _new_window(config: CDCConfig) -> RollingWindow:
    return RollingWindow(config.window_size, build_lookup_table(config.polynomial))


def chunk_ranges(data: BytesLike, config: Optional[CDCConfig] = None) -> List[ByteRange]:
    """
    Partition ``data`` into content-defined byte ranges.

    Args:
        data: Input buffer
        config: Chunking parameters, defaults to ``CDCConfig()``

    Returns:
        Ordered ranges covering ``[0, len(data))`` with no gaps or overlaps

    Raises:
        InvalidArgumentError: If ``data`` is None or not bytes-like
    """
    validate_bytes(data)
    config = config or CDCConfig()

    ranges: List[ByteRange] = []
    length = len(data)
    if length == 0:
        return ranges

    window = _new_window(config)
    fill = min(config.window_size, length)
    for i in range(fill):
        window.absorb(data[i])

    start = 0
    min_size = config.min_chunk_size
    max_size = config.max_chunk_size
    mask = config.boundary_mask

    for i in range(config.window_size, length):
        fingerprint = window.slide(data[i])

        chunk_length = i - start
        if chunk_length >= min_size and (is_boundary(fingerprint, mask) or chunk_length >= max_size):
            ranges.append(ByteRange(start, i))
            start = i

    # Remainder may be shorter than min_chunk_size
    if start < length:
        ranges.append(ByteRange(start, length))

    return ranges


def scan_fingerprints(data: BytesLike, config: Optional[CDCConfig] = None) -> List[int]:
    """
    Return the fingerprint after every slide over ``data``.

    Entry ``k`` is the fingerprint once input position ``window_size + k``
    has been taken in. Inputs no longer than the window yield an empty list.
    """
    validate_bytes(data)
    config = config or CDCConfig()

    window = _new_window(config)
    for i in range(min(config.window_size, len(data))):
        window.absorb(data[i])

    return [window.slide(data[i]) for i in range(config.window_size, len(data))]


class RabinChunker(BaseChunker):
    """
    Content-defined chunker built on the rolling window fingerprint.

    Scan state lives in a ``RollingWindow`` created for each call, so one
    instance can be reused. Only the statistics counters are shared.

    Example:
        ```python
        chunker = RabinChunker()
        result = chunker.chunk(Path("original.txt"))
        for chunk in result.chunks:
            print(chunk.index, chunk.size, format_hash(chunk.hash))
        ```
    """

    def __init__(
        self,
        config: Optional[Union[Dict[str, Any], CDCConfig]] = None,
        **kwargs
    ):
        """
        Initialize the chunker.

        Args:
            config: ``CDCConfig`` or a dictionary of its fields
            **kwargs: Additional configuration parameters
        """
        super().__init__(name="rabin_cdc")

        if isinstance(config, CDCConfig):
            self.config = config
        else:
            config = dict(config or {})
            config.update(kwargs)
            self.config = CDCConfig.from_dict(config)

        self.stats = {
            "calls": 0,
            "chunks_created": 0,
            "bytes_processed": 0,
            "boundary_cuts": 0,
            "max_size_cuts": 0,
        } if self.config.enable_statistics else None

        self.logger.debug(
            f"Rabin chunker initialized: window={self.config.window_size}, "
            f"min={self.config.min_chunk_size}, max={self.config.max_chunk_size}, "
            f"mask={hex(self.config.boundary_mask)}"
        )

    def chunk(
        self,
        content: Union[BytesLike, Path],
        source_info: Optional[Dict[str, Any]] = None
    ) -> ChunkingResult:
        """
        Chunk content into owned ``Chunk`` objects with identity hashes.

        Args:
            content: Input bytes, or a path whose bytes are read into memory
            source_info: Optional source information

        Returns:
            Chunking result with generated chunks
        """
        start_time = time.time()
        source_info = dict(source_info or {})

        if isinstance(content, Path):
            content_bytes = content.read_bytes()
            source_info.setdefault("source", str(content))
        else:
            self.validate_input(content)
            content_bytes = content

        ranges = chunk_ranges(content_bytes, self.config)
        chunks = [
            self._make_chunk(index, byte_range, content_bytes)
            for index, byte_range in enumerate(ranges)
        ]

        processing_time = time.time() - start_time

        if self.stats is not None:
            self._update_stats(ranges, len(content_bytes))

        self.logger.debug(
            f"Chunked {len(content_bytes)} bytes into {len(chunks)} chunks "
            f"in {processing_time:.4f}s"
        )

        return ChunkingResult(
            chunks=chunks,
            strategy_used=self.name,
            processing_time=processing_time,
            source_info=source_info
        )

    def chunk_ranges(self, data: BytesLike) -> List[ByteRange]:
        return chunk_ranges(data, self.config)

    def _make_chunk(self, index: int, byte_range: ByteRange, data: BytesLike) -> Chunk:
        content = byte_range.slice(data)
        return Chunk(
            index=index,
            range=byte_range,
            content=content,
            hash=identity_hash(content, self.config.polynomial),
        )

    def _update_stats(self, ranges: List[ByteRange], total: int) -> None:
        self.stats["calls"] += 1
        self.stats["chunks_created"] += len(ranges)
        self.stats["bytes_processed"] += total
        # The remainder chunk is neither kind of cut
        for byte_range in ranges[:-1]:
            if byte_range.length >= self.config.max_chunk_size:
                self.stats["max_size_cuts"] += 1
            else:
                self.stats["boundary_cuts"] += 1

    def get_stats(self) -> Optional[Dict[str, int]]:
        return dict(self.stats) if self.stats is not None else None

    def describe_algorithm(self) -> str:
        """Describe the chunking parameters."""
        return f"""
        Rabin-style Content-Defined Chunking:

        Polynomial: {hex(self.config.polynomial)}
        Window Size: {self.config.window_size} bytes
        Boundary Mask: {hex(self.config.boundary_mask)}
        Expected Chunk Size: {self.config.expected_chunk_size} bytes
        Size Range: {self.config.min_chunk_size} - {self.config.max_chunk_size} bytes

        A cut is made once the current chunk has reached the minimum size and
        either the fingerprint's masked bits are all zero or the chunk has
        reached the maximum size. The final chunk may be shorter than the
        minimum.
        """
