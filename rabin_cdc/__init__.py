"""
Rabin-style content-defined chunking.

Splits a byte buffer into variable-length chunks whose boundaries depend on
local content, so a small edit only disturbs the chunks around it.

Quick start:
    from rabin_cdc import RabinChunker, format_hash

    result = RabinChunker().chunk(data)
    for chunk in result.chunks:
        print(chunk.start, chunk.size, format_hash(chunk.hash))

Byte ranges only:
    from rabin_cdc import chunk_ranges
    ranges = chunk_ranges(data)

Comparing an original and an edited buffer:
    from rabin_cdc import compare_chunkings
    report = compare_chunkings(chunker.chunk(original), chunker.chunk(modified))
    print(report.resync_index, report.percent_affected)
"""

__version__ = "0.1.0"

from rabin_cdc.core.base import (
    BaseChunker,
    ByteRange,
    Chunk,
    ChunkingResult,
    InvalidArgumentError,
)
from rabin_cdc.core.config import CDCConfig, load_config, save_config
from rabin_cdc.core.fingerprint import (
    LOOKUP_TABLE,
    RollingWindow,
    build_lookup_table,
    is_boundary,
    rotl64,
)
from rabin_cdc.core.identity import format_hash, identity_hash
from rabin_cdc.core.compare import ComparisonReport, compare_chunkings
from rabin_cdc.strategies.rabin_chunker import RabinChunker, chunk_ranges, scan_fingerprints
from rabin_cdc.utils.validation import ChunkValidator, ValidationError

__all__ = [
    "__version__",
    "BaseChunker",
    "ByteRange",
    "Chunk",
    "ChunkingResult",
    "InvalidArgumentError",
    "CDCConfig",
    "load_config",
    "save_config",
    "LOOKUP_TABLE",
    "RollingWindow",
    "build_lookup_table",
    "is_boundary",
    "rotl64",
    "format_hash",
    "identity_hash",
    "ComparisonReport",
    "compare_chunkings",
    "RabinChunker",
    "chunk_ranges",
    "scan_fingerprints",
    "ChunkValidator",
    "ValidationError",
]
