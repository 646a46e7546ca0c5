"""
Comparison of two chunkings of related buffers.

Used to show how far an edit to an "original" buffer spreads through the
chunk sequence of the "modified" one.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from rabin_cdc.core.base import Chunk, ChunkingResult
from rabin_cdc.core.identity import format_hash

logger = logging.getLogger(__name__)


@dataclass
class ChunkDifference:
    """A chunk index at which the two sequences disagree."""
    index: int
    original_hash: int
    modified_hash: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "original_hash": format_hash(self.original_hash),
            "modified_hash": format_hash(self.modified_hash),
        }


@dataclass
class ComparisonReport:
    """
    Summary of an index-by-index comparison of two chunk sequences.

    ``resync_index`` is the first index whose chunks are byte-identical;
    ``different_chunks`` counts the differing indices before it.
    ``shared_suffix`` counts identical chunks at the end of both sequences,
    which still holds when the edit changed the number of leading chunks.
    """
    original_chunks: int
    modified_chunks: int
    different_chunks: int
    resync_index: Optional[int]
    shared_suffix: int
    differences: List[ChunkDifference] = field(default_factory=list)

    @property
    def resynchronized(self) -> bool:
        return self.resync_index is not None

    @property
    def percent_affected(self) -> float:
        if self.original_chunks == 0:
            return 0.0
        return self.different_chunks * 100.0 / self.original_chunks

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_chunks": self.original_chunks,
            "modified_chunks": self.modified_chunks,
            "different_chunks": self.different_chunks,
            "resync_index": self.resync_index,
            "shared_suffix": self.shared_suffix,
            "percent_affected": f"{self.percent_affected:.2f}%",
            "differences": [diff.to_dict() for diff in self.differences],
        }


def _same(a: Chunk, b: Chunk) -> bool:
    return a.hash == b.hash and a.content == b.content


def _shared_suffix(original: Sequence[Chunk], modified: Sequence[Chunk]) -> int:
    count = 0
    for a, b in zip(reversed(original), reversed(modified)):
        if not _same(a, b):
            break
        count += 1
    return count


def compare_chunkings(original: ChunkingResult, modified: ChunkingResult) -> ComparisonReport:
    """
    Compare two chunking results index by index.

    Walks both sequences until the first identical pair, recording every
    differing pair before it.

    Args:
        original: Chunking of the unmodified buffer
        modified: Chunking of the edited buffer

    Returns:
        Comparison report
    """
    differences: List[ChunkDifference] = []
    resync_index = None

    for index, (a, b) in enumerate(zip(original.chunks, modified.chunks)):
        if _same(a, b):
            resync_index = index
            break
        differences.append(ChunkDifference(index, a.hash, b.hash))

    report = ComparisonReport(
        original_chunks=original.total_chunks,
        modified_chunks=modified.total_chunks,
        different_chunks=len(differences),
        resync_index=resync_index,
        shared_suffix=_shared_suffix(original.chunks, modified.chunks),
        differences=differences,
    )

    if report.resynchronized:
        logger.debug(f"Resynchronization at chunk {resync_index}")
    else:
        logger.debug("No resynchronization within the compared chunks")

    return report
