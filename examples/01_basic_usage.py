#!/usr/bin/env python3
"""
Basic Usage Examples - Getting Started with rabin_cdc

Shows chunking a buffer, reading chunk ranges and hashes, and how an edit
near the start of a buffer affects the chunk sequence.

Run with: python examples/01_basic_usage.py
"""

import random

from rabin_cdc import RabinChunker, chunk_ranges, compare_chunkings, format_hash


def sample_data(size: int, seed: int = 42) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.getrandbits(8) for _ in range(size))


def example_1_simple_chunking():
    """Most basic chunking example."""
    print("\nExample 1: Simple Chunking")
    print("=" * 50)

    result = RabinChunker().chunk(sample_data(50000))

    print(f"Generated {result.total_chunks} chunks, average {result.avg_chunk_size:.0f} bytes")
    for chunk in result.chunks[:5]:
        print(f"  chunk {chunk.index}: [{chunk.start}, {chunk.end}) {format_hash(chunk.hash)}")


def example_2_ranges_only():
    """Byte ranges without copying chunk content."""
    print("\nExample 2: Ranges Only")
    print("=" * 50)

    for byte_range in chunk_ranges(bytes(20000)):
        print(f"  [{byte_range.start}, {byte_range.end}) {byte_range.length} bytes")


def example_3_edit_and_compare():
    """Prepend one byte and see where the chunkings agree again."""
    print("\nExample 3: Edit and Compare")
    print("=" * 50)

    chunker = RabinChunker()
    original = sample_data(200000)
    modified = b"$" + original

    report = compare_chunkings(chunker.chunk(original), chunker.chunk(modified))

    print(f"Original chunks: {report.original_chunks}")
    print(f"Modified chunks: {report.modified_chunks}")
    print(f"Resynchronization index: {report.resync_index}")
    print(f"Identical trailing chunks: {report.shared_suffix}")
    print(f"Percentage of chunks affected: {report.percent_affected:.2f}%")


def main():
    example_1_simple_chunking()
    example_2_ranges_only()
    example_3_edit_and_compare()


if __name__ == "__main__":
    main()
