"""
Tests for the Rabin-style content-defined chunker.

Covers the partition and bounds properties, the small and empty input edge
cases, the all-zero buffer and resynchronization after an insertion.
"""

from array import array

import pytest

from rabin_cdc.core.base import ByteRange, ChunkingResult, InvalidArgumentError
from rabin_cdc.core.compare import compare_chunkings
from rabin_cdc.core.config import CDCConfig
from rabin_cdc.core.identity import identity_hash
from rabin_cdc.strategies.rabin_chunker import RabinChunker, chunk_ranges


def assert_partition(ranges, data):
    assert b"".join(r.slice(data) for r in ranges) == bytes(data)
    assert sum(r.length for r in ranges) == len(data)
    expected_start = 0
    for r in ranges:
        assert r.start == expected_start
        expected_start = r.end


def assert_bounds(ranges, config):
    for r in ranges[:-1]:
        assert config.min_chunk_size <= r.length <= config.max_chunk_size
    if ranges:
        assert 0 < ranges[-1].length <= config.max_chunk_size


class TestChunkRanges:
    """Test the pure chunking function."""

    def test_empty_input(self):
        assert chunk_ranges(b"") == []

    def test_none_input(self):
        with pytest.raises(InvalidArgumentError, match="None"):
            chunk_ranges(None)

    def test_non_bytes_input(self):
        with pytest.raises(InvalidArgumentError):
            chunk_ranges("not bytes")
        with pytest.raises(ValueError):
            chunk_ranges([1, 2, 3])

    @pytest.mark.parametrize("size", [1, 2, 47, 48])
    def test_input_within_window(self, size, random_data):
        data = random_data(size)
        assert chunk_ranges(data) == [ByteRange(0, size)]

    def test_input_below_min_chunk(self, random_data):
        data = random_data(2048)
        assert chunk_ranges(data) == [ByteRange(0, 2048)]

    def test_all_zero_input(self, zero_data):
        """table[0] is 0, so every eligible position is a boundary."""
        ranges = chunk_ranges(zero_data)

        assert len(ranges) == 25
        assert all(r.length == 2048 for r in ranges[:-1])
        assert ranges[-1].length == 50000 - 24 * 2048 == 848
        assert ranges[1] == ByteRange(2048, 4096)
        assert_partition(ranges, zero_data)

    def test_partition_and_bounds(self, random_data):
        data = random_data(100000, seed=99)
        config = CDCConfig()
        ranges = chunk_ranges(data, config)

        assert len(ranges) > 1
        assert_partition(ranges, data)
        assert_bounds(ranges, config)

    def test_partition_and_bounds_small_config(self, random_data):
        config = CDCConfig(window_size=16, min_chunk_size=64, max_chunk_size=256, boundary_mask=0x3F)
        data = random_data(20000, seed=5)
        ranges = chunk_ranges(data, config)

        assert len(ranges) > 20000 // 256
        assert_partition(ranges, data)
        assert_bounds(ranges, config)

    def test_wide_memoryview_rejected(self):
        data = memoryview(array("H", [300] * 100))
        with pytest.raises(InvalidArgumentError, match="format 'H'"):
            chunk_ranges(data)
        with pytest.raises(InvalidArgumentError):
            RabinChunker().chunk(data)

    def test_signed_memoryview_rejected(self):
        with pytest.raises(InvalidArgumentError):
            chunk_ranges(memoryview(array("b", [-1] * 100)))

    def test_cast_memoryview_accepted(self, random_data):
        data = random_data(10000, seed=8)
        wide = memoryview(array("H", data))
        assert chunk_ranges(memoryview(data)) == chunk_ranges(memoryview(bytearray(data)).cast("B"))
        assert chunk_ranges(wide.cast("B")) == chunk_ranges(bytes(wide))

    def test_first_chunk_bounded_when_window_equals_min(self, random_data):
        config = CDCConfig(window_size=32, min_chunk_size=32, max_chunk_size=64, boundary_mask=0xFF)
        data = random_data(5000, seed=17)
        ranges = chunk_ranges(data, config)

        assert ranges[0].length <= config.max_chunk_size
        assert_partition(ranges, data)
        assert_bounds(ranges, config)

    def test_deterministic(self, random_data):
        data = random_data(40000, seed=3)
        assert chunk_ranges(data) == chunk_ranges(data)
        assert chunk_ranges(data) == chunk_ranges(bytearray(data))
        assert chunk_ranges(data) == chunk_ranges(memoryview(data))


class TestRabinChunker:
    """Test the chunker class."""

    def test_default_config(self):
        chunker = RabinChunker()
        assert chunker.config.window_size == 48
        assert chunker.config.min_chunk_size == 2048
        assert chunker.config.max_chunk_size == 8192
        assert chunker.config.boundary_mask == 0x1FFF
        assert chunker.config.polynomial == 0x3

    def test_config_forms(self):
        config = CDCConfig(min_chunk_size=1024, max_chunk_size=4096)
        assert RabinChunker(config).config is config

        chunker = RabinChunker({"min_chunk_size": 512}, max_chunk_size=1024)
        assert chunker.config.min_chunk_size == 512
        assert chunker.config.max_chunk_size == 1024

    def test_empty_content(self):
        result = RabinChunker().chunk(b"")
        assert isinstance(result, ChunkingResult)
        assert result.chunks == []
        assert result.total_chunks == 0
        assert result.strategy_used == "rabin_cdc"

    def test_invalid_content(self):
        chunker = RabinChunker()
        with pytest.raises(InvalidArgumentError):
            chunker.chunk(None)
        with pytest.raises(InvalidArgumentError):
            chunker.chunk("text")
        assert chunker.get_stats()["calls"] == 0

    def test_chunks_are_owned_copies(self, random_data):
        data = bytearray(random_data(30000, seed=11))
        result = RabinChunker().chunk(data)
        snapshot = [chunk.content for chunk in result.chunks]

        data[:] = bytes(len(data))

        assert [chunk.content for chunk in result.chunks] == snapshot
        assert all(isinstance(chunk.content, bytes) for chunk in result.chunks)

    def test_chunk_fields(self, random_data):
        data = random_data(30000, seed=11)
        result = RabinChunker().chunk(data, source_info={"source": "memory"})

        assert result.ranges() == chunk_ranges(data)
        assert result.total_bytes == len(data)
        assert result.source_info == {"source": "memory"}
        for i, chunk in enumerate(result.chunks):
            assert chunk.index == i
            assert chunk.content == data[chunk.start:chunk.end]
            assert chunk.size == len(chunk.content)
            assert chunk.hash == identity_hash(chunk.content)

    def test_chunk_path(self, tmp_path, random_data):
        data = random_data(12000)
        path = tmp_path / "input.bin"
        path.write_bytes(data)

        result = RabinChunker().chunk(path)

        assert result.ranges() == chunk_ranges(data)
        assert result.source_info["source"] == str(path)

    def test_instance_reuse(self, random_data):
        """Scan state must not leak between calls."""
        chunker = RabinChunker()
        first = random_data(25000, seed=1)
        second = random_data(25000, seed=2)

        expected = chunker.chunk(first).hashes()
        chunker.chunk(second)
        assert chunker.chunk(first).hashes() == expected

    def test_statistics(self, zero_data):
        chunker = RabinChunker()
        chunker.chunk(zero_data)
        stats = chunker.get_stats()

        assert stats["calls"] == 1
        assert stats["chunks_created"] == 25
        assert stats["bytes_processed"] == 50000
        assert stats["boundary_cuts"] == 24
        assert stats["max_size_cuts"] == 0

    def test_statistics_disabled(self):
        chunker = RabinChunker(enable_statistics=False)
        chunker.chunk(b"abc")
        assert chunker.get_stats() is None

    def test_summary_stats(self, zero_data):
        result = RabinChunker().chunk(zero_data)
        stats = result.get_summary_stats()

        assert stats["total_chunks"] == 25
        assert stats["min_chunk_size"] == 848
        assert stats["max_chunk_size"] == 2048
        assert stats["avg_chunk_size"] == 2000.0

    def test_describe_algorithm(self):
        description = RabinChunker().describe_algorithm()
        assert "0x1fff" in description
        assert "2048 - 8192" in description


class TestResynchronization:
    """An insertion near the start only disturbs the leading chunks."""

    def test_prepended_byte(self, random_data):
        chunker = RabinChunker()
        original = random_data(200000, seed=2024)
        # table[0x24] is 0, so the insertion leaves no trace in later fingerprints
        modified = b"\x24" + original

        original_result = chunker.chunk(original)
        modified_result = chunker.chunk(modified)
        report = compare_chunkings(original_result, modified_result)

        assert report.different_chunks >= 1
        assert report.resync_index is not None
        assert report.shared_suffix >= report.original_chunks // 2

        # Every chunk from the resynchronization point on keeps its identity hash
        resync = report.resync_index
        original_tail = original_result.hashes()[resync:]
        modified_tail = modified_result.hashes()[resync:]
        assert len(original_tail) == len(modified_tail)
        for original_hash, modified_hash in zip(original_tail, modified_tail):
            assert original_hash == modified_hash

        tail = report.shared_suffix
        assert original_result.hashes()[-tail:] == modified_result.hashes()[-tail:]
        assert original_result.chunks[-1].end + 1 == modified_result.chunks[-1].end
