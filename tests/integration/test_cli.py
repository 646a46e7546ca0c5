"""
Integration tests for the command-line interface.
"""

import json

import pytest
import yaml
from click.testing import CliRunner

from rabin_cdc import __version__
from rabin_cdc.cli import main
from rabin_cdc.core.config import load_config


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def zero_file(tmp_path, zero_data):
    path = tmp_path / "zeros.bin"
    path.write_bytes(zero_data)
    return path


@pytest.fixture
def file_pair(tmp_path, random_data):
    original = random_data(60000, seed=8)
    original_path = tmp_path / "original.txt"
    modified_path = tmp_path / "modified.txt"
    original_path.write_bytes(original)
    modified_path.write_bytes(b"\x24" + original)
    return original_path, modified_path


class TestCLI:

    def test_version(self, runner):
        result = runner.invoke(main, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_chunk_text(self, runner, zero_file):
        result = runner.invoke(main, ['--quiet', 'chunk', str(zero_file), '--preview', '2'])

        assert result.exit_code == 0, result.output
        assert "Size: 2048 bytes" in result.output
        assert "Hash: 0x0000000000000000" in result.output
        assert "... and 23 more" in result.output

    def test_chunk_json(self, runner, zero_file):
        result = runner.invoke(main, ['--quiet', 'chunk', str(zero_file), '--format', 'json'])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data['total_chunks'] == 25
        assert data['chunks'][-1]['size'] == 848
        assert data['chunks'][0]['hash'] == "0x0000000000000000"

    def test_chunk_yaml_to_file(self, runner, zero_file, tmp_path):
        output = tmp_path / "chunks.yaml"
        result = runner.invoke(main, ['--quiet', 'chunk', str(zero_file), '--format', 'yaml', '-o', str(output)])

        assert result.exit_code == 0, result.output
        data = yaml.safe_load(output.read_text())
        assert data['total_bytes'] == 50000
        assert len(data['chunks']) == 25

    def test_chunk_validate(self, runner, zero_file):
        result = runner.invoke(main, ['chunk', str(zero_file), '--validate'])
        assert result.exit_code == 0, result.output

    def test_chunk_with_config(self, runner, zero_file, tmp_path):
        config = tmp_path / "cdc.yaml"
        config.write_text("chunker:\n  min_chunk_size: 4096\n")

        result = runner.invoke(main, ['--quiet', 'chunk', str(zero_file), '-c', str(config), '--format', 'json'])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)['chunks'][0]['size'] == 4096

    def test_chunk_bad_config(self, runner, zero_file, tmp_path):
        config = tmp_path / "cdc.yaml"
        config.write_text("chunker:\n  window_size: 0\n")

        result = runner.invoke(main, ['--quiet', 'chunk', str(zero_file), '-c', str(config)])
        assert result.exit_code == 1

    def test_chunk_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ['chunk', str(tmp_path / "missing.bin")])
        assert result.exit_code != 0

    def test_compare_identical(self, runner, zero_file):
        result = runner.invoke(main, ['--quiet', 'compare', str(zero_file), str(zero_file)])

        assert result.exit_code == 0, result.output
        assert "Resynchronization occurred at chunk: 0" in result.output
        assert "Number of different chunks: 0" in result.output
        assert "Percentage of chunks affected: 0.00%" in result.output

    def test_compare_modified(self, runner, file_pair):
        original, modified = file_pair
        result = runner.invoke(main, ['--quiet', 'compare', str(original), str(modified)])

        assert result.exit_code == 0, result.output
        assert "Original File Chunks:" in result.output
        assert "Modified File Chunks:" in result.output
        assert "Chunk 0 differs:" in result.output
        assert "Summary:" in result.output

    def test_compare_json(self, runner, file_pair):
        original, modified = file_pair
        result = runner.invoke(main, ['--quiet', 'compare', str(original), str(modified), '--format', 'json'])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data['different_chunks'] >= 1
        assert data['differences'][0]['index'] == 0

    def test_init_config(self, runner, tmp_path):
        output = tmp_path / "generated.yaml"
        result = runner.invoke(main, ['init-config', '-o', str(output)])

        assert result.exit_code == 0, result.output
        config = load_config(output)
        assert config.window_size == 48
        assert config.boundary_mask == 0x1FFF

    def test_log_file(self, runner, zero_file, tmp_path):
        log_file = tmp_path / "cdc.log"
        result = runner.invoke(main, ['--log-file', str(log_file), 'chunk', str(zero_file)])

        assert result.exit_code == 0, result.output
        assert log_file.exists()
