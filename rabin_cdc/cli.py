"""
Command-line interface for the rabin_cdc library.

Chunk a file and list its chunks, compare the chunkings of an original and a
modified file to see where they resynchronize, or write a configuration
template.
"""

import json
import sys
import time
from pathlib import Path
from typing import Optional

import click
import yaml

from rabin_cdc import __version__
from rabin_cdc.core.base import ChunkingResult
from rabin_cdc.core.compare import compare_chunkings
from rabin_cdc.core.config import CDCConfig, load_config, save_config
from rabin_cdc.core.identity import format_hash
from rabin_cdc.logging_config import (
    LogLevel,
    configure_logging,
    debug_operation,
    get_logger,
    performance_log,
    user_info,
    user_success,
    user_warning,
)
from rabin_cdc.strategies.rabin_chunker import RabinChunker
from rabin_cdc.utils.validation import ChunkValidator

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress output except errors')
@click.option('--debug', is_flag=True, help='Enable debug mode with detailed logging')
@click.option('--log-level', type=click.Choice([level.value for level in LogLevel]),
              help='Set specific log level')
@click.option('--log-file', type=click.Path(path_type=Path), help='Write logs to file')
@click.pass_context
def main(ctx: click.Context, verbose: bool, quiet: bool, debug: bool,
         log_level: Optional[str], log_file: Optional[Path]) -> None:
    """
    Content-defined chunking with a rolling fingerprint.
    """
    ctx.ensure_object(dict)

    if debug:
        level = LogLevel.DEBUG
    elif log_level:
        level = LogLevel(log_level)
    elif quiet:
        level = LogLevel.SILENT
    elif verbose:
        level = LogLevel.VERBOSE
    else:
        level = LogLevel.NORMAL

    configure_logging(
        level=level,
        file_output=bool(log_file),
        log_file=log_file,
        console_output=not quiet,
    )

    ctx.obj['verbose'] = verbose or debug
    ctx.obj['quiet'] = quiet


def _build_chunker(config: Optional[Path]) -> RabinChunker:
    cdc_config = load_config(config) if config else CDCConfig()
    debug_operation("build_chunker", cdc_config.to_dict())
    return RabinChunker(cdc_config)


def _chunk_file(chunker: RabinChunker, path: Path) -> ChunkingResult:
    start = time.time()
    result = chunker.chunk(path)
    performance_log("chunk_file", time.time() - start, file=str(path), size=result.total_bytes)
    return result


def _echo_chunks(result: ChunkingResult, title: str, preview: int) -> None:
    click.echo(f"\n{title} Chunks:")
    click.echo("----------------------")
    for chunk in result.chunks[:preview]:
        click.echo(f"Chunk {chunk.index}:")
        click.echo(f"Offset: {chunk.start}")
        click.echo(f"Size: {chunk.size} bytes")
        click.echo(f"Hash: {format_hash(chunk.hash)}")
        click.echo("----------------------")
    if len(result.chunks) > preview:
        click.echo(f"... and {len(result.chunks) - preview} more")


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False, path_type=Path), help='Configuration file')
@click.option('--output', '-o', type=click.Path(path_type=Path), help='Output file for chunk listing')
@click.option('--format', 'output_format', type=click.Choice(['text', 'json', 'yaml']), default='text', help='Output format')
@click.option('--preview', type=int, default=5, show_default=True, help='Chunks to list in text format')
@click.option('--validate', is_flag=True, help='Validate chunks after creation')
@click.pass_context
def chunk(
    ctx: click.Context,
    input_file: Path,
    config: Optional[Path],
    output: Optional[Path],
    output_format: str,
    preview: int,
    validate: bool
) -> None:
    """Chunk a file and list its chunks."""
    try:
        chunker = _build_chunker(config)
        result = _chunk_file(chunker, input_file)

        if validate:
            issues = ChunkValidator(chunker.config).validate_result(result, input_file.read_bytes())
            if issues:
                click.echo(f"Validation issues found: {len(issues)}", err=True)
                for issue in issues[:5]:
                    click.echo(f"  - {issue}", err=True)
                if len(issues) > 5:
                    click.echo(f"  ... and {len(issues) - 5} more", err=True)
                sys.exit(1)
            user_success("Validation passed")

        if output_format == 'text' and output is None:
            _echo_chunks(result, input_file.name, preview)
        else:
            if output_format == 'yaml':
                rendered = yaml.safe_dump(result.to_dict(), sort_keys=False)
            else:
                rendered = json.dumps(result.to_dict(), indent=2)

            if output:
                output.write_text(rendered, encoding='utf-8')
                click.echo(f"Chunks saved to {output}")
            else:
                click.echo(rendered)

        if not ctx.obj.get('quiet'):
            user_info(f"{result.total_chunks} chunks from {result.total_bytes} bytes in {result.processing_time:.3f}s")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument('original', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('modified', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False, path_type=Path), help='Configuration file')
@click.option('--preview', type=int, default=5, show_default=True, help='Chunks to list per file')
@click.option('--format', 'output_format', type=click.Choice(['text', 'json']), default='text', help='Output format')
def compare(
    original: Path,
    modified: Path,
    config: Optional[Path],
    preview: int,
    output_format: str
) -> None:
    """Compare the chunkings of an original and a modified file."""
    try:
        chunker = _build_chunker(config)
        original_result = _chunk_file(chunker, original)
        modified_result = _chunk_file(chunker, modified)
        report = compare_chunkings(original_result, modified_result)

        if output_format == 'json':
            click.echo(json.dumps(report.to_dict(), indent=2))
            return

        _echo_chunks(original_result, "Original File", preview)
        _echo_chunks(modified_result, "Modified File", preview)

        for diff in report.differences:
            click.echo(f"\nChunk {diff.index} differs:")
            click.echo(f"Original Hash: {format_hash(diff.original_hash)}")
            click.echo(f"Modified Hash: {format_hash(diff.modified_hash)}")

        if report.resynchronized:
            click.echo(f"\nResynchronization occurred at chunk: {report.resync_index}")
        else:
            user_warning("Chunk sequences never resynchronized")

        click.echo("\nSummary:")
        click.echo(f"Original chunks: {report.original_chunks}")
        click.echo(f"Modified chunks: {report.modified_chunks}")
        click.echo(f"Number of different chunks: {report.different_chunks}")
        click.echo(f"Identical trailing chunks: {report.shared_suffix}")
        click.echo(f"Percentage of chunks affected: {report.percent_affected:.2f}%")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command('init-config')
@click.option('--output', '-o', type=click.Path(path_type=Path), default=Path("cdc_config.yaml"),
              show_default=True, help='Output configuration file')
def init_config(output: Path) -> None:
    """Write a configuration file with the default parameters."""
    try:
        save_config(CDCConfig(), output)
        click.echo(f"Configuration file created: {output}")
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
