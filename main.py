"""
Main entry point for the chunkmerge command line tool.

This module handles:
- Command line argument parsing
- Logging configuration
- Settings loading
- Listing merge chunks for three files
- Resolving a chunk and writing the new base
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Optional, List, TextIO

from chunkmerge import __version__
from chunkmerge.core.diff.text_diff import TextDiffEngine
from chunkmerge.core.merge.resolution import apply_chunk_action
from chunkmerge.core.merge.three_way import ThreeWayChunkBuilder
from chunkmerge.core.models import ChunkAction, LineRange, MergeChunk
from chunkmerge.services.file_io import FileIOService
from chunkmerge.services.settings import ApplicationSettings, SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "chunkmerge"
APP_VERSION = __version__


# =============================================================================
# Enums
# =============================================================================

class Command(Enum):
    """Sub-command to run."""
    CHUNKS = auto()
    APPLY = auto()


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    command: Command = Command.CHUNKS
    base_path: Optional[str] = None
    left_path: Optional[str] = None
    right_path: Optional[str] = None
    output_path: Optional[str] = None
    chunk_id: Optional[str] = None
    action: Optional[ChunkAction] = None
    as_json: bool = False
    no_backup: bool = False
    config_file: Optional[str] = None
    log_level: Optional[str] = None


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""

    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True, stream: Optional[TextIO] = None):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        stream = stream or sys.stderr
        self.use_colors = use_colors and hasattr(stream, 'isatty') and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure logging.

    Console output goes to stderr so it never mixes with command output.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True, stream=sys.stderr))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    return root_logger


# =============================================================================
# Command Line Parsing
# =============================================================================

def _action_type(value: str) -> ChunkAction:
    try:
        return ChunkAction.from_string(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('base', help='Common ancestor file')
    common.add_argument('left', help='Left/ours file')
    common.add_argument('right', help='Right/theirs file')

    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Three-way merge chunking and resolution",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s chunks base.txt left.txt right.txt
  %(prog)s chunks base.txt left.txt right.txt --json
  %(prog)s apply base.txt left.txt right.txt --chunk chunk-1 --action apply_left -o base.txt
        """
    )
    parser.add_argument(
        '-c', '--config',
        help='Settings file path'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=None,
        help='Log level'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {APP_VERSION}'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    chunks_parser = subparsers.add_parser(
        'chunks', parents=[common], help='List merge chunks'
    )
    chunks_parser.add_argument(
        '--json',
        action='store_true',
        help='Print chunks as JSON'
    )

    apply_parser = subparsers.add_parser(
        'apply', parents=[common], help='Resolve one chunk and write the new base'
    )
    apply_parser.add_argument(
        '--chunk',
        required=True,
        help='Chunk id (e.g. chunk-1)'
    )
    apply_parser.add_argument(
        '--action',
        required=True,
        type=_action_type,
        help='keep_base, apply_left, apply_right or manual'
    )
    apply_parser.add_argument(
        '-o', '--output',
        help='Output file (defaults to stdout)'
    )
    apply_parser.add_argument(
        '--no-backup',
        action='store_true',
        help='Do not keep a backup when overwriting the output file'
    )

    parsed = parser.parse_args(args)

    result = CommandLineArgs()
    result.command = Command[parsed.command.upper()]
    result.base_path = parsed.base
    result.left_path = parsed.left
    result.right_path = parsed.right
    result.config_file = parsed.config

    if result.command == Command.CHUNKS:
        result.as_json = parsed.json
    else:
        result.chunk_id = parsed.chunk
        result.action = parsed.action
        result.output_path = parsed.output
        result.no_backup = parsed.no_backup

    if parsed.verbose:
        result.log_level = 'DEBUG'
    else:
        result.log_level = parsed.log_level

    return result


# =============================================================================
# Commands
# =============================================================================

def _format_range(label: str, line_range: Optional[LineRange]) -> str:
    if line_range is None:
        return f"{label} -"
    # One-based for display.
    return f"{label} {line_range.start_line + 1}-{line_range.end_line + 1}"


def format_chunk(chunk: MergeChunk) -> str:
    """One-line human readable summary of a chunk."""
    return "  ".join([
        f"{chunk.id:<10}",
        f"{chunk.kind.value:<10}",
        _format_range("base", chunk.base_range),
        _format_range("left", chunk.left_range),
        _format_range("right", chunk.right_range),
    ])


def read_snapshots(args: CommandLineArgs, file_io: FileIOService) -> Optional[tuple[str, str, str]]:
    """Read base, left and right; logs and returns None on failure."""
    texts = []
    for path in (args.base_path, args.left_path, args.right_path):
        result = file_io.read_file(path)
        if not result.success:
            logging.error(f"Cannot read {path}: {result.error}")
            return None
        logging.debug(f"Read {path} ({result.content.encoding}, {result.content.size} bytes)")
        texts.append(result.text)
    return texts[0], texts[1], texts[2]


def run_chunks(
    args: CommandLineArgs,
    settings: ApplicationSettings,
    out: TextIO
) -> int:
    """List chunks for the three files."""
    snapshots = read_snapshots(args, FileIOService())
    if snapshots is None:
        return 1

    builder = ThreeWayChunkBuilder(TextDiffEngine(settings.comparison.to_compare_options()))
    chunks = builder.build(*snapshots)

    if args.as_json:
        json.dump([chunk.to_dict() for chunk in chunks], out, indent=2)
        out.write("\n")
    else:
        for chunk in chunks:
            out.write(format_chunk(chunk) + "\n")

    logging.info(
        f"{len(chunks)} chunks, {sum(1 for c in chunks if c.is_conflict)} conflicts"
    )
    return 0


def run_apply(
    args: CommandLineArgs,
    settings: ApplicationSettings,
    out: TextIO
) -> int:
    """Resolve one chunk and write the resulting base."""
    file_io = FileIOService()
    snapshots = read_snapshots(args, file_io)
    if snapshots is None:
        return 1
    base, left, right = snapshots

    builder = ThreeWayChunkBuilder(TextDiffEngine(settings.comparison.to_compare_options()))
    chunks = builder.build(base, left, right)

    chunk = next((c for c in chunks if c.id == args.chunk_id), None)
    if chunk is None:
        logging.error(f"Unknown chunk id {args.chunk_id} ({len(chunks)} chunks available)")
        return 1

    new_base = apply_chunk_action(base, left, right, chunk, args.action)
    logging.info(f"{chunk.id} ({chunk.kind.value}) resolved with {args.action.value}")

    if not args.output_path:
        out.write(new_base)
        return 0

    result = file_io.write_text(
        args.output_path,
        new_base,
        encoding=settings.merge.output_encoding,
        create_backup=settings.merge.create_backup and not args.no_backup,
        backup_extension=settings.merge.backup_extension
    )
    if not result.success:
        logging.error(f"Cannot write {args.output_path}: {result.error}")
        return 1
    if result.backup_path:
        logging.info(f"Backup written to {result.backup_path}")
    return 0


def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None) -> int:
    """
    Command line entry point.

    Returns:
        Exit code (0 for success)
    """
    args = parse_arguments(argv)

    settings_manager = SettingsManager(Path(args.config_file) if args.config_file else None)
    settings = settings_manager.settings

    setup_logging(args.log_level or settings.log_level)
    logging.debug(f"Starting {APP_NAME} v{APP_VERSION}")

    out = out or sys.stdout
    if args.command == Command.APPLY:
        return run_apply(args, settings, out)
    return run_chunks(args, settings, out)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == '__main__':
    sys.exit(main())
