# filename: snapdir/cli.py
""" cli.py: Command-line adapter around capture() and restore(). """
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .capture import capture
from .config import load_config
from .errors import SnapshotError
from .restore import restore
from .log import LOGGER_NAME, configure_logging, get_logger

logger = get_logger(LOGGER_NAME)

EPILOG = """Examples:
  snapdir clone ./myproject snapshot.json -v
  snapdir restore snapshot.json ./restored -v
"""


def split_patterns(raw: Optional[str]) -> List[str]:
    """Comma-separated --ignore value to a pattern list. Blank items are dropped."""
    if not raw:
        return []
    return [p.strip() for p in raw.split(',') if p.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='snapdir',
        description=f"snapdir v{__version__} - Directory snapshot and restore tool",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('command', choices=['clone', 'restore'],
                        help="clone <source_dir> <output.json> | restore <snapshot.json> <destination_dir>")
    parser.add_argument('source', help="Source directory (clone) or snapshot document (restore)")
    parser.add_argument('target', help="Output document (clone) or destination directory (restore)")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable verbose logging")
    parser.add_argument('--ignore', default='', help="Additional ignore patterns (comma-separated)")
    parser.add_argument('--max-file-size', type=int, default=None, metavar='BYTES',
                        help="Skip files larger than this many bytes")
    parser.add_argument('--config', type=Path, default=None, help="Read settings from this config.json")
    parser.add_argument('--version', action='version', version=f"snapdir v{__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO, "%(message)s")

    config = load_config(args.config)
    config = config._replace(extra_patterns=config.extra_patterns + tuple(split_patterns(args.ignore)))
    if args.max_file_size is not None:
        config = config._replace(max_file_size=args.max_file_size)

    if args.command == 'clone':
        try:
            capture(args.source, args.target, config)
        except SnapshotError as e:
            logger.error("Error: failed to create snapshot: %s", e)
            return 1
        print("Snapshot created successfully")
    else:
        try:
            restore(args.source, args.target, config)
        except SnapshotError as e:
            logger.error("Error: failed to restore snapshot: %s", e)
            return 1
        print("Snapshot restored successfully")
    return 0


if __name__ == '__main__':
    sys.exit(main())
