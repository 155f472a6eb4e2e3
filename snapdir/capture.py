# filename: snapdir/capture.py
"""
capture.py: Walks a source directory into an in-memory Snapshot and writes it out.

The walk is depth-first from the root (the root itself is not recorded), with
each directory's children visited in lexical name order. Ignored directories
are pruned whole. Files larger than the size cap are left out entirely. Any
I/O failure on a node that is not ignored aborts the capture; the document is
only written once the whole snapshot has been built.
"""

import os
import stat
from pathlib import Path
from typing import List, Optional, Sequence

from .codec import encode
from .config import DEFAULT_MAX_FILE_SIZE, SnapshotConfig
from .errors import PathNotFoundError, SnapshotIOError, SourceNotDirectoryError
from .ignore import combine_patterns, is_ignored, load_ignore_patterns
from .log import LogHook, get_logger, make_log_hook
from .models import SNAPSHOT_VERSION, Entry, Snapshot
from .validate import validate_path

logger = get_logger(__name__)

PERMISSION_BITS = 0o777


def _display_name(name: str) -> str:
    # Undecodable name bytes arrive as surrogate escapes; store them as U+FFFD
    return os.fsencode(name).decode('utf-8', errors='replace')


def _read_text(path: str) -> str:
    # Snapshot contents are text; undecodable bytes become U+FFFD
    with open(path, 'rb') as f:
        data = f.read()
    return data.decode('utf-8', errors='replace')


def capture_tree(root, patterns: Sequence[str], max_bytes: int = DEFAULT_MAX_FILE_SIZE,
                 log: Optional[LogHook] = None) -> Snapshot:
    """
    Builds a Snapshot of everything under root that the patterns do not ignore.

    Args:
        root: Directory to capture.
        patterns: Ordered ignore patterns (see ignore.is_ignored).
        max_bytes: Files strictly larger than this are skipped.
        log: Optional diagnostic callback.

    Returns:
        Snapshot: Entries in depth-first, per-directory lexical order.

    Raises:
        PathNotFoundError: If root does not exist.
        SourceNotDirectoryError: If root is not a directory.
        SnapshotIOError: If any non-ignored node cannot be listed, stat-ed or read.
    """
    log = make_log_hook(log, logger)
    root_str = os.fspath(root)

    try:
        root_stat = os.stat(root_str)
    except FileNotFoundError as e:
        raise PathNotFoundError(f"path does not exist: {root_str}", root_str) from e
    except OSError as e:
        raise SnapshotIOError(f"failed to stat source: {e}", root_str) from e
    if not stat.S_ISDIR(root_stat.st_mode):
        raise SourceNotDirectoryError(f"source must be a directory: {root_str}", root_str)

    entries: List[Entry] = []

    def walk(directory: str, rel_prefix: str) -> None:
        try:
            with os.scandir(directory) as it:
                children = sorted(it, key=lambda child: child.name)
        except OSError as e:
            raise SnapshotIOError(f"error accessing {directory}: {e}", directory) from e

        for child in children:
            rel_path = f"{rel_prefix}{_display_name(child.name)}"
            try:
                is_dir = child.is_dir(follow_symlinks=False)
            except OSError as e:
                raise SnapshotIOError(f"error accessing {child.path}: {e}", child.path) from e

            if is_ignored(rel_path, patterns, log):
                log(f"Ignoring: {rel_path}")
                continue

            try:
                info = child.stat(follow_symlinks=False)
            except OSError as e:
                raise SnapshotIOError(f"failed to get file info for {child.path}: {e}", child.path) from e
            mode = info.st_mode & PERMISSION_BITS

            if is_dir:
                entries.append(Entry(path=rel_path, is_dir=True, mode=mode))
                log(f"Added: {rel_path}")
                walk(child.path, rel_path + '/')
                continue

            if info.st_size > max_bytes:
                log(f"Skipping large file: {rel_path} (size: {info.st_size} bytes)")
                continue

            try:
                contents = _read_text(child.path)
            except OSError as e:
                raise SnapshotIOError(f"failed to read file {child.path}: {e}", child.path) from e
            entries.append(Entry(path=rel_path, is_dir=False, mode=mode, contents=contents))
            log(f"Added: {rel_path}")

    walk(root_str, '')
    return Snapshot(version=SNAPSHOT_VERSION, entries=tuple(entries))


def capture(source_path: str, output_path: str, config: Optional[SnapshotConfig] = None) -> Snapshot:
    """
    Captures source_path and writes the snapshot document to output_path.

    Patterns are the built-ins, then the source's rule file, then
    config.extra_patterns.

    Returns:
        Snapshot: The snapshot that was written.

    Raises:
        SnapshotError: Any validation, traversal or write failure. Nothing is
            written to output_path unless the whole capture succeeded.
    """
    config = config or SnapshotConfig()
    log = make_log_hook(config.log, logger)

    validate_path(source_path, must_exist=True)
    validate_path(output_path)
    if not os.path.isdir(source_path):
        raise SourceNotDirectoryError(f"source must be a directory: {source_path}", source_path)

    patterns = combine_patterns(load_ignore_patterns(source_path, log), config.extra_patterns)
    log(f"Starting snapshot of {source_path}")
    log(f"Ignore patterns: {patterns}")

    snapshot = capture_tree(source_path, patterns, config.max_file_size, log)
    log(f"Snapshot complete: {snapshot.file_count} files, {len(snapshot.entries)} total entries")

    try:
        document = encode(snapshot).encode('utf-8')
    except UnicodeError as e:
        raise SnapshotIOError(f"failed to encode snapshot: {e}", output_path) from e
    # Encoded in full before the output is opened, so a failure leaves no empty file behind
    try:
        Path(output_path).write_bytes(document)
    except OSError as e:
        raise SnapshotIOError(f"failed to write output file: {e}", output_path) from e

    log(f"Snapshot saved to: {output_path}")
    return snapshot
