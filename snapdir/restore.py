# filename: snapdir/restore.py
"""
restore.py: Materializes a Snapshot as a new directory tree.

The destination must not exist. Every entry path is checked before anything is
created, so a document that would write outside the destination is refused
up front. After that, entries are applied in order and the first filesystem
error aborts; whatever was already written stays in place.
"""

import os
from pathlib import Path, PureWindowsPath
from typing import List, Optional, Tuple

from .codec import decode
from .config import SnapshotConfig
from .errors import DestinationExistsError, SnapshotDecodeError, SnapshotIOError, UnsafePathError
from .log import LogHook, get_logger, make_log_hook
from .models import SNAPSHOT_VERSION, Entry, Snapshot
from .validate import validate_path

logger = get_logger(__name__)

# --- Default Permissions ---
DEFAULT_FILE_MODE = 0o644
DEFAULT_DIR_MODE = 0o755


def check_entry_path(path: str, windows: bool = os.name == 'nt') -> List[str]:
    """
    Splits an entry path into segments, refusing anything that is not a plain
    relative path inside the destination.

    Backslashes and drive prefixes only mean something on Windows; elsewhere
    'c:notes.txt' and 'a\\b' are ordinary file names.

    Raises:
        UnsafePathError: For empty or '.' paths, absolute paths, drive prefixes,
            '..' segments, or paths that cannot be encoded as UTF-8.
    """
    if path in ('', '.'):
        raise UnsafePathError(f"invalid entry path {path!r}", path)
    try:
        path.encode('utf-8')
    except UnicodeEncodeError as e:
        raise UnsafePathError(f"entry path is not valid UTF-8: {path!r}", path) from e

    normalized = path
    if windows:
        if PureWindowsPath(path).drive:
            raise UnsafePathError(f"entry path must be relative: {path}", path)
        normalized = path.replace('\\', '/')
    if normalized.startswith('/'):
        raise UnsafePathError(f"entry path must be relative: {path}", path)
    segments = [s for s in normalized.split('/') if s not in ('', '.')]
    if not segments:
        raise UnsafePathError(f"invalid entry path {path!r}", path)
    if '..' in segments:
        raise UnsafePathError(f"entry path escapes the destination: {path}", path)
    return segments


def _file_bytes(entry: Entry) -> bytes:
    try:
        return (entry.contents or '').encode('utf-8')
    except UnicodeEncodeError as e:
        raise SnapshotDecodeError(f"contents of {entry.path} are not valid UTF-8 text", entry.path) from e


def restore_tree(snapshot: Snapshot, destination, log: Optional[LogHook] = None) -> None:
    """
    Recreates the snapshot's directories and files under destination.

    Directories get their stored mode (0755 when unset) and files theirs (0644
    when unset). Directory modes are applied once all entries are written,
    deepest first, so a read-only directory can still receive its contents.
    A path that appears twice is written twice; the later entry wins.

    Raises:
        DestinationExistsError: If destination already exists.
        UnsafePathError: If an entry path is not a safe relative path.
        SnapshotDecodeError: If a file body cannot be encoded as UTF-8.
        SnapshotIOError: On any filesystem failure while writing.
    """
    log = make_log_hook(log, logger)
    dest = Path(destination)

    if snapshot.version != SNAPSHOT_VERSION:
        log(f"Warning: snapshot version {snapshot.version!r} differs from {SNAPSHOT_VERSION!r}")

    if os.path.lexists(dest):
        raise DestinationExistsError(
            f"destination already exists: {dest} (remove it first or choose a different location)", str(dest))

    # Preflight: nothing is created until every path and every file body checks out
    targets = [
        (entry, dest.joinpath(*check_entry_path(entry.path)), None if entry.is_dir else _file_bytes(entry))
        for entry in snapshot.entries
    ]

    try:
        dest.mkdir(mode=DEFAULT_DIR_MODE, parents=True)
    except OSError as e:
        raise SnapshotIOError(f"failed to create destination directory: {e}", str(dest)) from e

    dir_modes: List[Tuple[Path, int]] = []
    for entry, target, data in targets:
        if entry.is_dir:
            try:
                target.mkdir(mode=DEFAULT_DIR_MODE, parents=True, exist_ok=True)
            except OSError as e:
                raise SnapshotIOError(f"failed to create directory {entry.path}: {e}", entry.path) from e
            dir_modes.append((target, entry.mode or DEFAULT_DIR_MODE))
            log(f"Created directory: {entry.path}")
            continue

        try:
            target.parent.mkdir(mode=DEFAULT_DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise SnapshotIOError(f"failed to create parent directory for {entry.path}: {e}", entry.path) from e

        try:
            target.write_bytes(data)
            os.chmod(target, entry.mode or DEFAULT_FILE_MODE)
        except OSError as e:
            raise SnapshotIOError(f"failed to write file {entry.path}: {e}", entry.path) from e
        log(f"Restored file: {entry.path}")

    for target, mode in sorted(dir_modes, key=lambda item: len(item[0].parts), reverse=True):
        try:
            os.chmod(target, mode)
        except OSError as e:
            raise SnapshotIOError(f"failed to set mode on {target}: {e}", str(target)) from e

    log(f"Restore complete: {len(snapshot.entries)} entries restored")


def restore(document_path: str, destination_path: str, config: Optional[SnapshotConfig] = None) -> Snapshot:
    """
    Reads the snapshot document at document_path and restores it to destination_path.

    Returns:
        Snapshot: The snapshot that was applied.

    Raises:
        SnapshotError: Validation, decode or filesystem failure. A malformed
            document is rejected before the destination is touched.
    """
    config = config or SnapshotConfig()
    log = make_log_hook(config.log, logger)

    validate_path(document_path, must_exist=True)
    validate_path(destination_path)

    try:
        document = Path(document_path).read_text(encoding='utf-8', errors='replace')
    except OSError as e:
        raise SnapshotIOError(f"failed to read snapshot document: {e}", document_path) from e

    snapshot = decode(document)
    log(f"Restoring snapshot (version: {snapshot.version}) to {destination_path}")
    restore_tree(snapshot, destination_path, log)
    return snapshot
