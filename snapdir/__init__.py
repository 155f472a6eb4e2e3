"""snapdir: capture a directory tree into one JSON document and restore it elsewhere."""
from .capture import capture, capture_tree
from .codec import decode, encode
from .config import SnapshotConfig, load_config
from .errors import (
    DestinationExistsError,
    IgnorePatternError,
    InvalidPathError,
    PathNotFoundError,
    SnapshotDecodeError,
    SnapshotError,
    SnapshotIOError,
    SourceNotDirectoryError,
    UnsafePathError,
)
from .ignore import is_ignored, load_ignore_patterns
from .models import SNAPSHOT_VERSION, Entry, Snapshot
from .restore import restore, restore_tree

__version__ = "1.0.0"

__all__ = [
    'capture', 'capture_tree', 'restore', 'restore_tree',
    'encode', 'decode',
    'is_ignored', 'load_ignore_patterns',
    'Entry', 'Snapshot', 'SNAPSHOT_VERSION',
    'SnapshotConfig', 'load_config',
    'SnapshotError', 'InvalidPathError', 'UnsafePathError', 'PathNotFoundError',
    'SourceNotDirectoryError', 'DestinationExistsError', 'SnapshotIOError',
    'SnapshotDecodeError', 'IgnorePatternError',
]
