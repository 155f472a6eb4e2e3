# filename: snapdir/errors.py
""" errors.py: Typed exceptions raised by the capture and restore operations. """
from typing import Optional


class SnapshotError(Exception):
    """Base exception for snapdir failures. Carries the offending path when known."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class InvalidPathError(SnapshotError):
    """Raised when a required path argument is empty or otherwise unusable."""


class UnsafePathError(InvalidPathError):
    """Raised when a snapshot entry path would escape the restore destination."""


class PathNotFoundError(SnapshotError):
    """Raised when the capture source or the snapshot document does not exist."""


class SourceNotDirectoryError(SnapshotError):
    """Raised when the capture source exists but is not a directory."""


class DestinationExistsError(SnapshotError):
    """Raised when the restore destination is already present."""


class SnapshotIOError(SnapshotError):
    """Raised when reading, writing or stat-ing a path fails."""


class SnapshotDecodeError(SnapshotError):
    """Raised when a snapshot document is malformed."""


class IgnorePatternError(SnapshotError):
    """Raised for a malformed ignore pattern. Recoverable: callers log it and move on."""
