# filename: snapdir/validate.py
""" validate.py: Checks on the path arguments handed to capture and restore. """
import os

from .errors import InvalidPathError, PathNotFoundError, SnapshotIOError


def validate_path(path: str, must_exist: bool = False) -> None:
    """
    Ensures a path is non-empty and, optionally, that it exists.

    Args:
        path: The path string to check.
        must_exist: Also require that the path is present on disk.

    Raises:
        InvalidPathError: If the path is empty.
        PathNotFoundError: If must_exist is set and nothing is there.
        SnapshotIOError: If the path cannot be stat-ed for another reason.
    """
    if not path:
        raise InvalidPathError("path cannot be empty", path)

    if must_exist:
        try:
            os.stat(path)
        except FileNotFoundError as e:
            raise PathNotFoundError(f"path does not exist: {path}", path) from e
        except OSError as e:
            raise SnapshotIOError(f"cannot access path {path}: {e}", path) from e
