# filename: snapdir/models.py
""" models.py: Value types for a captured directory tree. """
from typing import NamedTuple, Optional, Tuple

SNAPSHOT_VERSION = "1.0.0"


class Entry(NamedTuple):
    """One file or directory record within a Snapshot."""
    path: str                       # Relative, forward-slash separated, never '' or '.'
    is_dir: bool = False
    mode: int = 0                   # Permission bits, 0 = apply default on restore
    contents: Optional[str] = None  # None for directories (and absent in the document)


class Snapshot(NamedTuple):
    """Versioned, ordered collection of entries describing a captured tree."""
    version: str = SNAPSHOT_VERSION
    entries: Tuple[Entry, ...] = ()

    @property
    def file_count(self) -> int:
        return sum(1 for entry in self.entries if not entry.is_dir)
