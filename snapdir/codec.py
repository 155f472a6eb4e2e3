# filename: snapdir/codec.py
"""
codec.py: JSON document form of a Snapshot.

    { "version": "1.0.0",
      "files": [ { "path": "d/b.txt", "contents": "2", "is_dir": false, "mode": 420 } ] }

'contents' is written whenever the entry has content, so an empty file keeps
"contents": "" and stays distinct from a directory. 'mode' is left out when 0.
Decoding checks structure only: duplicate or escaping paths are the restorer's
concern.
"""

import json
import re
from typing import Any, Dict, List, Optional

from .errors import SnapshotDecodeError
from .models import Entry, Snapshot

JSON_INDENT = 2
MAX_MODE = 0xFFFFFFFF

# JSON "\uXXXX" escapes can produce unpaired surrogates, which cannot be written as UTF-8
LONE_SURROGATE_RE = re.compile(r'[\ud800-\udfff]')


def encode(snapshot: Snapshot) -> str:
    """Serializes a Snapshot to its JSON document text."""
    files: List[Dict[str, Any]] = []
    for entry in snapshot.entries:
        record: Dict[str, Any] = {'path': entry.path}
        if entry.contents is not None:
            record['contents'] = entry.contents
        record['is_dir'] = entry.is_dir
        if entry.mode:
            record['mode'] = entry.mode
        files.append(record)
    return json.dumps({'version': snapshot.version, 'files': files}, indent=JSON_INDENT, ensure_ascii=False)


def _scrub(text: Optional[str]) -> Optional[str]:
    """Replaces unpaired surrogates with U+FFFD."""
    if text is None:
        return None
    return LONE_SURROGATE_RE.sub('\ufffd', text)


def _decode_entry(index: int, record: Any) -> Entry:
    if not isinstance(record, dict):
        raise SnapshotDecodeError(f"files[{index}] is not an object")

    path = record.get('path')
    if not isinstance(path, str):
        raise SnapshotDecodeError(f"files[{index}].path must be a string, got {type(path).__name__}")

    contents = record.get('contents')
    if contents is not None and not isinstance(contents, str):
        raise SnapshotDecodeError(f"files[{index}].contents must be a string", path)

    is_dir = record.get('is_dir')
    if is_dir is None:
        is_dir = False
    if not isinstance(is_dir, bool):
        raise SnapshotDecodeError(f"files[{index}].is_dir must be a boolean", path)

    mode = record.get('mode')
    if mode is None:
        mode = 0
    # bool is an int subclass; true/false is not a mode
    if isinstance(mode, bool) or not isinstance(mode, int) or not 0 <= mode <= MAX_MODE:
        raise SnapshotDecodeError(f"files[{index}].mode must be an unsigned 32-bit integer", path)

    return Entry(path=_scrub(path), is_dir=is_dir, mode=mode, contents=_scrub(contents))


def decode(document: str) -> Snapshot:
    """
    Parses snapshot document text.

    Raises:
        SnapshotDecodeError: If the text is not JSON or does not have the snapshot shape.
    """
    try:
        data = json.loads(document)
    except ValueError as e:
        raise SnapshotDecodeError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SnapshotDecodeError("snapshot document must be a JSON object")

    version = data.get('version')
    if version is None:
        version = ""
    if not isinstance(version, str):
        raise SnapshotDecodeError("'version' must be a string")

    files = data.get('files')
    if files is None:
        files = []
    if not isinstance(files, list):
        raise SnapshotDecodeError("'files' must be a list")

    return Snapshot(version=_scrub(version), entries=tuple(_decode_entry(i, r) for i, r in enumerate(files)))
