# filename: snapdir/ignore.py
"""
ignore.py: Loading and evaluating ignore patterns.

Matching is intentionally loose: a pattern hits when it glob-matches the final
path segment, OR when it occurs anywhere in the slash-normalized relative path
as a plain substring. There is no anchoring, no '!' rule negation and no '**'. Snapshots
already in the wild were captured under these rules, so keep them as they are.
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .errors import IgnorePatternError
from .log import LogHook, get_logger, make_log_hook

logger = get_logger(__name__)

# --- Default Configuration ---
DEFAULT_IGNORE_PATTERNS = ['.git']
RULE_FILENAME = '.gitignore'


# ============================================================
# --- Rule Loading ---
# ============================================================
def load_ignore_patterns(root, log: Optional[LogHook] = None) -> List[str]:
    """
    Builds the ordered pattern list for a capture root.

    Starts with the built-in patterns, then appends every non-blank line of the
    rule file at the root that does not start with '#', trimmed, in file order.

    Args:
        root: The capture root directory.
        log: Optional diagnostic callback.

    Returns:
        List[str]: Built-in patterns followed by the rule file's patterns.
    """
    log = make_log_hook(log, logger)
    patterns = list(DEFAULT_IGNORE_PATTERNS)
    rule_path = Path(root) / RULE_FILENAME

    try:
        handle = open(rule_path, 'r', encoding='utf-8', errors='replace')
    except OSError:
        log(f"No {RULE_FILENAME} found, using default patterns")
        return patterns

    with handle:
        try:
            for line in handle:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                patterns.append(line)
        except OSError as e:
            log(f"Warning: error reading {RULE_FILENAME}: {e}")

    return patterns


def combine_patterns(base: Iterable[str], extra: Optional[Iterable[str]] = None) -> List[str]:
    """Appends caller-supplied extra patterns after the loaded ones. Blank extras are dropped."""
    combined = list(base)
    if extra:
        combined.extend(p.strip() for p in extra if p and p.strip())
    return combined


# ============================================================
# --- Matching ---
# ============================================================
def _class_char(pattern: str, i: int) -> Tuple[str, int]:
    """One (possibly escaped) character inside a '[...]' class."""
    if i >= len(pattern):
        raise IgnorePatternError(f"unterminated character class in pattern {pattern!r}", pattern)
    c = pattern[i]
    if c in '-]':
        raise IgnorePatternError(f"unexpected {c!r} in character class of pattern {pattern!r}", pattern)
    if c == '\\':
        i += 1
        if i >= len(pattern):
            raise IgnorePatternError(f"trailing escape in pattern {pattern!r}", pattern)
        c = pattern[i]
    return c, i + 1


def _parse_class(pattern: str, i: int) -> Tuple[str, int]:
    """Regex for the class starting just after '[' at index i, plus the index past its ']'."""
    negate = i < len(pattern) and pattern[i] == '^'
    if negate:
        i += 1
    ranges: List[Tuple[str, str]] = []
    while True:
        if i < len(pattern) and pattern[i] == ']' and ranges:
            break
        lo, i = _class_char(pattern, i)
        hi = lo
        if i < len(pattern) and pattern[i] == '-':
            hi, i = _class_char(pattern, i + 1)
        ranges.append((lo, hi))

    # A reversed range (z-a) is legal and matches nothing
    parts = [re.escape(lo) if lo == hi else f"{re.escape(lo)}-{re.escape(hi)}" for lo, hi in ranges if lo <= hi]
    if not parts:
        return ('.' if negate else '(?!)'), i + 1
    return f"[{'^' if negate else ''}{''.join(parts)}]", i + 1


@lru_cache(maxsize=256)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """
    Compiles a basename glob: '*' and '?' never cross '/', '[...]' classes
    take ranges and '^' negation, and '\\' escapes the next character.

    Raises:
        IgnorePatternError: On an unterminated or empty class, a bare '-' or ']'
            inside a class, or a trailing escape.
    """
    out: List[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == '*':
            out.append('[^/]*')
            i += 1
        elif c == '?':
            out.append('[^/]')
            i += 1
        elif c == '\\':
            if i + 1 >= n:
                raise IgnorePatternError(f"trailing escape in pattern {pattern!r}", pattern)
            out.append(re.escape(pattern[i + 1]))
            i += 2
        elif c == '[':
            chunk, i = _parse_class(pattern, i + 1)
            out.append(chunk)
        else:
            out.append(re.escape(c))
            i += 1
    return re.compile(''.join(out), re.DOTALL)


def normalize_path(path: str) -> str:
    """Forward slashes, no leading './'."""
    normalized = str(path).replace('\\', '/')
    while normalized.startswith('./'):
        normalized = normalized[2:]
    return normalized


def is_ignored(path: str, patterns: Iterable[str], log: Optional[LogHook] = None) -> bool:
    """
    True if any pattern glob-matches the basename of path, or occurs in the
    normalized path as a substring. Malformed patterns are logged and skipped.
    """
    normalized = normalize_path(path)
    basename = normalized.rstrip('/').rsplit('/', 1)[-1]

    for pattern in patterns:
        try:
            glob = compile_glob(pattern)
        except IgnorePatternError as e:
            make_log_hook(log, logger)(f"Warning: invalid pattern {pattern!r}: {e}")
            continue
        if glob.fullmatch(basename):
            return True
        if pattern in normalized:
            return True
    return False
