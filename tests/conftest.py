"""
Shared test fixtures for snapdir.
"""

import sys
from pathlib import Path
from typing import List

import pytest

# Allow running the suite from a checkout without installing
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture()
def source_tree(tmp_path: Path) -> Path:
    """Small tree: a.txt="1", d/b.txt="2"."""
    src = tmp_path / "src"
    (src / "d").mkdir(parents=True)
    (src / "a.txt").write_text("1")
    (src / "d" / "b.txt").write_text("2")
    return src


@pytest.fixture()
def log_messages() -> List[str]:
    """Collects whatever is passed to the injected log hook."""
    return []


@pytest.fixture()
def log_hook(log_messages):
    return log_messages.append
