"""Tests for restoring snapshots onto disk."""

import json
import os
import stat
from pathlib import Path

import pytest

from snapdir.capture import capture
from snapdir.codec import encode
from snapdir.errors import (
    DestinationExistsError,
    InvalidPathError,
    PathNotFoundError,
    SnapshotDecodeError,
    UnsafePathError,
)
from snapdir.models import Entry, Snapshot
from snapdir.restore import DEFAULT_DIR_MODE, DEFAULT_FILE_MODE, check_entry_path, restore, restore_tree


def mode_of(path: Path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


# ---------------------------------------------------------------------------
# Tests: check_entry_path
# ---------------------------------------------------------------------------

@pytest.mark.unit
class TestCheckEntryPath:
    def test_plain_relative_path(self):
        assert check_entry_path("d/b.txt") == ["d", "b.txt"]
        assert check_entry_path("./d//b.txt") == ["d", "b.txt"]

    @pytest.mark.parametrize("path", ["", ".", "./", "/etc/passwd", "../up", "a/../../b", "f\ud800"])
    def test_unsafe(self, path):
        with pytest.raises(UnsafePathError):
            check_entry_path(path)

    @pytest.mark.parametrize("path, segments", [
        ("c:notes.txt", ["c:notes.txt"]),
        ("d/C:x", ["d", "C:x"]),
        ("a\\..\\b", ["a\\..\\b"]),
    ])
    def test_posix_names_with_colons_and_backslashes(self, path, segments):
        assert check_entry_path(path, windows=False) == segments

    @pytest.mark.parametrize("path", ["C:/x", "c:notes.txt", "\\\\server\\share\\f", "a\\..\\b", "\\root"])
    def test_unsafe_on_windows(self, path):
        with pytest.raises(UnsafePathError):
            check_entry_path(path, windows=True)

    def test_backslash_separates_on_windows(self):
        assert check_entry_path("d\\b.txt", windows=True) == ["d", "b.txt"]


# ---------------------------------------------------------------------------
# Tests: restore_tree
# ---------------------------------------------------------------------------

@pytest.mark.unit
class TestRestoreTree:
    def test_creates_entries_with_modes(self, tmp_path: Path):
        dest = tmp_path / "out"
        snapshot = Snapshot(entries=(
            Entry(path="d", is_dir=True, mode=0o750),
            Entry(path="d/run.sh", mode=0o700, contents="#!/bin/sh\n"),
            Entry(path="plain.txt", contents="p"),
        ))
        restore_tree(snapshot, dest)
        assert (dest / "d" / "run.sh").read_text() == "#!/bin/sh\n"
        assert mode_of(dest / "d") == 0o750
        assert mode_of(dest / "d" / "run.sh") == 0o700
        assert mode_of(dest / "plain.txt") == DEFAULT_FILE_MODE

    def test_zero_dir_mode_uses_default(self, tmp_path: Path):
        dest = tmp_path / "out"
        restore_tree(Snapshot(entries=(Entry(path="d", is_dir=True),)), dest)
        assert mode_of(dest / "d") == DEFAULT_DIR_MODE

    def test_missing_ancestors_created(self, tmp_path: Path):
        # Child listed before (or without) its parents
        dest = tmp_path / "out"
        snapshot = Snapshot(entries=(
            Entry(path="x/y/z.txt", contents="z"),
            Entry(path="p/q", is_dir=True, mode=0o700),
        ))
        restore_tree(snapshot, dest)
        assert (dest / "x" / "y" / "z.txt").read_text() == "z"
        assert mode_of(dest / "x") == DEFAULT_DIR_MODE
        assert (dest / "p" / "q").is_dir()

    def test_read_only_directory_still_populated(self, tmp_path: Path):
        dest = tmp_path / "out"
        snapshot = Snapshot(entries=(
            Entry(path="ro", is_dir=True, mode=0o555),
            Entry(path="ro/f.txt", mode=0o444, contents="f"),
        ))
        restore_tree(snapshot, dest)
        assert (dest / "ro" / "f.txt").read_text() == "f"
        assert mode_of(dest / "ro") == 0o555
        os.chmod(dest / "ro", 0o755)

    def test_absent_contents_writes_empty_file(self, tmp_path: Path):
        dest = tmp_path / "out"
        restore_tree(Snapshot(entries=(Entry(path="blank"),)), dest)
        assert (dest / "blank").read_bytes() == b""

    def test_duplicate_path_later_wins(self, tmp_path: Path):
        dest = tmp_path / "out"
        restore_tree(Snapshot(entries=(Entry(path="f", contents="first"), Entry(path="f", contents="second"))), dest)
        assert (dest / "f").read_text() == "second"

    def test_existing_empty_destination_refused(self, tmp_path: Path):
        dest = tmp_path / "out"
        dest.mkdir()
        with pytest.raises(DestinationExistsError):
            restore_tree(Snapshot(entries=(Entry(path="f", contents="x"),)), dest)
        assert list(dest.iterdir()) == []

    def test_existing_file_destination_refused(self, tmp_path: Path):
        dest = tmp_path / "out"
        dest.write_text("keep")
        with pytest.raises(DestinationExistsError):
            restore_tree(Snapshot(), dest)
        assert dest.read_text() == "keep"

    def test_escaping_path_refused_before_any_write(self, tmp_path: Path):
        dest = tmp_path / "out"
        snapshot = Snapshot(entries=(
            Entry(path="ok.txt", contents="fine"),
            Entry(path="../escaped.txt", contents="bad"),
        ))
        with pytest.raises(UnsafePathError):
            restore_tree(snapshot, dest)
        assert not dest.exists()
        assert not (tmp_path / "escaped.txt").exists()

    def test_unencodable_contents_refused_before_any_write(self, tmp_path: Path):
        dest = tmp_path / "out"
        snapshot = Snapshot(entries=(Entry(path="ok.txt", contents="fine"), Entry(path="f", contents="\ud800")))
        with pytest.raises(SnapshotDecodeError):
            restore_tree(snapshot, dest)
        assert not dest.exists()

    def test_version_mismatch_is_only_logged(self, tmp_path: Path, log_messages, log_hook):
        restore_tree(Snapshot(version="0.1", entries=(Entry(path="f", contents="x"),)), tmp_path / "out", log_hook)
        assert (tmp_path / "out" / "f").read_text() == "x"
        assert any("version" in m for m in log_messages)


# ---------------------------------------------------------------------------
# Tests: restore (document on disk)
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestRestore:
    def test_capture_then_restore_is_faithful(self, source_tree, tmp_path: Path):
        (source_tree / ".git").mkdir()
        (source_tree / ".git" / "HEAD").write_text("ref")
        os.chmod(source_tree / "a.txt", 0o600)
        doc = tmp_path / "snap.json"
        capture(str(source_tree), str(doc))

        dest = tmp_path / "restored"
        restore(str(doc), str(dest))
        assert (dest / "a.txt").read_bytes() == b"1"
        assert (dest / "d" / "b.txt").read_bytes() == b"2"
        assert mode_of(dest / "a.txt") == 0o600
        assert not (dest / ".git").exists()
        assert sorted(p.relative_to(dest).as_posix() for p in dest.rglob("*")) == ["a.txt", "d", "d/b.txt"]

    def test_destination_exists(self, tmp_path: Path):
        doc = tmp_path / "snap.json"
        doc.write_text(encode(Snapshot(entries=(Entry(path="f", contents="x"),))))
        dest = tmp_path / "dest"
        dest.mkdir()
        with pytest.raises(DestinationExistsError):
            restore(str(doc), str(dest))
        assert not (dest / "f").exists()

    def test_malformed_document_halts_before_mutation(self, tmp_path: Path):
        doc = tmp_path / "snap.json"
        doc.write_text(json.dumps({"version": "1.0.0", "files": [{"path": 7}]}))
        dest = tmp_path / "dest"
        with pytest.raises(SnapshotDecodeError):
            restore(str(doc), str(dest))
        assert not dest.exists()

    def test_missing_document(self, tmp_path: Path):
        with pytest.raises(PathNotFoundError):
            restore(str(tmp_path / "nope.json"), str(tmp_path / "dest"))

    def test_empty_paths(self, tmp_path: Path):
        with pytest.raises(InvalidPathError):
            restore("", str(tmp_path / "dest"))
        doc = tmp_path / "snap.json"
        doc.write_text(encode(Snapshot()))
        with pytest.raises(InvalidPathError):
            restore(str(doc), "")

    def test_lone_surrogate_document_restores_with_replacement(self, tmp_path: Path):
        doc = tmp_path / "snap.json"
        doc.write_text(r'{"version": "1.0.0", "files": [{"path": "f", "contents": "\ud800"}]}')
        dest = tmp_path / "dest"
        restore(str(doc), str(dest))
        assert (dest / "f").read_text(encoding="utf-8") == "\ufffd"

    @pytest.mark.skipif(os.name == "nt", reason="':' is not allowed in Windows file names")
    def test_colon_names_round_trip(self, tmp_path: Path):
        src = tmp_path / "src"
        (src / "d").mkdir(parents=True)
        (src / "c:notes.txt").write_text("n")
        (src / "d" / "C:x").write_text("x")
        doc = tmp_path / "snap.json"
        capture(str(src), str(doc))
        dest = tmp_path / "restored"
        restore(str(doc), str(dest))
        assert (dest / "c:notes.txt").read_text() == "n"
        assert (dest / "d" / "C:x").read_text() == "x"
