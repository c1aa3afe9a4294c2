"""
Tests for the file-system access layer.
"""

import os
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from modules.file_manager.fs_layer import LocalFileSystem, EntryKind, WalkEntry


@pytest.fixture
def fs():
    return LocalFileSystem()


class TestProbe:
    """Test entry classification."""

    def test_probe_kinds(self, fs, tmp_path):
        """Files, directories and missing paths are told apart in one call."""
        (tmp_path / "f").write_text("x")

        assert fs.probe(tmp_path) is EntryKind.DIRECTORY
        assert fs.probe(tmp_path / "f") is EntryKind.FILE
        assert fs.probe(tmp_path / "missing") is EntryKind.ABSENT

    def test_probe_dangling_symlink(self, fs, tmp_path):
        """A link to nothing counts as absent."""
        link = tmp_path / "link"
        link.symlink_to(tmp_path / "nowhere")

        assert fs.probe(link) is EntryKind.ABSENT


class TestWalk:
    """Test the depth-first directory walk."""

    def test_walk_order(self, fs, tmp_path):
        """Each directory is followed by its own contents before its next sibling."""
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "inner.txt").write_text("x")
        (tmp_path / "b.txt").write_text("x")

        entries = list(fs.walk(tmp_path))

        assert [os.path.relpath(e.path, tmp_path) for e in entries] == [
            "a",
            os.path.join("a", "inner.txt"),
            "b.txt",
        ]
        assert [e.kind for e in entries] == [EntryKind.DIRECTORY, EntryKind.FILE, EntryKind.FILE]
        assert not any(e.skipped for e in entries)

    def test_walk_missing_root(self, fs, tmp_path):
        """A root that cannot be listed is reported once as skipped."""
        entries = list(fs.walk(tmp_path / "missing"))

        assert len(entries) == 1
        assert entries[0].skipped

    def test_walk_skips_unlistable_directory(self, fs, tmp_path, monkeypatch):
        """A directory that fails to list is skipped and the walk carries on."""
        (tmp_path / "bad").mkdir()
        (tmp_path / "bad" / "hidden.txt").write_text("x")
        (tmp_path / "good").mkdir()
        (tmp_path / "good" / "seen.txt").write_text("x")

        real_scandir = os.scandir
        bad = str(tmp_path / "bad")

        def scandir(path):
            if str(path) == bad:
                raise PermissionError(13, "Permission denied", path)
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", scandir)

        entries = list(fs.walk(tmp_path))
        names = [e.name for e in entries if not e.skipped]
        skipped = [e for e in entries if e.skipped]

        assert "seen.txt" in names
        assert "hidden.txt" not in names
        assert [e.path for e in skipped] == [bad]
        assert "Permission denied" in skipped[0].error

    def test_walk_very_deep_tree(self, fs, tmp_path):
        """Depth is not limited by the interpreter's recursion limit."""
        depth = 1200
        current = tmp_path
        for _ in range(depth):
            current = current / "a"
            current.mkdir()
        (current / "target.txt").write_text("deep")

        entries = list(fs.walk(tmp_path))

        assert len(entries) == depth + 1
        assert entries[-1].path == str(current / "target.txt")
        assert entries[-1].kind is EntryKind.FILE

    def test_walk_directory_symlink_not_followed(self, fs, tmp_path):
        """A link to a directory is reported as a directory and not entered."""
        real = tmp_path / "real"
        real.mkdir()
        (real / "inside.txt").write_text("x")
        (tmp_path / "zlink").symlink_to(real, target_is_directory=True)

        entries = {os.path.relpath(e.path, tmp_path): e.kind for e in fs.walk(tmp_path)}

        assert entries["zlink"] is EntryKind.DIRECTORY
        assert os.path.join("zlink", "inside.txt") not in entries
        assert entries[os.path.join("real", "inside.txt")] is EntryKind.FILE

    def test_walk_entry_name(self):
        """WalkEntry.name is the last path component."""
        entry = WalkEntry(path=os.path.join("x", "y", "z.txt"), kind=EntryKind.FILE)

        assert entry.name == "z.txt"
        assert not entry.skipped


class TestMove:
    """Test moves onto existing directories."""

    def test_move_directory_into_existing(self, fs, tmp_path):
        """Children land in the destination and the source is removed."""
        src = tmp_path / "src"
        src.mkdir()
        (src / "one.txt").write_text("1")
        dst = tmp_path / "dst"
        dst.mkdir()

        fs.move(src, dst)

        assert not src.exists()
        assert (dst / "one.txt").read_text() == "1"

    def test_move_clash_raises(self, fs, tmp_path):
        """A clash is an OSError and nothing moves."""
        src = tmp_path / "src"
        src.mkdir()
        (src / "one.txt").write_text("1")
        (src / "two.txt").write_text("2")
        dst = tmp_path / "dst"
        dst.mkdir()
        (dst / "two.txt").write_text("old")

        with pytest.raises(FileExistsError):
            fs.move(src, dst)

        assert (src / "one.txt").exists()
        assert (dst / "two.txt").read_text() == "old"

    def test_move_into_own_subdirectory_raises(self, fs, tmp_path):
        """A destination below the source is refused before anything moves."""
        src = tmp_path / "src"
        src.mkdir()
        (src / "a.txt").write_text("a")
        (src / "sub").mkdir()

        with pytest.raises(OSError):
            fs.move(src, src / "sub")

        assert (src / "a.txt").read_text() == "a"
        assert os.listdir(src / "sub") == []

    def test_occupied_sees_dangling_symlink(self, fs, tmp_path):
        link = tmp_path / "link"
        link.symlink_to(tmp_path / "nowhere")

        assert fs.occupied(link)
        assert not fs.occupied(tmp_path / "missing")

    def test_list_entries(self, fs, tmp_path):
        (tmp_path / "a").mkdir()
        (tmp_path / "b").write_text("b")

        assert sorted(fs.list_entries(tmp_path)) == ["a", "b"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
