"""Unit tests for the filesystem capability (scaffoldgen.filesystem)."""

from __future__ import annotations

from pathlib import Path

import pytest

from scaffoldgen.filesystem import LocalFileSystem

pytestmark = pytest.mark.unit


class TestLocalFileSystem:
    def test_create_dir_with_parents(self, tmp_path: Path):
        target = tmp_path / "a" / "b" / "c"
        LocalFileSystem().create_dir(target)
        assert target.is_dir()

    def test_create_existing_dir(self, tmp_path: Path):
        LocalFileSystem().create_dir(tmp_path)
        assert tmp_path.is_dir()

    def test_create_dir_over_file_fails(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(FileExistsError):
            LocalFileSystem().create_dir(blocker)

    def test_write_file_truncates(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_text("a much longer previous content", encoding="utf-8")
        LocalFileSystem().write_file(path, "short")
        assert path.read_text(encoding="utf-8") == "short"

    def test_write_file_utf8(self, tmp_path: Path):
        path = tmp_path / "unicode.txt"
        LocalFileSystem().write_file(path, "héllo ✓\n")
        assert path.read_bytes() == "héllo ✓\n".encode("utf-8")

    def test_write_file_missing_parent(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            LocalFileSystem().write_file(tmp_path / "missing" / "f.txt", "x")


class TestInMemoryFake:
    def test_records_operation_order(self, memory_fs):
        memory_fs.create_dir(Path("/p"))
        memory_fs.write_file(Path("/p/a"), "1")
        assert memory_fs.operations == [("mkdir", Path("/p")), ("write", Path("/p/a"))]

    def test_write_without_parent_fails(self, memory_fs):
        with pytest.raises(FileNotFoundError):
            memory_fs.write_file(Path("/nowhere/a"), "1")
