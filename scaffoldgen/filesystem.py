"""Filesystem capability used by the materializer.

The materializer only ever creates directories and writes whole files, so
that is all the interface exposes. ``LocalFileSystem`` is the real
implementation; tests substitute an in-memory one.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    """Minimal write-only view of a filesystem."""

    def create_dir(self, path: Path) -> None:
        """Create *path* and any missing ancestors. Existing directories are fine."""
        ...

    def write_file(self, path: Path, contents: str) -> None:
        """Create or truncate *path* and write *contents* to it."""
        ...


class LocalFileSystem:
    """``FileSystem`` backed by the local disk via ``pathlib``."""

    def create_dir(self, path: Path) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def write_file(self, path: Path, contents: str) -> None:
        # newline="" keeps line endings exactly as generated.
        Path(path).write_text(contents, encoding="utf-8", newline="")
