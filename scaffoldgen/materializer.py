"""Writing a ``ProjectDocument`` to disk.

Order of operations:

1. Create the project directory (and its ancestors). Failure here aborts
   before any file is written.
2. Write ``Dockerfile``, ``Makefile`` and ``README.md``, overwriting whatever
   is already there.
3. Write each source file in document order, creating parent directories as
   needed. Files whose name contains ``makefile``, ``dockerfile`` or
   ``readme`` (case-insensitive) are skipped so the canonical files written
   in step 2 are never clobbered.

Writes are sequential, so a name that appears twice ends up with the contents
of its last entry. Nothing is rolled back on failure: files written before
the failing one stay on disk and are listed in the result.
"""

from __future__ import annotations

from pathlib import Path, PurePath
from typing import Literal

from pydantic import BaseModel, Field
from rich.markup import escape

from scaffoldgen.filesystem import FileSystem, LocalFileSystem
from scaffoldgen.schema import (
    DOCKERFILE_NAME,
    MAKEFILE_NAME,
    README_NAME,
    RESERVED_NAMES,
    ProjectDocument,
)
from scaffoldgen.utils import console


class MaterializeError(BaseModel):
    """A directory could not be created or a file could not be written."""

    kind: Literal["materialize"] = "materialize"
    message: str
    path: Path = Field(..., description="The path that could not be created or written")


class MaterializeResult(BaseModel):
    """Outcome of ``materialize``."""

    success: bool
    written: list[Path] = Field(default_factory=list, description="Files written, in order")
    skipped: list[str] = Field(
        default_factory=list, description="Source-file names skipped as reserved"
    )
    error: MaterializeError | None = None


def is_reserved_name(name: str) -> bool:
    """Return ``True`` if *name* resembles one of the canonical project files.

    The check is a case-insensitive substring match, so ``readme_parser.py``
    counts as reserved as well as ``README.md``.
    """
    lower = name.lower()
    return any(reserved in lower for reserved in RESERVED_NAMES)


def _entry_path(root: Path, name: str) -> Path:
    """Resolve a source-file name against the project root.

    Leading separators are dropped so absolute names land inside the project.
    Names that climb out of the project with ``..`` are rejected.
    """
    relative = name.lstrip("/\\")
    if ".." in PurePath(relative).parts:
        raise ValueError(f"path escapes the project directory: {name!r}")
    return root / relative


def materialize(
    document: ProjectDocument,
    target_dir: str | Path,
    fs: FileSystem | None = None,
) -> MaterializeResult:
    """Write *document* into *target_dir*.

    Args:
        document: The decoded project document.
        target_dir: Project directory; created if missing.
        fs: Filesystem capability. Defaults to ``LocalFileSystem``.

    Returns:
        A ``MaterializeResult``. On failure ``error.path`` names the offending
        path and ``written`` lists what was already on disk.
    """
    fs = fs or LocalFileSystem()
    root = Path(target_dir)
    written: list[Path] = []
    skipped: list[str] = []

    def _failed(path: Path, exc: Exception) -> MaterializeResult:
        console.print(f"[red]Failed to write[/red] `{escape(str(path))}`: {escape(str(exc))}")
        return MaterializeResult(
            success=False,
            written=written,
            skipped=skipped,
            error=MaterializeError(message=str(exc), path=path),
        )

    console.print(f"Creating project folder `{escape(str(root))}`")
    try:
        fs.create_dir(root)
    except (OSError, ValueError) as exc:
        return _failed(root, exc)

    canonical = (
        (DOCKERFILE_NAME, document.build_file),
        (MAKEFILE_NAME, document.task_runner_file),
        (README_NAME, document.readme),
    )
    for filename, contents in canonical:
        path = root / filename
        console.print(f"Creating file `{escape(str(path))}`")
        try:
            fs.write_file(path, contents)
        except (OSError, ValueError) as exc:
            return _failed(path, exc)
        written.append(path)

    for entry in document.source_files:
        if is_reserved_name(entry.name):
            console.print(
                f"[yellow]Skipping source file[/yellow] `{escape(entry.name)}` "
                "because it was already created"
            )
            skipped.append(entry.name)
            continue

        path = root / entry.name.lstrip("/\\")
        try:
            path = _entry_path(root, entry.name)
            fs.create_dir(path.parent)
            fs.write_file(path, entry.contents)
        except (OSError, ValueError) as exc:
            return _failed(path, exc)
        written.append(path)
        console.print(f"Created source file `{escape(str(path))}`")

    return MaterializeResult(success=True, written=written, skipped=skipped)
