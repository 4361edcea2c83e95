"""Shared pytest fixtures for the scaffoldgen test suite.

Provides reusable fixtures for:
- An in-memory filesystem that records every operation
- Sample project documents and their JSON wire form
- Mocked chat completion responses
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from scaffoldgen.schema import ProjectDocument, SourceFileEntry


# ---------------------------------------------------------------------------
# In-memory filesystem
# ---------------------------------------------------------------------------


class InMemoryFileSystem:
    """``FileSystem`` fake that keeps files in a dict.

    ``operations`` records ``("mkdir", path)`` and ``("write", path)`` tuples
    in call order. Paths listed in ``fail_on`` raise ``OSError`` when written
    or created.
    """

    def __init__(self, fail_on: set[Path] | None = None) -> None:
        self.dirs: set[Path] = set()
        self.files: dict[Path, str] = {}
        self.operations: list[tuple[str, Path]] = []
        self.fail_on = {Path(p) for p in (fail_on or set())}

    def create_dir(self, path: Path) -> None:
        path = Path(path)
        self.operations.append(("mkdir", path))
        if path in self.fail_on:
            raise PermissionError(13, "Permission denied", str(path))
        if path in self.files:
            raise FileExistsError(17, "File exists", str(path))
        self.dirs.add(path)
        self.dirs.update(path.parents)

    def write_file(self, path: Path, contents: str) -> None:
        path = Path(path)
        self.operations.append(("write", path))
        if path in self.fail_on:
            raise OSError(22, "Invalid argument", str(path))
        if path.parent not in self.dirs:
            raise FileNotFoundError(2, "No such file or directory", str(path))
        self.files[path] = contents


@pytest.fixture
def memory_fs() -> InMemoryFileSystem:
    """Empty in-memory filesystem."""
    return InMemoryFileSystem()


@pytest.fixture
def memory_fs_factory():
    """Factory fixture: ``memory_fs_factory(fail_on={path, ...})``."""
    return InMemoryFileSystem


# ---------------------------------------------------------------------------
# Sample documents
# ---------------------------------------------------------------------------

SAMPLE_WIRE: dict[str, Any] = {
    "joke": "Why do programmers prefer dark mode? Because light attracts bugs.",
    "dockerfile": 'FROM node:20-alpine\nWORKDIR /app\nCOPY . .\nCMD ["node", "index.js"]\n',
    "makefile": (
        "build:\n\tdocker build -t hello .\n\n"
        "run:\n\tdocker run --rm hello\n\n"
        "test:\n\tdocker run --rm hello npm test\n"
    ),
    "readme": "# hello\n\nRun `make build` then `make run`.\n",
    "source_files": [
        {"name": "index.js", "contents": 'console.log("Hello, \\"world\\"");\n'},
        {"name": "src/lib/util.js", "contents": "module.exports = {};\n"},
    ],
}


@pytest.fixture
def sample_wire() -> dict[str, Any]:
    """A valid response document in its JSON wire form (as a dict)."""
    return json.loads(json.dumps(SAMPLE_WIRE))


@pytest.fixture
def sample_response_text(sample_wire: dict[str, Any]) -> str:
    """A valid raw model response."""
    return json.dumps(sample_wire)


@pytest.fixture
def sample_document(sample_wire: dict[str, Any]) -> ProjectDocument:
    """A decoded ``ProjectDocument`` built from ``sample_wire``."""
    return ProjectDocument.model_validate(sample_wire)


def _make_document(
    source_files: list[tuple[str, str]] | None = None,
    build_file: str = "FROM scratch\n",
    task_runner_file: str = "build:\n\ttrue\n",
    readme: str = "# project\n",
    joke: str = "",
) -> ProjectDocument:
    """Build a ``ProjectDocument`` from ``(name, contents)`` pairs."""
    return ProjectDocument(
        build_file=build_file,
        task_runner_file=task_runner_file,
        readme=readme,
        joke=joke,
        source_files=[
            SourceFileEntry(name=name, contents=contents)
            for name, contents in (source_files or [])
        ],
    )


# ---------------------------------------------------------------------------
# Mock chat completions API
# ---------------------------------------------------------------------------


def _make_chat_completion(content: str, model: str = "gpt-3.5-turbo", finish_reason: str = "stop") -> dict[str, Any]:
    """Build a realistic ``/chat/completions`` response body."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1760000000,
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": finish_reason,
            }
        ],
        "usage": {"prompt_tokens": 420, "completion_tokens": 512, "total_tokens": 932},
    }


def _make_mock_http_client(post: AsyncMock) -> AsyncMock:
    """Wrap a ``post`` mock in an async-context-manager ``AsyncClient`` mock."""
    mock_client = AsyncMock()
    mock_client.post = post
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


@pytest.fixture
def mock_chat_api(sample_response_text: str):
    """Patch ``httpx.AsyncClient`` so chat completions return ``sample_response_text``.

    Usage:
        def test_something(mock_chat_api):
            with mock_chat_api as client_cls:
                ...
    """
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = _make_chat_completion(sample_response_text)
    mock_response.raise_for_status = MagicMock()

    mock_client = _make_mock_http_client(AsyncMock(return_value=mock_response))
    return patch("httpx.AsyncClient", return_value=mock_client)


@pytest.fixture
def document_factory():
    """Factory fixture: ``document_factory([("a.txt", "1")], readme=...)``."""
    return _make_document


@pytest.fixture
def chat_completion():
    """Factory fixture building ``/chat/completions`` response bodies."""
    return _make_chat_completion


@pytest.fixture
def http_client_factory():
    """Factory fixture wrapping a ``post`` mock in an ``AsyncClient`` mock."""
    return _make_mock_http_client
