"""Pydantic models for the project document returned by the model.

The wire names (``dockerfile``, ``makefile``, ...) are the contract with the
model; the Python attribute names describe what each field is for. Both
models are strict and frozen: a value of the wrong JSON type is rejected
rather than coerced, and a decoded document is never mutated.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DOCKERFILE_NAME = "Dockerfile"
MAKEFILE_NAME = "Makefile"
README_NAME = "README.md"

# Lower-case substrings that mark a source file as one of the canonical files.
RESERVED_NAMES: tuple[str, ...] = ("makefile", "dockerfile", "readme")


class SourceFileEntry(BaseModel):
    """One generated source file."""

    model_config = ConfigDict(strict=True, frozen=True)

    name: str = Field(..., min_length=1, description="Path relative to the project root")
    contents: str = Field(..., description="Raw file text")


class ProjectDocument(BaseModel):
    """A complete generated project, as decoded from the model response."""

    model_config = ConfigDict(strict=True, frozen=True, populate_by_name=True)

    build_file: str = Field(..., alias="dockerfile", description="Dockerfile contents")
    task_runner_file: str = Field(..., alias="makefile", description="Makefile contents")
    readme: str = Field(..., description="README.md contents")
    joke: str = Field(default="", description="Advisory joke about software developers")
    source_files: list[SourceFileEntry] = Field(
        ..., description="Source files in the order they should be written"
    )
