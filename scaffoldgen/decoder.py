"""Decoding of raw model output into a ``ProjectDocument``.

Decoding is all-or-nothing: the raw text is parsed as JSON and validated
against the strict document schema in one step. Nothing is salvaged from a
malformed response (no code-fence stripping, no field extraction). A failure
keeps the untouched payload so callers can show or store it.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from scaffoldgen.schema import ProjectDocument


class DecodeError(BaseModel):
    """The model response does not match the project document schema."""

    kind: Literal["decode"] = "decode"
    message: str = Field(..., description="Parse diagnostic")
    raw_text: str = Field(..., description="The response text exactly as received")
    problems: list[str] = Field(
        default_factory=list,
        description="One '<location>: <message>' entry per validation problem",
    )


class DecodeResult(BaseModel):
    """Outcome of ``decode``: a document on success, a ``DecodeError`` otherwise."""

    success: bool
    document: ProjectDocument | None = None
    error: DecodeError | None = None


def _format_problems(exc: ValidationError) -> list[str]:
    problems: list[str] = []
    for err in exc.errors(include_url=False):
        location = ".".join(str(part) for part in err["loc"]) or "<root>"
        problems.append(f"{location}: {err['msg']}")
    return problems


def decode(raw_text: str) -> DecodeResult:
    """Parse and validate a raw model response.

    Args:
        raw_text: The response text returned by the model.

    Returns:
        A ``DecodeResult``. ``document`` is only set when the whole response
        validated; otherwise ``error`` carries the raw text and diagnostics.
    """
    try:
        document = ProjectDocument.model_validate_json(raw_text)
    except ValidationError as exc:
        problems = _format_problems(exc)
        return DecodeResult(
            success=False,
            error=DecodeError(
                message=(
                    f"Response is not a valid project document "
                    f"({exc.error_count()} problem(s)): {problems[0] if problems else exc}"
                ),
                raw_text=raw_text,
                problems=problems,
            ),
        )
    return DecodeResult(success=True, document=document)
