"""scaffoldgen configuration.

Typed configuration for a generation run. All settings use Pydantic v2
models so they are validated at construction time and can be built from the
command line, from environment variables, or both.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from scaffoldgen.openai_client import DEFAULT_BASE_URL

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_LANGUAGE = "javascript"
DEFAULT_PROJECT_NAME = "myapp"


class GenerationRequest(BaseModel):
    """Immutable inputs of one generation run."""

    model_config = ConfigDict(frozen=True)

    project_name: str
    description: str
    target_language: str
    model_id: str
    max_tokens: int = Field(..., gt=0)


class ModelConfig(BaseModel):
    """Connection and sampling settings for the model API."""

    base_url: str = Field(default=DEFAULT_BASE_URL)
    api_key: str = Field(default="", repr=False)
    model: str = Field(default=DEFAULT_MODEL)
    max_tokens: int = Field(default=2048, gt=0, description="Token budget for the response")
    timeout: int = Field(default=300, ge=10, description="Per-request timeout in seconds")


class Config(BaseModel):
    """Settings for a single scaffoldgen run.

    Created once by the CLI entry point and handed to ``Pipeline``.
    """

    project_name: str = Field(default=DEFAULT_PROJECT_NAME)
    description: str = Field(default="")
    language: str = Field(default=DEFAULT_LANGUAGE)
    output_dir: Path = Field(default=Path("."))
    model: ModelConfig = Field(default_factory=ModelConfig)

    @property
    def project_path(self) -> Path:
        """Directory the generated project is written to."""
        return self.output_dir / self.project_name

    def to_request(self) -> GenerationRequest:
        """Freeze the request-relevant settings into a ``GenerationRequest``."""
        return GenerationRequest(
            project_name=self.project_name,
            description=self.description,
            target_language=self.language,
            model_id=self.model.model,
            max_tokens=self.model.max_tokens,
        )

    @staticmethod
    def env_settings() -> dict[str, Any]:
        """Collect settings from environment variables without validating them.

        Recognised variables (all optional):
            OPENAI_API_KEY, OPENAI_BASE_URL, SCAFFOLDGEN_MODEL,
            SCAFFOLDGEN_MAX_TOKENS, SCAFFOLDGEN_TIMEOUT,
            SCAFFOLDGEN_LANGUAGE, SCAFFOLDGEN_OUTPUT_DIR.

        Values stay as strings so callers can layer overrides on top before
        a single validation pass.
        """
        model_kwargs: dict[str, Any] = {}
        if os.environ.get("OPENAI_API_KEY"):
            model_kwargs["api_key"] = os.environ["OPENAI_API_KEY"]
        if os.environ.get("OPENAI_BASE_URL"):
            model_kwargs["base_url"] = os.environ["OPENAI_BASE_URL"]
        if os.environ.get("SCAFFOLDGEN_MODEL"):
            model_kwargs["model"] = os.environ["SCAFFOLDGEN_MODEL"]
        if os.environ.get("SCAFFOLDGEN_MAX_TOKENS"):
            model_kwargs["max_tokens"] = os.environ["SCAFFOLDGEN_MAX_TOKENS"]
        if os.environ.get("SCAFFOLDGEN_TIMEOUT"):
            model_kwargs["timeout"] = os.environ["SCAFFOLDGEN_TIMEOUT"]

        return {
            "language": os.environ.get("SCAFFOLDGEN_LANGUAGE", DEFAULT_LANGUAGE),
            "output_dir": os.environ.get("SCAFFOLDGEN_OUTPUT_DIR", "."),
            "model": model_kwargs,
        }

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Raises ``pydantic.ValidationError`` for malformed values.
        """
        return cls(**cls.env_settings())
