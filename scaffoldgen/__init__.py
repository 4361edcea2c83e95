"""scaffoldgen -- ask a language model for a whole project and write it to disk.

Quick usage::

    from scaffoldgen import decode, materialize, build_prompt

    prompt = build_prompt("weather", "A CLI that prints the weather", "python")
    # ... send prompt to a model, get raw_text back ...
    result = decode(raw_text)
    if result.success:
        materialize(result.document, "./weather")
"""

from scaffoldgen.config import Config, GenerationRequest, ModelConfig
from scaffoldgen.decoder import DecodeError, DecodeResult, decode
from scaffoldgen.filesystem import FileSystem, LocalFileSystem
from scaffoldgen.materializer import (
    MaterializeError,
    MaterializeResult,
    is_reserved_name,
    materialize,
)
from scaffoldgen.openai_client import ChatResponse, OpenAIClient, TransportError
from scaffoldgen.pipeline import GenerationResult, Pipeline
from scaffoldgen.prompts import SYSTEM_INSTRUCTION, build_prompt
from scaffoldgen.schema import ProjectDocument, SourceFileEntry

__all__ = [
    # Configuration
    "Config",
    "GenerationRequest",
    "ModelConfig",
    # Prompt
    "SYSTEM_INSTRUCTION",
    "build_prompt",
    # Schema and decoding
    "ProjectDocument",
    "SourceFileEntry",
    "DecodeError",
    "DecodeResult",
    "decode",
    # Materialization
    "FileSystem",
    "LocalFileSystem",
    "MaterializeError",
    "MaterializeResult",
    "is_reserved_name",
    "materialize",
    # Model client
    "ChatResponse",
    "OpenAIClient",
    "TransportError",
    # Pipeline
    "GenerationResult",
    "Pipeline",
]
