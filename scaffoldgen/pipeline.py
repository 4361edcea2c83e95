"""scaffoldgen pipeline orchestrator.

Runs one generation end to end:

1. PROMPT      -- build the prompt from name, description and language.
2. GENERATE    -- one call to the model API.
3. DECODE      -- validate the response as a project document.
4. MATERIALIZE -- write the project directory.

Each stage reports failure through a result model; the first failing stage
ends the run and is named in the returned ``GenerationResult``. Decoding
always finishes before anything touches the filesystem.

Usage::

    scaffoldgen -d "A CLI that prints the weather" -l python -n weather
    python -m scaffoldgen.pipeline -d "A todo API" --tokens 4096
"""

from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field, ValidationError
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from scaffoldgen.config import Config
from scaffoldgen.decoder import DecodeError, decode
from scaffoldgen.filesystem import FileSystem, LocalFileSystem
from scaffoldgen.materializer import MaterializeError, MaterializeResult, materialize
from scaffoldgen.openai_client import OpenAIClient, TransportError
from scaffoldgen.prompts import SYSTEM_INSTRUCTION, build_prompt
from scaffoldgen.schema import ProjectDocument
from scaffoldgen.utils import (
    console,
    format_duration,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)

Stage = Literal["transport", "decode", "materialize"]

StageError = Annotated[
    TransportError | DecodeError | MaterializeError,
    Field(discriminator="kind"),
]


class GenerationResult(BaseModel):
    """Outcome of a full pipeline run."""

    success: bool = False
    stage: Stage | None = Field(default=None, description="Stage that failed, if any")
    error: StageError | None = None
    document: ProjectDocument | None = None
    materialized: MaterializeResult | None = None
    project_path: Path | None = None
    duration_seconds: float = 0.0


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives prompt -> model -> decode -> materialize for one request.

    Attributes:
        config: Run configuration.
        request: Frozen request derived from ``config``.
        client: Model API client.
        fs: Filesystem capability used for materialization.
    """

    def __init__(
        self,
        config: Config,
        client: OpenAIClient | None = None,
        fs: FileSystem | None = None,
    ) -> None:
        self.config = config
        self.request = config.to_request()
        self.client = client or OpenAIClient(
            base_url=config.model.base_url,
            api_key=config.model.api_key,
            timeout=config.model.timeout,
        )
        self.fs = fs or LocalFileSystem()

    async def run(self) -> GenerationResult:
        """Execute the pipeline.

        Returns:
            A ``GenerationResult``. ``success`` is only ``True`` when every
            file of the document was handled.
        """
        start = time.monotonic()
        request = self.request

        prompt = build_prompt(
            request.project_name, request.description, request.target_language
        )
        console.print(Panel(Text(prompt), title="[bold]Prompt[/bold]", border_style="cyan"))
        console.print(f"Sending prompt to [bold]{escape(request.model_id)}[/bold], please wait...")

        response = await self.client.chat(
            system=SYSTEM_INSTRUCTION,
            prompt=prompt,
            model=request.model_id,
            max_tokens=request.max_tokens,
        )
        if not response.success:
            print_error(f"Model request failed: {response.error.message}")
            return self._finish(start, stage="transport", error=response.error)

        console.print("Got a response, attempting to decode the contents...")
        console.print(
            Panel(Text(response.text), title="[bold]Response[/bold]", border_style="blue")
        )
        if response.finish_reason == "length":
            print_warning(
                f"The response hit the token limit ({request.max_tokens}); "
                "it is probably truncated."
            )

        decoded = decode(response.text)
        if not decoded.success:
            self._report_decode_error(decoded.error)
            return self._finish(start, stage="decode", error=decoded.error)
        print_success("Success, the model returned a valid project document.")

        document = decoded.document
        console.print("Generating the project files...")
        materialized = materialize(document, self.config.project_path, fs=self.fs)
        if not materialized.success:
            print_error(
                f"Could not write `{materialized.error.path}`: {materialized.error.message}"
            )
            return self._finish(
                start,
                stage="materialize",
                error=materialized.error,
                document=document,
                materialized=materialized,
            )

        result = self._finish(start, document=document, materialized=materialized)
        self._print_final_summary(result)
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _finish(
        self,
        start: float,
        stage: Stage | None = None,
        error: TransportError | DecodeError | MaterializeError | None = None,
        document: ProjectDocument | None = None,
        materialized: MaterializeResult | None = None,
    ) -> GenerationResult:
        return GenerationResult(
            success=error is None,
            stage=stage,
            error=error,
            document=document,
            materialized=materialized,
            project_path=self.config.project_path,
            duration_seconds=time.monotonic() - start,
        )

    @staticmethod
    def _report_decode_error(error: DecodeError) -> None:
        print_error("Failed to decode the response, please try again.")
        console.print("The model sometimes returns invalid JSON.")
        for problem in error.problems[:10]:
            console.print(f"  [red]-[/red] {escape(problem)}")
        console.print(
            Panel(Text(error.raw_text), title="[bold red]Raw response[/bold red]", border_style="red")
        )

    def _print_final_summary(self, result: GenerationResult) -> None:
        materialized = result.materialized
        print_success("Project files generated successfully.")
        console.print()
        print_summary_table(
            {
                "Project": str(result.project_path),
                "Files written": str(len(materialized.written)),
                "Files skipped": ", ".join(materialized.skipped) or "-",
                "Duration": format_duration(result.duration_seconds),
            },
            title="Generation Summary",
        )
        if result.document.joke:
            console.print(Text(result.document.joke, style="italic"))
            console.print()
        print_warning(
            "Disclaimer: this project was generated by a robot, "
            "please review the code before executing it."
        )
        console.print()
        console.print("To execute the project, run the following commands:\n")
        console.print(f"cd {escape(str(result.project_path))}")
        console.print("make build")
        console.print("make run")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``scaffoldgen`` and ``python -m scaffoldgen.pipeline``."""
    import argparse

    parser = argparse.ArgumentParser(
        description="scaffoldgen -- generate a runnable project from a description",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            '  scaffoldgen -d "A REST API that stores notes"\n'
            '  scaffoldgen -d "A weather CLI" -l python -n weather -t 4096\n'
        ),
    )
    parser.add_argument(
        "--description", "-d",
        required=True,
        help="What the program should do; be as specific as possible",
    )
    parser.add_argument(
        "--language", "-l",
        default=None,
        help="Programming language to use (default: javascript)",
    )
    parser.add_argument(
        "--name", "-n",
        default=None,
        help="Project name, also the name of the created directory (default: myapp)",
    )
    parser.add_argument(
        "--model", "-m",
        default=None,
        help="Model identifier (default: gpt-3.5-turbo)",
    )
    parser.add_argument(
        "--tokens", "-t",
        type=int,
        default=None,
        help="Maximum tokens for the response (default: 2048)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Parent directory of the project (default: current directory)",
    )

    args = parser.parse_args(argv)

    settings = Config.env_settings()
    settings["description"] = args.description
    if args.name:
        settings["project_name"] = args.name
    if args.language:
        settings["language"] = args.language
    if args.output:
        settings["output_dir"] = args.output
    if args.model:
        settings["model"]["model"] = args.model
    if args.tokens is not None:
        settings["model"]["max_tokens"] = args.tokens

    try:
        config = Config(**settings)
    except ValidationError as exc:
        console.print(f"[bold red]Error:[/bold red] Invalid configuration:\n{escape(str(exc))}")
        sys.exit(1)

    if not config.model.api_key:
        console.print("[bold red]Error:[/bold red] OPENAI_API_KEY is not set.")
        sys.exit(1)

    pipeline = Pipeline(config)
    result = asyncio.run(pipeline.run())

    if not result.success:
        console.print(f"[bold red]Generation failed during the {result.stage} stage.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
