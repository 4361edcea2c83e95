"""Prompt construction for project generation.

Builds the system instruction and the user prompt that ask the model to
return a whole project (Dockerfile, Makefile, README and source files) as a
single JSON document. Everything here is a pure string transformation so the
same inputs always yield the same prompt.
"""

from __future__ import annotations

import textwrap

SYSTEM_INSTRUCTION = textwrap.dedent("""\
    You are a helpful programming assistant.
    You process an application description and generate the files and steps
    necessary to create the application.
    You can only respond with a JSON object that matches the provided output schema.
    The returned JSON can include an array of objects as defined by the output schema.
    You are not allowed to return anything but a valid JSON object.
    """)

_DELIVERABLES = textwrap.dedent("""\
    Your solution must include:
    1. A Dockerfile that allows the application to be built and run.
    2. A Makefile with the following targets, assuming the application is executed using the Dockerfile:
        a. make build
        b. make run (make sure that docker cleans up after itself)
        c. make test (make sure that docker cleans up after itself)
    3. A README with the instructions required to build and run the application.
    4. One or more files with the source code for the application. Do not escape control characters twice (like \\n), because that breaks the source code.
    5. A JSON property called "joke" with a joke about software developers.
    """)

_OUTPUT_EXAMPLE = textwrap.dedent("""\
    {
        "joke": "joke contents",
        "dockerfile": "dockerfile contents",
        "makefile": "makefile contents",
        "readme": "readme contents",
        "source_files": [
            {
                "name": "...",
                "contents": "..."
            }
        ]
    }""")

_OUTPUT_RULES = textwrap.dedent("""\
    Make sure that you do not include invalid control characters in the output JSON, or any
    other characters (like unescaped double quotes) that can break the JSON.

    Respond ONLY with the data portion of a valid JSON object. No schema definition required.
    No markdown code fences. No other words.""")


def _section(title: str, value: str) -> str:
    """Wrap a user-supplied value in a titled ``---`` block."""
    return f"{title}:\n---\n{value}\n---"


def build_prompt(name: str, description: str, language: str) -> str:
    """Build the user prompt for a project generation request.

    The values are embedded verbatim. Empty strings are accepted; nothing is
    validated at this stage.

    Args:
        name: Project name, also the name of the generated directory.
        description: Natural-language application requirements.
        language: Target programming language.

    Returns:
        The complete prompt text.
    """
    parts = [
        "Take the following programming language and application requirements, "
        "and produce a working application.",
        _DELIVERABLES,
        "The output must match the provided output JSON schema and be valid JSON.",
        _section("Project Name", name),
        _section("Programming Language", language),
        _section("Application Requirements", description),
        "Output JSON schema:\n" + _OUTPUT_EXAMPLE,
        _OUTPUT_RULES,
    ]
    return "\n\n".join(parts) + "\n"
