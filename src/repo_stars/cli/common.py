"""Common CLI option types and helpers.

It provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- `load_projects` / `dump_projects`: project list file I/O
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Coroutine
from enum import Enum
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.markup import escape

from repo_stars.schemas.project import ProjectRecord

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")

_PROJECT_LIST = TypeAdapter(list[ProjectRecord])


class OutputFormat(str, Enum):
    """Output format for CLI commands."""

    TEXT = "text"
    """Human-readable table output."""

    JSON = "json"
    """Machine-readable JSON output."""


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None


def load_projects(path: Path) -> list[ProjectRecord]:
    """Read a JSON array of project records.

    Raises:
        typer.Exit(1): If the file is unreadable or not a valid project list
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return _PROJECT_LIST.validate_python(data)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Error:[/red] Cannot read {escape(str(path))}: {escape(str(e))}")
        raise typer.Exit(1) from None
    except ValidationError as e:
        console.print(
            f"[red]Error:[/red] Invalid project list in {escape(str(path))}:\n{escape(str(e))}"
        )
        raise typer.Exit(1) from None


def dump_projects(records: list[ProjectRecord]) -> str:
    """Serialize records using the front-end field names."""
    return json.dumps(
        [record.to_source_dict() for record in records],
        indent=2,
        ensure_ascii=False,
    )


# Typer requires function calls as default arguments, which triggers B008.
# Using Annotated with a centralized type alias keeps the noqa in one place.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""
