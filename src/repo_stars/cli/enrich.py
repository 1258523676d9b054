"""Enrichment commands."""

from __future__ import annotations

import asyncio
import contextlib
import json
import signal
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from repo_stars.cli.common import (
    OutputFormat,
    OutputFormatOption,
    console,
    dump_projects,
    load_projects,
    run_async_command,
)
from repo_stars.enrichment import PopularityEnricher
from repo_stars.github import GitHubClient, MalformedIdentityError, parse_identity
from repo_stars.github.pacing import EnrichmentResult, TaskStatus

_STATUS_STYLE = {
    TaskStatus.UPDATED: "green",
    TaskStatus.CANCELLED: "yellow",
    TaskStatus.FAILED: "red",
    TaskStatus.SKIPPED: "dim",
}


def enrich(
    projects_file: Annotated[
        Path,
        typer.Argument(help="JSON array of project records", exists=True, dir_okay=False),
    ],
    interval_ms: Annotated[
        int | None,
        typer.Option(
            "--interval-ms",
            "-i",
            min=0,
            help="Milliseconds between requests (default from settings)",
        ),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option(
            "--timeout",
            "-t",
            min=0.1,
            help="Per-request timeout in seconds (default: none)",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            dir_okay=False,
            help="Write the sorted project list to this file",
        ),
    ] = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Fetch star counts for every project and sort by popularity.

    Requests are staggered to stay under GitHub's anonymous rate limit.
    Ctrl-C cancels the outstanding requests; projects fetched so far keep
    their new counts.

    Examples:
        repostars enrich projects.json
        repostars enrich projects.json --interval-ms 1000 -o sorted.json
        repostars enrich projects.json --format json
    """
    records = load_projects(projects_file)
    interval = interval_ms / 1000 if interval_ms is not None else None

    async def _enrich() -> EnrichmentResult:
        async with GitHubClient() as client:
            enricher = PopularityEnricher(
                records,
                source=client,
                interval=interval,
                timeout=timeout,
            )
            loop = asyncio.get_running_loop()
            handled: list[signal.Signals] = []
            for sig in (signal.SIGINT, signal.SIGTERM):
                # add_signal_handler is unavailable on Windows event loops
                with contextlib.suppress(NotImplementedError):
                    loop.add_signal_handler(sig, enricher.cancel_all)
                    handled.append(sig)
            try:
                return await enricher.run()
            finally:
                for sig in handled:
                    loop.remove_signal_handler(sig)

    result = run_async_command(_enrich(), error_prefix="Enrichment failed")

    if output is not None:
        output.write_text(dump_projects(list(result.records)) + "\n", encoding="utf-8")

    if output_format == OutputFormat.JSON:
        console.print_json(
            json.dumps(
                {
                    "summary": result.to_dict(),
                    "projects": [r.to_source_dict() for r in result.records],
                },
                ensure_ascii=False,
            )
        )
        return

    _print_table(result)
    if output is not None:
        console.print(f"[dim]Wrote {len(result.records)} project(s) to {output}[/dim]")


def _print_table(result: EnrichmentResult) -> None:
    status_by_record = {id(o.record): o.status for o in result.outcomes}

    table = Table(title="Projects by popularity")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Project", style="bold")
    table.add_column("Stars", justify="right")
    table.add_column("Repository")
    table.add_column("Status")

    for position, record in enumerate(result.records, start=1):
        status = status_by_record.get(id(record))
        status_cell = (
            f"[{_STATUS_STYLE[status]}]{status.value}[/{_STATUS_STYLE[status]}]"
            if status is not None
            else ""
        )
        table.add_row(
            str(position),
            escape(record.display_name),
            f"{record.popularity_score:,}",
            escape(record.source_url),
            status_cell,
        )

    console.print(table)
    summary = result.to_dict()
    console.print(
        f"Updated {summary['updated']}/{summary['total']} "
        f"(cancelled {summary['cancelled']}, failed {summary['failed']}, "
        f"skipped {summary['skipped']})"
    )
    if not result.is_sorted:
        console.print("[yellow]Warning:[/yellow] aggregation failed; list left unsorted")


def identity(
    url: Annotated[str, typer.Argument(help="Repository URL")],
) -> None:
    """Print the owner/name key used for caching and API requests.

    Examples:
        repostars identity https://github.com/vuejs/core
        repostars identity git@github.com:vuejs/core.git
    """
    try:
        repo = parse_identity(url)
    except MalformedIdentityError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None
    console.print(repo.key)
