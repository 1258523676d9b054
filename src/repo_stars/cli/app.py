"""Main CLI application for Repo Stars."""

from pathlib import Path
from typing import Annotated

import typer

from repo_stars import __version__
from repo_stars.cli import enrich as enrich_cmd
from repo_stars.cli.common import console
from repo_stars.config import get_settings
from repo_stars.logging import setup_logging

app = typer.Typer(
    name="repostars",
    help="Enrich project lists with GitHub star counts.",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"repostars version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
) -> None:
    """Repo Stars - staggered GitHub popularity enrichment."""
    settings = get_settings()
    log_config = settings.logging

    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


app.command("enrich")(enrich_cmd.enrich)
app.command("identity")(enrich_cmd.identity)


if __name__ == "__main__":
    app()
