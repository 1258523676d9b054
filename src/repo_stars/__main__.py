"""Allow ``python -m repo_stars``."""

from repo_stars.cli.app import app

app()
