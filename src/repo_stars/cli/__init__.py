"""Command-line interface for Repo Stars."""
