"""CLI commands for Plume.

This package provides the command-line interface for Plume:
daily entries, todos, calendar, statistics and backups.
"""

from plume.cli.main import cli, main

__all__ = ["cli", "main"]
