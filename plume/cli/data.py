"""Backup commands for Plume CLI.

Handles exporting the journal to a JSON file, importing it back
and deleting all data.
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from plume.errors import PlumeError

console = Console()


def _get_data_service():
    """Get a data service over the configured store."""
    from plume.config import load_settings
    from plume.db.store import JournalStore
    from plume.services.data import DataService

    return DataService(JournalStore(load_settings().db_path))


def _fail(message: str, title: str = "Error") -> None:
    console.print(Panel(
        f"[red]{escape(message)}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


@click.command()
@click.option(
    "--output", "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for the export file (default: from config, else home).",
)
@click.option("--stdout", "to_stdout", is_flag=True, default=False, help="Print the JSON instead.")
def export(output: Optional[Path], to_stdout: bool) -> None:
    """Export all entries and todos to a JSON file.

    The file is named plume-export-YYYY-MM-DD.json.

    \b
    Examples:
      plume export
      plume export -o ~/Backups
      plume export --stdout > backup.json
    """
    from plume.config import load_settings

    try:
        service = _get_data_service()
        if to_stdout:
            click.echo(service.export_json())
            return
        path = service.export_to_file(output or load_settings().export_dir)
        counts = service.store.counts()
    except (PlumeError, OSError) as e:
        _fail(f"Export failed:\n\n{e}")

    console.print(Panel(
        f"[green]✓ Exported {counts['entries']} entries and {counts['todos']} todos[/green]\n\n"
        f"[dim]{path}[/dim]",
        title="[bold green]Export[/bold green]",
        border_style="green",
    ))


@click.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def import_data(file: Path) -> None:
    """Import an export file, merging records by ID.

    Records already in the journal are updated; new ones are added
    with their original IDs and dates.
    """
    try:
        summary = _get_data_service().import_file(file)
    except PlumeError as e:
        _fail(str(e), title="Import failed")

    console.print(Panel(
        f"Entries: [green]{summary.entries_created} new[/green], "
        f"[cyan]{summary.entries_updated} updated[/cyan]\n"
        f"Todos:   [green]{summary.todos_created} new[/green], "
        f"[cyan]{summary.todos_updated} updated[/cyan]",
        title="[bold green]Import complete[/bold green]",
        border_style="green",
    ))


@click.command()
@click.option("--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
def reset(yes: bool) -> None:
    """Delete every entry and todo. This cannot be undone."""
    if not yes:
        click.confirm("Delete ALL entries and todos?", abort=True)

    try:
        deleted = _get_data_service().delete_all_data()
    except PlumeError as e:
        _fail(str(e))

    if deleted:
        console.print("[green]✓ All data deleted[/green]")
    else:
        console.print("[yellow]Delete failed; see the log for details[/yellow]")
