"""Todo commands for Plume CLI.

Handles adding, listing, completing, moving and removing tasks.
Tasks are addressed by the first characters of their ID.
"""

from datetime import datetime
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from plume.errors import PlumeError

console = Console()


def _get_journal_service():
    """Get a journal service over the configured store."""
    from plume.config import load_settings
    from plume.db.store import JournalStore
    from plume.services.journal import JournalService

    return JournalService(JournalStore(load_settings().db_path))


def _fail(message: str) -> None:
    console.print(Panel(
        f"[red]{escape(message)}[/red]",
        title="[bold red]Error[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def _find(service, todo_id: str):
    todo = service.find_todo(todo_id)
    if todo is None:
        _fail(f"No single task matches '{todo_id}'")
    return todo


def format_day(day, today) -> str:
    """Describe a day relative to today."""
    delta = (day - today).days
    if delta == 0:
        return "Today"
    if delta == 1:
        return "Tomorrow"
    if delta == -1:
        return "Yesterday"
    return day.strftime("%b %d, %Y")


@click.group()
def todo() -> None:
    """Manage daily tasks.

    \b
    Examples:
      plume todo add "Buy groceries"
      plume todo add "Dentist" --date 2024-06-03
      plume todo list --view upcoming
      plume todo done 3f2a
      plume todo move 3f2a --tomorrow
    """
    pass


@todo.command("add")
@click.argument("title")
@click.option(
    "--date", "on_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Due day (YYYY-MM-DD, default: today).",
)
def add_todo(title: str, on_date: Optional[datetime]) -> None:
    """Add a task."""
    try:
        service = _get_journal_service()
        created = service.add_todo(title, on_date.date() if on_date else None)
        service.save()
    except PlumeError as e:
        _fail(str(e))
    console.print(f"[green]✓ Added '{escape(created.title)}'[/green] [dim]{str(created.id)[:8]}[/dim]")


@todo.command("list")
@click.option(
    "--view",
    type=click.Choice(["today", "upcoming", "open", "completed"], case_sensitive=False),
    default="today",
    help="Which tasks to show (default: today).",
)
def list_todos(view: str) -> None:
    """List tasks grouped by day."""
    from plume.stats.todos import TodoView, filter_todos, group_by_day, overdue_todos

    try:
        todos = _get_journal_service().store.all_todos()
    except PlumeError as e:
        _fail(str(e))

    now = datetime.now()
    selected = filter_todos(todos, TodoView(view.lower()), now=now)

    if not selected:
        console.print(Panel(
            f"[dim]No {view.lower()} tasks[/dim]",
            title="[bold]Tasks[/bold]",
            border_style="dim",
        ))
    else:
        table = Table(title=f"Tasks ({view.lower()})", show_header=True, header_style="bold cyan")
        table.add_column("Day", style="bold")
        table.add_column("ID", style="dim")
        table.add_column("Task")
        table.add_column("Done", justify="center")

        for day, items in group_by_day(selected).items():
            label = format_day(day, now.date())
            for item in items:
                table.add_row(
                    label,
                    str(item.id)[:8],
                    f"[strike dim]{escape(item.title)}[/strike dim]" if item.completed else escape(item.title),
                    "[green]✓[/green]" if item.completed else "",
                )
                label = ""
        console.print(table)

    overdue = overdue_todos(todos, now=now)
    if overdue and view.lower() != "completed":
        console.print(f"\n[yellow]{len(overdue)} overdue:[/yellow]")
        for item in overdue:
            console.print(f"  [yellow]•[/yellow] {escape(item.title)} [dim]{str(item.id)[:8]} ({item.day})[/dim]")


@todo.command("done")
@click.argument("todo_id")
def complete_todo(todo_id: str) -> None:
    """Toggle a task between done and open."""
    try:
        service = _get_journal_service()
        item = service.toggle_todo(_find(service, todo_id))
        service.save()
    except PlumeError as e:
        _fail(str(e))
    state = "done" if item.completed else "open"
    console.print(f"[green]✓ '{escape(item.title)}' marked {state}[/green]")


@todo.command("rename")
@click.argument("todo_id")
@click.argument("title")
def rename_todo(todo_id: str, title: str) -> None:
    """Change the title of a task."""
    try:
        service = _get_journal_service()
        item = service.rename_todo(_find(service, todo_id), title)
        service.save()
    except PlumeError as e:
        _fail(str(e))
    console.print(f"[green]✓ Renamed to '{escape(item.title)}'[/green]")


@todo.command("move")
@click.argument("todo_id")
@click.option("--today", "to_today", is_flag=True, default=False, help="Move to today.")
@click.option("--tomorrow", "to_tomorrow", is_flag=True, default=False, help="Move to tomorrow.")
@click.option(
    "--date", "on_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Move to a specific day (YYYY-MM-DD).",
)
def move_todo(todo_id: str, to_today: bool, to_tomorrow: bool, on_date: Optional[datetime]) -> None:
    """Move a task to another day."""
    if sum([to_today, to_tomorrow, on_date is not None]) != 1:
        _fail("Choose exactly one of --today, --tomorrow or --date")

    try:
        service = _get_journal_service()
        item = _find(service, todo_id)
        if to_today:
            service.move_to_today(item)
        elif to_tomorrow:
            service.move_to_tomorrow(item)
        else:
            service.move_todo(item, on_date.date())
        service.save()
    except PlumeError as e:
        _fail(str(e))
    console.print(f"[green]✓ '{escape(item.title)}' moved to {item.day.isoformat()}[/green]")


@todo.command("remove")
@click.argument("todo_id")
def remove_todo(todo_id: str) -> None:
    """Delete a task."""
    try:
        service = _get_journal_service()
        item = _find(service, todo_id)
        service.delete_todo(item)
        service.save()
    except PlumeError as e:
        _fail(str(e))
    console.print(f"[green]✓ Removed '{escape(item.title)}'[/green]")
