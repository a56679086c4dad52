"""Entry commands for Plume CLI.

Handles today's overview and writing the parts of a daily entry:
gratitudes, accomplishments, memory and journal text.
"""

from datetime import date, datetime
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from plume.errors import PlumeError
from plume.models import ListSection, entry_sections

console = Console()

DATE_FORMATS = ["%Y-%m-%d"]


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


def _day(value: Optional[datetime]) -> date:
    return value.date() if value else date.today()


def render_entry(entry, heading: str) -> Panel:
    """Build a panel showing every non-empty section of an entry."""
    lines: list[str] = []
    for section in entry_sections(entry):
        lines.append(f"[bold cyan]{section.title}[/bold cyan]")
        if isinstance(section, ListSection):
            lines.extend(f"  • {escape(item)}" for item in section.items)
        else:
            lines.append(f"  {escape(section.value)}")
        lines.append("")

    if entry.word_count:
        lines.append(f"[dim]{entry.word_count} words[/dim]")

    body = "\n".join(lines).rstrip() or "[dim]Nothing written yet[/dim]"
    return Panel(body, title=f"[bold]{heading}[/bold]", border_style="cyan")


@click.command()
def today() -> None:
    """Show today's entry, streak, quote and tasks.

    \b
    Examples:
      plume today
    """
    from plume.services.quotes import QuoteService
    from plume.stats.todos import TodoView, filter_todos, overdue_todos

    try:
        service = _get_journal_service()
        now = datetime.now()
        current = service.get_entry(now.date())
        streak = service.streak(today=now.date())
        todos = service.store.all_todos()
    except PlumeError as e:
        _fail(str(e))

    quote = QuoteService().daily_quote(now.date())
    console.print(f"[italic]“{quote.text}”[/italic] [dim]- {quote.author}[/dim]\n")

    heading = now.strftime("%A, %B %d")
    if current is None:
        console.print(Panel(
            "[dim]No entry yet. Start with[/dim] [cyan]plume entry gratitude \"...\"[/cyan]",
            title=f"[bold]{heading}[/bold]",
            border_style="dim",
        ))
    else:
        console.print(render_entry(current, heading))

    streak_color = "green" if streak else "dim"
    console.print(f"\n[bold]Streak:[/bold] [{streak_color}]{streak} day{'s' if streak != 1 else ''}[/{streak_color}]")

    due = filter_todos(todos, TodoView.TODAY, now=now)
    overdue = overdue_todos(todos, now=now)
    if due:
        console.print("\n[bold]Today's tasks[/bold]")
        for todo in due:
            console.print(f"  ☐ {escape(todo.title)} [dim]{str(todo.id)[:8]}[/dim]")
    if overdue:
        console.print(f"\n[yellow]{len(overdue)} overdue task{'s' if len(overdue) != 1 else ''}[/yellow]")


@click.group()
def entry() -> None:
    """Write and view daily entries.

    \b
    Examples:
      plume entry gratitude "Morning coffee"
      plume entry accomplishment "Finished the report"
      plume entry memory "Long walk by the river"
      plume entry journal                      # Opens $EDITOR
      plume entry show --date 2024-05-01
    """
    pass


date_option = click.option(
    "--date", "on_date",
    type=click.DateTime(formats=DATE_FORMATS),
    default=None,
    help="Day of the entry (YYYY-MM-DD, default: today).",
)


@entry.command("show")
@date_option
def show_entry(on_date: Optional[datetime]) -> None:
    """Show the entry for a day."""
    day = _day(on_date)
    try:
        found = _get_journal_service().get_entry(day)
    except PlumeError as e:
        _fail(str(e))

    if found is None:
        console.print(f"[dim]No entry for {day.isoformat()}[/dim]")
        return
    console.print(render_entry(found, day.strftime("%A, %B %d, %Y")))


@entry.command("gratitude")
@click.argument("text")
@date_option
def add_gratitude(text: str, on_date: Optional[datetime]) -> None:
    """Add something you are grateful for."""
    try:
        service = _get_journal_service()
        written = service.add_gratitude(_day(on_date), text)
        service.save()
    except PlumeError as e:
        _fail(str(e))
    console.print(f"[green]✓ Gratitude added ({len(written.gratitudes)} for {written.day})[/green]")


@entry.command("accomplishment")
@click.argument("text")
@date_option
def add_accomplishment(text: str, on_date: Optional[datetime]) -> None:
    """Add something you accomplished."""
    try:
        service = _get_journal_service()
        written = service.add_accomplishment(_day(on_date), text)
        service.save()
    except PlumeError as e:
        _fail(str(e))
    console.print(
        f"[green]✓ Accomplishment added ({len(written.accomplishments)} for {written.day})[/green]"
    )


@entry.command("memory")
@click.argument("text")
@date_option
def set_memory(text: str, on_date: Optional[datetime]) -> None:
    """Set the memory of the day (an empty string clears it)."""
    try:
        service = _get_journal_service()
        written = service.set_memory(_day(on_date), text)
        service.save()
    except PlumeError as e:
        _fail(str(e))
    if written.memory:
        console.print(f"[green]✓ Memory saved for {written.day}[/green]")
    else:
        console.print(f"[yellow]Memory cleared for {written.day}[/yellow]")


@entry.command("journal")
@click.argument("text", required=False)
@date_option
def write_journal(text: Optional[str], on_date: Optional[datetime]) -> None:
    """Write the journal text of a day.

    Without TEXT the current journal opens in your editor.
    """
    day = _day(on_date)
    try:
        service = _get_journal_service()
        if text is None:
            current = service.get_entry(day)
            text = click.edit((current.journal if current else None) or "")
            if text is None:
                console.print("[dim]No changes[/dim]")
                return
        written = service.set_journal(day, text)
        service.save()
    except PlumeError as e:
        _fail(str(e))
    console.print(f"[green]✓ Journal saved for {written.day} ({written.word_count} words)[/green]")


@entry.command("delete")
@date_option
@click.option("--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
def delete_entry(on_date: Optional[datetime], yes: bool) -> None:
    """Delete the entry for a day."""
    day = _day(on_date)
    try:
        service = _get_journal_service()
        found = service.get_entry(day)
        if found is None:
            console.print(f"[dim]No entry for {day.isoformat()}[/dim]")
            return
        if not yes and not click.confirm(f"Delete the entry for {day.isoformat()}?"):
            return
        service.delete_entry(found)
        service.save()
    except PlumeError as e:
        _fail(str(e))
    console.print(f"[green]✓ Deleted entry for {day.isoformat()}[/green]")
