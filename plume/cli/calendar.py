"""Calendar commands for Plume CLI.

Handles the month calendar and the year-long writing heatmap.
"""

from datetime import MAXYEAR, MINYEAR, date
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from plume.errors import PlumeError
from plume.stats.calendar import (
    WEEKDAY_HEADERS,
    activity_level,
    chunk_weeks,
    heatmap_days,
    month_grid,
    shift_month,
)

console = Console()

# Heatmap shades for activity levels 0-4
HEATMAP_CELLS = ["[grey23]■[/grey23]", "[green4]■[/green4]", "[green3]■[/green3]",
                 "[green1]■[/green1]", "[bold bright_green]■[/bold bright_green]"]


def _get_data_store():
    """Get the data store instance."""
    from plume.config import load_settings
    from plume.db.store import JournalStore

    return JournalStore(load_settings().db_path)


def _fail(message: str) -> None:
    console.print(Panel(
        f"[red]{escape(message)}[/red]",
        title="[bold red]Error[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def day_marker(entry) -> str:
    """Short symbols for the kinds of content an entry has."""
    if entry is None:
        return ""
    marks = []
    if entry.gratitudes:
        marks.append("[magenta]♥[/magenta]")
    if entry.memory:
        marks.append("[yellow]✦[/yellow]")
    if entry.accomplishments:
        marks.append("[cyan]★[/cyan]")
    if entry.journal:
        marks.append("[green]✎[/green]")
    return "".join(marks)


@click.command("calendar")
@click.option("--month", type=click.IntRange(1, 12), default=None, help="Month number (default: current).")
@click.option("--year", type=click.IntRange(1, 9999), default=None, help="Year (default: current).")
@click.option("--offset", type=int, default=0, help="Months to move from the chosen month (e.g. -1).")
def calendar_view(month: Optional[int], year: Optional[int], offset: int) -> None:
    """Show a month calendar with the days you wrote.

    \b
    Examples:
      plume calendar
      plume calendar --offset -1         # Previous month
      plume calendar --month 2 --year 2024
    """
    today = date.today()
    year, month = shift_month(year or today.year, month or today.month, offset)
    if not MINYEAR <= year <= MAXYEAR:
        _fail(f"Month is out of range: year {year} must be between {MINYEAR} and {MAXYEAR}")

    try:
        store = _get_data_store()
        by_day = {}
        for item in store.all_entries():
            by_day.setdefault(item.day, item)
        todo_days = {t.day for t in store.all_todos() if not t.completed}
    except PlumeError as e:
        _fail(str(e))

    table = Table(
        title=date(year, month, 1).strftime("%B %Y"),
        show_header=True,
        header_style="bold cyan",
        show_lines=True,
    )
    for header in WEEKDAY_HEADERS:
        table.add_column(header, justify="center", min_width=5)

    for week in chunk_weeks(month_grid(year, month)):
        row = []
        for day in week:
            if day is None:
                row.append("")
                continue
            label = f"[reverse]{day.day:>2}[/reverse]" if day == today else f"{day.day:>2}"
            marks = day_marker(by_day.get(day))
            if day in todo_days:
                marks += "[red]•[/red]"
            row.append(f"{label}\n{marks}" if marks else label)
        table.add_row(*row)

    console.print(table)
    console.print("[dim]♥ gratitude  ✦ memory  ★ accomplishment  ✎ journal  • open task[/dim]")


@click.command()
def heatmap() -> None:
    """Show a year of writing activity by journal word count."""
    from plume.stats.engine import word_counts_by_day

    try:
        counts = word_counts_by_day(_get_data_store().all_entries())
    except PlumeError as e:
        _fail(str(e))

    today = date.today()
    days = heatmap_days(today)
    weeks = [days[i:i + 7] for i in range(0, len(days), 7)]

    # One line per weekday, one column per week
    lines = []
    for weekday in range(7):
        cells = []
        for week in weeks:
            day = week[weekday]
            if day > today:
                cells.append(" ")
            else:
                cells.append(HEATMAP_CELLS[activity_level(counts.get(day, 0))])
        lines.append(f"{WEEKDAY_HEADERS[weekday]:<4}" + "".join(cells))

    legend = "Less " + "".join(HEATMAP_CELLS) + " More"
    active = sum(1 for day in days if counts.get(day, 0) > 0)
    console.print(Panel(
        "\n".join(lines) + f"\n\n[dim]{legend}[/dim]",
        title=f"[bold]Writing activity[/bold] [dim]({active} days)[/dim]",
        border_style="green",
    ))
