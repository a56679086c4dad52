"""Explore commands for Plume CLI.

Handles statistics with filters, the word cloud and full-text search.
"""

from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from plume.errors import PlumeError
from plume.stats.engine import ContentFilter, DateWindow, SortOrder

console = Console()

PERIOD_LABELS = {
    "all": "All Time",
    "week": "Last Week",
    "month": "Last Month",
    "quarter": "Last 3 Months",
}

period_option = click.option(
    "--period",
    type=click.Choice([w.value for w in DateWindow], case_sensitive=False),
    default="all",
    help="Date window: all, week (7 days), month (30 days), quarter (90 days).",
)


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


def _load_entries():
    try:
        return _get_data_store().all_entries()
    except PlumeError as e:
        _fail(str(e))


def _snippet(text: Optional[str], limit: int = 40) -> str:
    if not text:
        return "-"
    return text if len(text) <= limit else text[:limit - 3] + "..."


@click.command()
@period_option
@click.option(
    "--filter", "content",
    type=click.Choice([c.value for c in ContentFilter], case_sensitive=False),
    default="all",
    help="Only entries with this kind of content.",
)
@click.option(
    "--sort", "order",
    type=click.Choice([s.value for s in SortOrder], case_sensitive=False),
    default="newest",
    help="Sort by newest, oldest or journal word count.",
)
@click.option("--text", "as_text", is_flag=True, default=False, help="Print entries as plain text.")
def explore(period: str, content: str, order: str, as_text: bool) -> None:
    """Show statistics and browse entries.

    \b
    Examples:
      plume explore
      plume explore --period month --filter gratitude
      plume explore --sort words --text > digest.txt
    """
    from plume.stats.engine import explore_stats, filter_by_window, filter_entries, format_entries_text

    window = DateWindow(period.lower())
    entries = _load_entries()
    selected = filter_entries(entries, window, ContentFilter(content.lower()), SortOrder(order.lower()))

    if as_text:
        click.echo(format_entries_text(selected), nl=False)
        return

    stats = explore_stats(filter_by_window(entries, window))
    console.print(Panel(
        f"Entries:          [bold]{stats.total_entries}[/bold]\n"
        f"Gratitudes:       [bold]{stats.total_gratitudes}[/bold]\n"
        f"Memories:         [bold]{stats.memories_count}[/bold]\n"
        f"Accomplishments:  [bold]{stats.total_accomplishments}[/bold]\n"
        f"Avg journal words: [bold]{stats.avg_words_per_journal}[/bold]",
        title=f"[bold cyan]{PERIOD_LABELS[window.value]}[/bold cyan]",
        border_style="cyan",
    ))

    if not selected:
        console.print("[dim]No entries match the selected filter[/dim]")
        return

    table = Table(
        title=f"{len(selected)} {'entry' if len(selected) == 1 else 'entries'}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Date", style="bold")
    table.add_column("Gratitude", justify="right")
    table.add_column("Memory", max_width=30)
    table.add_column("Done", justify="right")
    table.add_column("Words", justify="right")
    table.add_column("Journal", max_width=40)

    for item in selected:
        table.add_row(
            item.date.strftime("%Y-%m-%d"),
            str(len(item.gratitudes)),
            _snippet(item.memory, 30),
            str(len(item.accomplishments)),
            str(item.word_count),
            _snippet(item.journal),
        )
    console.print(table)


@click.command()
@period_option
@click.option("--max-words", type=click.IntRange(1, 200), default=None, help="Number of words to show.")
def cloud(period: str, max_words: Optional[int]) -> None:
    """Show the most frequent words in your entries."""
    from plume.config import load_settings
    from plume.stats.engine import filter_by_window
    from plume.stats.wordcloud import generate_word_cloud

    entries = filter_by_window(_load_entries(), DateWindow(period.lower()))
    items = generate_word_cloud(entries, max_words or load_settings().max_words)

    if not items:
        console.print(Panel(
            "[dim]No words to display. Start writing to see your word patterns![/dim]",
            title="[bold]Word Cloud[/bold]",
            border_style="dim",
        ))
        return

    cloud_text = Text(justify="center")
    for item in sorted(items, key=lambda i: i.text):
        if item.weight > 0.8:
            style = "bold bright_cyan"
        elif item.weight > 0.6:
            style = "bold cyan"
        elif item.weight > 0.4:
            style = "cyan"
        else:
            style = "dim cyan"
        cloud_text.append(item.text.upper() if item.weight > 0.8 else item.text, style=style)
        cloud_text.append("  ")

    console.print(Panel(
        cloud_text,
        title="[bold]Word Cloud[/bold]",
        subtitle=f"[dim]from {len(entries)} {'entry' if len(entries) == 1 else 'entries'}[/dim]",
        border_style="cyan",
    ))

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Word")
    table.add_column("Count", justify="right")
    table.add_column("Weight", justify="right")
    for item in items[:10]:
        table.add_row(item.text, str(item.count), f"{item.weight:.2f}")
    console.print(table)


@click.command()
@click.argument("query")
def search(query: str) -> None:
    """Search gratitudes, memories, accomplishments and journals."""
    from plume.stats.engine import search_entries

    results = search_entries(_load_entries(), query)
    if not results:
        console.print(f"[dim]No results for '{escape(query)}'[/dim]")
        return

    table = Table(
        title=f"{len(results)} result{'s' if len(results) != 1 else ''} for '{escape(query)}'",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Date", style="bold")
    table.add_column("Type")
    table.add_column("Match")

    for result in results:
        preview = Text(result.preview)
        preview.highlight_words([query], style="bold yellow", case_sensitive=False)
        table.add_row(result.date.strftime("%Y-%m-%d"), result.kind.title(), preview)
    console.print(table)
