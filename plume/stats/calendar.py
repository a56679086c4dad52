"""Calendar grid calculations.

Grids are Sunday-first to match a ``Sun..Sat`` header row.
"""

import calendar
from datetime import date, timedelta
from typing import Optional

WEEKDAY_HEADERS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# Heatmap spans 53 Sunday-first weeks ending with the current one
HEATMAP_WEEKS = 53


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a month."""
    return calendar.monthrange(year, month)[1]


def first_weekday_index(year: int, month: int) -> int:
    """Return the Sunday-based weekday index (0=Sunday) of the 1st of a month."""
    monday_based = calendar.monthrange(year, month)[0]
    return (monday_based + 1) % 7


def sunday_index(day: date) -> int:
    """Return the Sunday-based weekday index (0=Sunday) of a date."""
    return (day.weekday() + 1) % 7


def month_grid(year: int, month: int) -> list[Optional[date]]:
    """Build the day cells of a month for a 7-column calendar.

    The result starts with one ``None`` placeholder per weekday before the
    1st, followed by every day of the month in order. It is not padded at
    the end; use :func:`chunk_weeks` to split it into full rows.

    Args:
        year: Four-digit year.
        month: Month number, 1-12.

    Returns:
        List of length ``first_weekday_index + days_in_month``.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}. Must be between 1 and 12")

    cells: list[Optional[date]] = [None] * first_weekday_index(year, month)
    cells.extend(date(year, month, d) for d in range(1, days_in_month(year, month) + 1))
    return cells


def chunk_weeks(cells: list[Optional[date]]) -> list[list[Optional[date]]]:
    """Split grid cells into rows of 7, padding the last row with ``None``."""
    padded = list(cells)
    if len(padded) % 7:
        padded.extend([None] * (7 - len(padded) % 7))
    return [padded[i:i + 7] for i in range(0, len(padded), 7)]


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move a (year, month) pair by ``delta`` months, rolling over years.

    >>> shift_month(2024, 12, 1)
    (2025, 1)
    >>> shift_month(2024, 1, -1)
    (2023, 12)
    """
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def heatmap_days(today: Optional[date] = None) -> list[date]:
    """Return the dates of a year-long activity heatmap.

    The grid starts on the Sunday of the week 52 weeks before ``today``
    and covers 53 full weeks, so it may run a few days past ``today``.
    """
    today = today or date.today()
    year_ago = today - timedelta(weeks=HEATMAP_WEEKS - 1)
    start = year_ago - timedelta(days=sunday_index(year_ago))
    return [start + timedelta(days=i) for i in range(HEATMAP_WEEKS * 7)]


def activity_level(word_count: int) -> int:
    """Bucket a day's journal word count into a 0-4 heatmap intensity."""
    if word_count <= 0:
        return 0
    if word_count < 50:
        return 1
    if word_count < 200:
        return 2
    if word_count < 500:
        return 3
    return 4
