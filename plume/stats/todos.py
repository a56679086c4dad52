"""Todo list views."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from plume.models import Todo, start_of_day


class TodoView(str, Enum):
    """Which todos to show."""

    TODAY = "today"
    UPCOMING = "upcoming"
    OPEN = "open"
    COMPLETED = "completed"


def filter_todos(
    todos: list[Todo], view: TodoView, now: Optional[datetime] = None
) -> list[Todo]:
    """Select todos for a view, ordered by due date.

    ``today`` and ``upcoming`` only include open tasks; ``upcoming`` is
    anything due after ``now``.
    """
    now = now or datetime.now()
    ordered = sorted(todos, key=lambda t: t.date)

    if view is TodoView.TODAY:
        return [t for t in ordered if t.day == now.date() and not t.completed]
    if view is TodoView.UPCOMING:
        return [t for t in ordered if t.date > now and not t.completed]
    if view is TodoView.COMPLETED:
        return [t for t in ordered if t.completed]
    return [t for t in ordered if not t.completed]


def overdue_todos(todos: list[Todo], now: Optional[datetime] = None) -> list[Todo]:
    """Open todos due before the start of today."""
    cutoff = start_of_day(now or datetime.now())
    return sorted((t for t in todos if t.date < cutoff and not t.completed), key=lambda t: t.date)


def group_by_day(todos: list[Todo]) -> dict[date, list[Todo]]:
    """Group todos by due day, days in ascending order."""
    groups: dict[date, list[Todo]] = {}
    for todo in sorted(todos, key=lambda t: t.date):
        groups.setdefault(todo.day, []).append(todo)
    return groups
