"""Tests for todo list views.

**Feature: plume-journal**
"""

from datetime import date, datetime

from plume.models import Todo
from plume.stats.todos import TodoView, filter_todos, group_by_day, overdue_todos

NOW = datetime(2024, 6, 15, 12, 0)


class TestTodoViews:
    """
    **Feature: plume-journal, Property 13: Todo Views**

    Each view selects its tasks and orders them by due date.
    """

    def setup_method(self):
        self.overdue = Todo(title="Overdue", date=datetime(2024, 6, 10, 9, 0))
        self.this_morning = Todo(title="Morning", date=datetime(2024, 6, 15, 8, 0))
        self.tonight = Todo(title="Tonight", date=datetime(2024, 6, 15, 20, 0))
        self.tomorrow = Todo(title="Tomorrow", date=datetime(2024, 6, 16, 9, 0))
        self.finished = Todo(title="Finished", date=datetime(2024, 6, 15, 7, 0), completed=True)
        self.todos = [self.tomorrow, self.finished, self.tonight, self.overdue, self.this_morning]

    def test_today(self):
        assert filter_todos(self.todos, TodoView.TODAY, now=NOW) == [self.this_morning, self.tonight]

    def test_upcoming(self):
        assert filter_todos(self.todos, TodoView.UPCOMING, now=NOW) == [self.tonight, self.tomorrow]

    def test_open(self):
        assert filter_todos(self.todos, TodoView.OPEN, now=NOW) == [
            self.overdue, self.this_morning, self.tonight, self.tomorrow,
        ]

    def test_completed(self):
        assert filter_todos(self.todos, TodoView.COMPLETED, now=NOW) == [self.finished]

    def test_overdue(self):
        assert overdue_todos(self.todos, now=NOW) == [self.overdue]

    def test_group_by_day(self):
        groups = group_by_day(self.todos)

        assert list(groups) == [date(2024, 6, 10), date(2024, 6, 15), date(2024, 6, 16)]
        assert groups[date(2024, 6, 15)] == [self.finished, self.this_morning, self.tonight]
