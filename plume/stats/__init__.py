"""Derived views over journal data: calendar grids, statistics, word clouds."""

from plume.stats.calendar import (
    activity_level,
    chunk_weeks,
    heatmap_days,
    month_grid,
    shift_month,
)
from plume.stats.engine import (
    ContentFilter,
    DateWindow,
    ExploreStats,
    SearchResult,
    SortOrder,
    calculate_streak,
    explore_stats,
    filter_entries,
    format_entries_text,
    search_entries,
    total_word_count,
)
from plume.stats.todos import TodoView, filter_todos, group_by_day, overdue_todos
from plume.stats.wordcloud import WordCloudItem, generate_word_cloud

__all__ = [
    "activity_level",
    "chunk_weeks",
    "heatmap_days",
    "month_grid",
    "shift_month",
    "ContentFilter",
    "DateWindow",
    "ExploreStats",
    "SearchResult",
    "SortOrder",
    "calculate_streak",
    "explore_stats",
    "filter_entries",
    "format_entries_text",
    "search_entries",
    "total_word_count",
    "TodoView",
    "filter_todos",
    "group_by_day",
    "overdue_todos",
    "WordCloudItem",
    "generate_word_cloud",
]
