"""Plume - personal journaling with daily entries, todos and statistics."""

__version__ = "0.1.0"
