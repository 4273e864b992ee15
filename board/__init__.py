"""Bulletin board service: paginated HTML posts backed by SQLite."""

__version__ = "1.0.0"
