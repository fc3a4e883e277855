"""
Database toolkit exposing the posts table, repositories, and query filters.
"""

from .engine import create_engine, create_session_factory
from .filters import BASE_PUBLISHED_CLAUSE, PublishedFilter, apply_published_filters
from .repositories import BaseRepository, PostRepository
from .tables import POST_COLUMNS, ColumnKind, build_posts_table

__all__ = [
    "BASE_PUBLISHED_CLAUSE",
    "BaseRepository",
    "ColumnKind",
    "POST_COLUMNS",
    "PostRepository",
    "PublishedFilter",
    "apply_published_filters",
    "build_posts_table",
    "create_engine",
    "create_session_factory",
]
