"""
Domain entities shared by the repositories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
ZERO_TIMESTAMP = "0000-00-00 00:00:00"


def format_timestamp(value: datetime) -> str:
    """Render a datetime the way the posts table stores it."""

    return value.strftime(TIMESTAMP_FORMAT)


@dataclass(slots=True)
class Post:
    """
    A content item stored in the posts table.

    ``id`` stays ``None`` until the post has been inserted. ``parent_id`` keeps
    the raw parent reference even when ``parent`` could not be resolved, so
    writing a loaded post back never drops its place in the hierarchy.
    """

    id: int | None = None
    parent: Post | None = field(default=None, repr=False, compare=False)
    parent_id: int = 0
    author: int = 0
    date: str = ZERO_TIMESTAMP
    date_gmt: str = ZERO_TIMESTAMP
    content: str = ""
    title: str = ""
    excerpt: str = ""
    status: str = "draft"
    comment_status: str = "open"
    ping_status: str = "open"
    password: str = ""
    name: str = ""
    to_ping: str = ""
    pinged: str = ""
    modified: str = ZERO_TIMESTAMP
    modified_gmt: str = ZERO_TIMESTAMP
    content_filtered: str = ""
    guid: str = ""
    menu_order: int = 0
    type: str = "post"
    mime_type: str = ""
    comment_count: int = 0

    def set_parent(self, parent: Post | None) -> None:
        """Attach (or detach, with ``None``) the parent post."""

        self.parent = parent
        self.parent_id = (parent.id or 0) if parent is not None else 0

    @property
    def resolved_parent_id(self) -> int:
        """Parent id as written to storage; ``0`` when the post has no parent."""

        if self.parent is not None and self.parent.id:
            return self.parent.id
        return self.parent_id


__all__ = ["Post", "TIMESTAMP_FORMAT", "ZERO_TIMESTAMP", "format_timestamp"]
