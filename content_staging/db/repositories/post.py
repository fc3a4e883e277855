"""
Post repository for data access operations on Post entities.

Query Notes:
- Published listings share one WHERE clause that callers can widen or narrow
  through published filters; every value in it is a bound parameter.
- GUID lookups come in two flavors: suffix match for content moved between
  hosts, exact match for reconciling a known post with its counterpart.
- Parent posts are resolved with one extra lookup, never deeper.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import MetaData, Table, func, select, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import TextClause

from ...config import Settings
from ...exceptions import InvalidArgumentError
from ...models import Post, format_timestamp
from ..filters import BASE_PUBLISHED_CLAUSE, PublishedFilter, apply_published_filters
from ..tables import POST_COLUMNS, ColumnFormat, build_posts_table
from .base import BaseRepository

LOGGER = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "wp_posts"
DEFAULT_BATCH_TYPE = "sme_content_batch"
PUBLISH_STATUS = "publish"
DEFAULT_PAGE_SIZE = 5


def normalize_order(order: str | None) -> str:
    """Only the literal ``asc`` sorts ascending; anything else sorts descending."""

    return "asc" if order == "asc" else "desc"


def compute_page_window(page_size: int, page: int, excluded_count: int = 0) -> tuple[int, int]:
    """
    Return the ``(offset, limit)`` of a page of published posts.

    Excluded posts are shown elsewhere (typically at the top of the first
    page), so they are subtracted from the offset. While the exclusions still
    overlap the requested page the page shrinks instead of the offset going
    negative. A negative limit means the page is fully covered by exclusions.
    """

    raw_offset = (page - 1) * page_size - excluded_count
    if raw_offset < 0:
        return 0, page_size - excluded_count
    return raw_offset, page_size


class PostRepository(BaseRepository[Post]):
    """Data access helpers for Post entities."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        table_name: str = DEFAULT_TABLE_NAME,
        batch_type: str = DEFAULT_BATCH_TYPE,
        publish_status: str = PUBLISH_STATUS,
        page_size: int = DEFAULT_PAGE_SIZE,
        published_filters: Iterable[PublishedFilter] = (),
    ) -> None:
        super().__init__(session)
        self._table = build_posts_table(MetaData(), table_name)
        self._batch_type = batch_type
        self._publish_status = publish_status
        self._page_size = page_size
        self._published_filters: list[PublishedFilter] = list(published_filters)

    @classmethod
    def from_settings(
        cls,
        session: AsyncSession,
        settings: Settings,
        *,
        published_filters: Iterable[PublishedFilter] = (),
    ) -> PostRepository:
        """Build a repository using the configured table name and content conventions."""

        return cls(
            session,
            table_name=settings.database.posts_table,
            batch_type=settings.content.batch_type,
            publish_status=settings.content.publish_status,
            page_size=settings.content.page_size,
            published_filters=published_filters,
        )

    @property
    def table(self) -> Table:
        return self._table

    def add_published_filter(self, published_filter: PublishedFilter) -> None:
        """Register a filter applied to the WHERE clause of published queries."""

        self._published_filters.append(published_filter)

    async def find_by_guid(self, guid: str) -> Post | None:
        """
        Return the post whose stored GUID ends with the normalized ``guid``.

        Matching on the suffix tolerates the scheme and host differing between
        environments. Returns None when nothing matches.
        """

        normalized = self.normalize_guid(guid)
        if not normalized:
            return None

        stmt = (
            select(self._table)
            .where(self._table.c.guid.endswith(normalized, autoescape=True))
            .order_by(self._table.c.ID)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        if row is None or row.get("ID") is None:
            return None
        return await self.create_object(row)

    async def resolve_id_by_guid(self, post: Post) -> None:
        """
        Set ``post.id`` to the id of the row sharing its exact GUID.

        Used to reconcile a post received from another environment with its
        local counterpart. ``post.id`` becomes None when there is no match.
        """

        stmt = select(self._table.c.ID).where(self._table.c.guid == post.guid).limit(1)
        found = await self._session.scalar(stmt)
        post.id = int(found) if found is not None else None

    async def list_published(
        self,
        order_by: str | None = None,
        order: str | None = "asc",
        page_size: int | None = None,
        page: int = 1,
        excluded_ids: Sequence[int] = (),
    ) -> list[Post]:
        """
        Return one page of published posts.

        Args:
            order_by: Column to sort by; results are unordered when omitted
            order: ``asc`` or anything else for descending
            page_size: Posts per page; defaults to the repository page size
            page: 1-based page number
            excluded_ids: Posts already shown elsewhere; skipped and
                subtracted from the pagination window
        """

        excluded = list(excluded_ids)
        if page_size is None:
            page_size = self._page_size
        offset, limit = compute_page_window(page_size, page, len(excluded))
        if limit < 0:
            LOGGER.debug(
                "Page %d of %d is covered by %d excluded posts", page, page_size, len(excluded)
            )
            return []

        stmt = select(self._table).where(self._published_clause())
        if excluded:
            stmt = stmt.where(self._table.c.ID.not_in(excluded))

        if order_by is not None:
            column = self._column(order_by)
            stmt = stmt.order_by(column.asc() if normalize_order(order) == "asc" else column.desc())

        stmt = stmt.offset(offset).limit(limit)
        result = await self._session.execute(stmt)
        return await self.map_rows(result.mappings().all())

    async def count_published(self) -> int:
        """Return the number of published posts."""

        stmt = select(func.count()).select_from(self._table).where(self._published_clause())
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def list_published_modified_after(self, date: datetime | str) -> list[Post]:
        """
        Return published posts modified strictly after ``date``, ordered by type.

        A datetime is compared in the table's ``YYYY-MM-DD HH:MM:SS`` form.
        """

        modified_after = format_timestamp(date) if isinstance(date, datetime) else date
        stmt = (
            select(self._table)
            .where(self._table.c.post_status == self._publish_status)
            .where(self._table.c.post_type != self._batch_type)
            .where(self._table.c.post_modified > modified_after)
            .order_by(self._table.c.post_type.asc())
        )
        result = await self._session.execute(stmt)
        return await self.map_rows(result.mappings().all())

    async def save_existing(self, post: Post) -> None:
        """Replace every mapped column of an already stored post."""

        await self.update(post)

    async def insert_new(self, post: Post) -> None:
        """Insert a new post and assign its generated id."""

        await self.insert(post)

    def column_formats(self) -> Sequence[ColumnFormat]:
        return POST_COLUMNS

    def create_values(self, obj: Post) -> Sequence[Any]:
        # Must follow POST_COLUMNS order.
        return (
            obj.author,
            obj.date,
            obj.date_gmt,
            obj.content,
            obj.title,
            obj.excerpt,
            obj.status,
            obj.comment_status,
            obj.ping_status,
            obj.password,
            obj.name,
            obj.to_ping,
            obj.pinged,
            obj.modified,
            obj.modified_gmt,
            obj.content_filtered,
            obj.resolved_parent_id,
            obj.guid,
            obj.menu_order,
            obj.type,
            obj.mime_type,
            obj.comment_count,
        )

    async def create_object(self, row: RowMapping, *, resolve_relations: bool = True) -> Post:
        post = Post(
            id=int(row["ID"]),
            parent_id=int(row["post_parent"] or 0),
            author=int(row["post_author"] or 0),
            date=row["post_date"],
            date_gmt=row["post_date_gmt"],
            modified=row["post_modified"],
            modified_gmt=row["post_modified_gmt"],
            content=row["post_content"],
            title=row["post_title"],
            excerpt=row["post_excerpt"],
            status=row["post_status"],
            comment_status=row["comment_status"],
            ping_status=row["ping_status"],
            password=row["post_password"],
            name=row["post_name"],
            to_ping=row["to_ping"],
            pinged=row["pinged"],
            content_filtered=row["post_content_filtered"],
            guid=row["guid"],
            menu_order=int(row["menu_order"] or 0),
            type=row["post_type"],
            mime_type=row["post_mime_type"],
            comment_count=int(row["comment_count"] or 0),
        )

        if resolve_relations and post.parent_id:
            post.parent = await self._load_parent(post)
        return post

    async def _load_parent(self, post: Post) -> Post | None:
        if post.parent_id == post.id:
            LOGGER.warning("Post %d references itself as parent, not resolving it", post.id)
            return None
        # The parent's own parent is left unresolved; parent_id still records it.
        return await self.load_by_id(post.parent_id, resolve_relations=False)

    def _published_clause(self) -> TextClause:
        clause, params = apply_published_filters(
            self._published_filters,
            BASE_PUBLISHED_CLAUSE,
            {"batch_type": self._batch_type, "publish_status": self._publish_status},
        )
        # Parenthesized so clauses widened with OR keep their precedence.
        return text(f"({clause})").bindparams(**params)

    def _column(self, name: str) -> Any:
        if name not in self._table.c:
            raise InvalidArgumentError(
                f"Cannot order posts by unknown column '{name}'.",
                context={"table": self._table.name},
            )
        return self._table.c[name]


__all__ = ["PostRepository", "compute_page_window", "normalize_order"]
