"""
Base repository class with shared utilities.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import Any, Generic, Protocol, TypeVar
from urllib.parse import urlsplit, urlunsplit

from sqlalchemy import Table, insert, select, update
from sqlalchemy.engine import RowMapping
from sqlalchemy.ext.asyncio import AsyncSession

from ...exceptions import InvalidArgumentError
from ..tables import ColumnFormat, bind_values

LOGGER = logging.getLogger(__name__)


class Identified(Protocol):
    """Anything persisted under a storage-assigned integer id."""

    id: int | None


ModelT = TypeVar("ModelT", bound=Identified)


class BaseRepository(ABC, Generic[ModelT]):
    """
    Base class for table-backed repositories.

    Owns the generic select-by-id, select-by-ids, insert and update
    primitives. Subclasses describe the table and how rows map to objects;
    the session (and its transaction) belongs to the caller and is never
    committed or closed here.
    """

    primary_key = "ID"

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        """Expose the underlying session for transaction management."""
        return self._session

    @property
    @abstractmethod
    def table(self) -> Table:
        """Table this repository reads and writes."""

    @abstractmethod
    def column_formats(self) -> Sequence[ColumnFormat]:
        """Ordered column format table matching ``create_values``."""

    @abstractmethod
    def create_values(self, obj: ModelT) -> Sequence[Any]:
        """Map an object to column values, in ``column_formats`` order."""

    @abstractmethod
    async def create_object(self, row: RowMapping, *, resolve_relations: bool = True) -> ModelT:
        """Build an object from a raw row."""

    async def load_by_id(self, object_id: int | None, *, resolve_relations: bool = True) -> ModelT | None:
        """Return the object stored under ``object_id`` or None."""

        if not object_id:
            return None

        pk = self.table.c[self.primary_key]
        result = await self._session.execute(select(self.table).where(pk == object_id))
        row = result.mappings().first()
        if row is None:
            return None
        return await self.create_object(row, resolve_relations=resolve_relations)

    async def load_by_ids(self, object_ids: Iterable[int]) -> list[ModelT]:
        """Fetch multiple objects by id in a single query."""

        ids = [object_id for object_id in object_ids if object_id]
        if not ids:
            return []

        pk = self.table.c[self.primary_key]
        result = await self._session.execute(select(self.table).where(pk.in_(ids)))
        return await self.map_rows(result.mappings().all())

    async def map_rows(self, rows: Iterable[RowMapping]) -> list[ModelT]:
        """Map raw rows to objects, skipping rows without an identifier."""

        objects: list[ModelT] = []
        for row in rows:
            if row.get(self.primary_key) is None:
                LOGGER.debug("Skipping %s row without %s", self.table.name, self.primary_key)
                continue
            objects.append(await self.create_object(row))
        return objects

    def bound_values(self, obj: ModelT) -> dict[str, int | str]:
        """Return the object's column values coerced with the format table."""

        return bind_values(self.create_values(obj), self.column_formats())

    async def insert(self, obj: ModelT) -> None:
        """Insert ``obj`` as a new row and assign the generated id onto it."""

        if obj.id:
            raise InvalidArgumentError(
                "Cannot insert an object that already has an id.",
                context={"table": self.table.name, "id": obj.id},
            )

        result = await self._session.execute(insert(self.table).values(**self.bound_values(obj)))
        obj.id = int(result.inserted_primary_key[0])
        LOGGER.debug("Inserted %s row %d", self.table.name, obj.id)

    async def update(self, obj: ModelT) -> None:
        """Replace every mapped column of the row stored under ``obj.id``."""

        if not obj.id:
            raise InvalidArgumentError(
                "Cannot update an object without an id.",
                context={"table": self.table.name},
            )

        pk = self.table.c[self.primary_key]
        stmt = update(self.table).where(pk == obj.id).values(**self.bound_values(obj))
        result = await self._session.execute(stmt)
        LOGGER.debug(
            "Updated %s row %d (%d rows matched)", self.table.name, obj.id, result.rowcount or 0
        )

    @staticmethod
    def normalize_guid(guid: str) -> str:
        """
        Strip scheme and host from a GUID, keeping the path-like tail.

        GUIDs carry the host of the environment they were created in, so the
        same content item has different GUIDs on different hosts. The tail
        (path, query and fragment) is what stays stable across environments.
        A GUID without a host is returned unchanged.
        """

        guid = guid.strip()
        parts = urlsplit(guid)
        if not parts.netloc:
            return guid
        return urlunsplit(("", "", parts.path, parts.query, parts.fragment))


__all__ = ["BaseRepository", "Identified"]
