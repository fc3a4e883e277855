"""
SQLAlchemy Core definition of the posts table and its column format table.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from sqlalchemy import BigInteger, Column, Index, Integer, MetaData, String, Table, Text

from ..exceptions import MappingError


class ColumnKind(str, Enum):
    """Primitive kind a column value is bound as."""

    INTEGER = "%d"
    STRING = "%s"


ColumnFormat = tuple[str, ColumnKind]

# Order matters: values are coerced positionally against this sequence.
POST_COLUMNS: tuple[ColumnFormat, ...] = (
    ("post_author", ColumnKind.INTEGER),
    ("post_date", ColumnKind.STRING),
    ("post_date_gmt", ColumnKind.STRING),
    ("post_content", ColumnKind.STRING),
    ("post_title", ColumnKind.STRING),
    ("post_excerpt", ColumnKind.STRING),
    ("post_status", ColumnKind.STRING),
    ("comment_status", ColumnKind.STRING),
    ("ping_status", ColumnKind.STRING),
    ("post_password", ColumnKind.STRING),
    ("post_name", ColumnKind.STRING),
    ("to_ping", ColumnKind.STRING),
    ("pinged", ColumnKind.STRING),
    ("post_modified", ColumnKind.STRING),
    ("post_modified_gmt", ColumnKind.STRING),
    ("post_content_filtered", ColumnKind.STRING),
    ("post_parent", ColumnKind.INTEGER),
    ("guid", ColumnKind.STRING),
    ("menu_order", ColumnKind.INTEGER),
    ("post_type", ColumnKind.STRING),
    ("post_mime_type", ColumnKind.STRING),
    ("comment_count", ColumnKind.INTEGER),
)

# Long text columns; every other string column is a bounded VARCHAR.
_TEXT_COLUMNS = frozenset(
    {"post_content", "post_title", "post_excerpt", "to_ping", "pinged", "post_content_filtered"}
)
_STRING_LENGTHS: dict[str, int] = {
    "post_date": 19,
    "post_date_gmt": 19,
    "post_modified": 19,
    "post_modified_gmt": 19,
    "post_status": 20,
    "comment_status": 20,
    "ping_status": 20,
    "post_password": 255,
    "post_name": 200,
    "guid": 255,
    "post_type": 20,
    "post_mime_type": 100,
}


def _column_for(name: str, kind: ColumnKind) -> Column[Any]:
    if kind is ColumnKind.INTEGER:
        return Column(name, BigInteger().with_variant(Integer, "sqlite"), nullable=False, default=0)
    if name in _TEXT_COLUMNS:
        return Column(name, Text, nullable=False, default="")
    return Column(name, String(_STRING_LENGTHS.get(name, 255)), nullable=False, default="")


def build_posts_table(metadata: MetaData, name: str) -> Table:
    """
    Build the posts table under ``name``.

    Calling it again for a name already present in ``metadata`` returns the
    existing table.
    """

    if name in metadata.tables:
        return metadata.tables[name]

    return Table(
        name,
        metadata,
        Column(
            "ID",
            BigInteger().with_variant(Integer, "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
        *(_column_for(column, kind) for column, kind in POST_COLUMNS),
        Index(f"ix_{name}_type_status_date", "post_type", "post_status", "post_date", "ID"),
        Index(f"ix_{name}_post_parent", "post_parent"),
        Index(f"ix_{name}_post_name", "post_name"),
    )


def coerce_value(value: Any, kind: ColumnKind) -> int | str:
    """Coerce a single value to the primitive kind of its column."""

    if kind is ColumnKind.INTEGER:
        return int(value) if value is not None else 0
    return str(value) if value is not None else ""


def bind_values(
    values: Sequence[Any], formats: Sequence[ColumnFormat]
) -> dict[str, int | str]:
    """
    Pair mapped values with the format table positionally.

    Returns a ``{column: coerced value}`` mapping ready to be bound.
    """

    if len(values) != len(formats):
        raise MappingError(
            "Mapped value count does not match the column format table.",
            context={"values": len(values), "formats": len(formats)},
        )

    bound: dict[str, int | str] = {}
    for value, (column, kind) in zip(values, formats):
        try:
            bound[column] = coerce_value(value, kind)
        except (TypeError, ValueError) as exc:
            raise MappingError(
                f"Value for column '{column}' is not a valid {kind.name.lower()}.",
                context={"column": column, "value": value},
            ) from exc
    return bound


__all__ = [
    "ColumnFormat",
    "ColumnKind",
    "POST_COLUMNS",
    "bind_values",
    "build_posts_table",
    "coerce_value",
]
