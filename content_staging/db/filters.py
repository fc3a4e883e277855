"""
Extension point for the WHERE clause of published-post queries.

A filter receives the clause text and its bound values and returns a new
pair. Filters run in registration order, each one seeing the output of the
previous filter, so callers can narrow, widen or replace the published set
without touching the repository.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from typing import Any

from ..exceptions import InvalidArgumentError

LOGGER = logging.getLogger(__name__)

PublishedFilter = Callable[[str, dict[str, Any]], tuple[str, dict[str, Any]]]

BASE_PUBLISHED_CLAUSE = "post_type != :batch_type AND post_status = :publish_status"

# Same rule sqlalchemy.text() uses to find ":name" bind parameters.
_BIND_PARAM = re.compile(r"(?<![:\w\\]):(\w+)(?!:)", re.UNICODE)


def bound_names(clause: str) -> set[str]:
    """Return the names of the ``:name`` parameters referenced by ``clause``."""

    return set(_BIND_PARAM.findall(clause))


def apply_published_filters(
    filters: Iterable[PublishedFilter],
    clause: str,
    params: dict[str, Any],
) -> tuple[str, dict[str, Any]]:
    """
    Run ``clause`` and ``params`` through every filter in order.

    The returned params hold exactly the values the final clause references;
    values a filter made obsolete by rewriting the clause are dropped.
    """

    for published_filter in filters:
        result = published_filter(clause, dict(params))
        if (
            not isinstance(result, tuple)
            or len(result) != 2
            or not isinstance(result[0], str)
            or not isinstance(result[1], dict)
        ):
            raise InvalidArgumentError(
                "Published filters must return a (clause, params) pair.",
                context={"filter": getattr(published_filter, "__name__", repr(published_filter))},
            )
        clause, params = result
        if not clause.strip():
            raise InvalidArgumentError("Published filters must not return an empty clause.")

    names = bound_names(clause)
    missing = names - params.keys()
    if missing:
        raise InvalidArgumentError(
            "Published clause references parameters without values.",
            context={"clause": clause, "missing": sorted(missing)},
        )

    unused = params.keys() - names
    if unused:
        LOGGER.debug("Dropping unused published clause parameters: %s", sorted(unused))
    return clause, {name: value for name, value in params.items() if name in names}


__all__ = [
    "BASE_PUBLISHED_CLAUSE",
    "PublishedFilter",
    "apply_published_filters",
    "bound_names",
]
