"""
Unit tests for the published-posts filter chain.
"""

from __future__ import annotations

from typing import Any

import pytest

from content_staging.db.filters import (
    BASE_PUBLISHED_CLAUSE,
    apply_published_filters,
    bound_names,
)
from content_staging.exceptions import InvalidArgumentError

BASE_PARAMS = {"batch_type": "sme_content_batch", "publish_status": "publish"}


def _only_type(post_type: str):
    def published_filter(clause: str, params: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        return f"{clause} AND post_type = :only_type", {**params, "only_type": post_type}

    return published_filter


class TestApplyPublishedFilters:
    """Tests for apply_published_filters."""

    def test_no_filters_is_identity(self) -> None:
        clause, params = apply_published_filters([], BASE_PUBLISHED_CLAUSE, BASE_PARAMS)

        assert clause == BASE_PUBLISHED_CLAUSE
        assert params == BASE_PARAMS

    def test_filters_chain_in_order(self) -> None:
        def append_menu_order(clause: str, params: dict[str, Any]) -> tuple[str, dict[str, Any]]:
            assert "only_type" in params
            return f"{clause} AND menu_order = :menu_order", {**params, "menu_order": 0}

        clause, params = apply_published_filters(
            [_only_type("page"), append_menu_order], BASE_PUBLISHED_CLAUSE, BASE_PARAMS
        )

        assert clause.endswith("AND post_type = :only_type AND menu_order = :menu_order")
        assert params["only_type"] == "page"
        assert params["menu_order"] == 0

    def test_filters_cannot_mutate_caller_params(self) -> None:
        params = dict(BASE_PARAMS)

        def mutating(clause: str, values: dict[str, Any]) -> tuple[str, dict[str, Any]]:
            values["publish_status"] = "draft"
            return clause, values

        apply_published_filters([mutating], BASE_PUBLISHED_CLAUSE, params)

        assert params == BASE_PARAMS

    def test_malformed_result(self) -> None:
        with pytest.raises(InvalidArgumentError):
            apply_published_filters(
                [lambda clause, params: clause], BASE_PUBLISHED_CLAUSE, BASE_PARAMS
            )

    def test_empty_clause(self) -> None:
        with pytest.raises(InvalidArgumentError):
            apply_published_filters(
                [lambda clause, params: ("  ", params)], BASE_PUBLISHED_CLAUSE, BASE_PARAMS
            )

    def test_replaced_clause_drops_unused_params(self) -> None:
        clause, params = apply_published_filters(
            [lambda clause, params: ("post_status = :publish_status", params)],
            BASE_PUBLISHED_CLAUSE,
            BASE_PARAMS,
        )

        assert clause == "post_status = :publish_status"
        assert params == {"publish_status": "publish"}

    def test_clause_without_params(self) -> None:
        clause, params = apply_published_filters(
            [lambda clause, params: ("1 = 1", params)], BASE_PUBLISHED_CLAUSE, BASE_PARAMS
        )

        assert clause == "1 = 1"
        assert params == {}

    def test_missing_param_value(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            apply_published_filters(
                [lambda clause, params: (f"{clause} AND post_name = :slug", params)],
                BASE_PUBLISHED_CLAUSE,
                BASE_PARAMS,
            )

        assert exc_info.value.context["missing"] == ["slug"]


class TestBoundNames:
    """Tests for bound_names."""

    def test_finds_named_params(self) -> None:
        assert bound_names(BASE_PUBLISHED_CLAUSE) == {"batch_type", "publish_status"}

    def test_ignores_casts_and_escaped_colons(self) -> None:
        assert bound_names(r"post_date::date > :since AND guid LIKE '\:x'") == {"since"}
