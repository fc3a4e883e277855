"""
Custom exception hierarchy for repository components.
"""

from __future__ import annotations

from typing import Any


class RepositoryError(Exception):
    """Base exception for all repository-related errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class InvalidArgumentError(RepositoryError):
    """Raised when a repository call violates one of its preconditions."""


class MappingError(RepositoryError):
    """Raised when mapped values do not line up with the column format table."""


__all__ = ["InvalidArgumentError", "MappingError", "RepositoryError"]
