"""
Engine and session factory built from settings.

Hosts that already own an engine can skip this module and hand their own
AsyncSession to the repositories.
"""

from __future__ import annotations

import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import Settings, get_settings

LOGGER = logging.getLogger(__name__)


def create_engine(settings: Settings | None = None) -> AsyncEngine:
    """Create an async engine for ``settings.database.url``."""

    runtime_settings = settings or get_settings()
    url = make_url(runtime_settings.database.url)
    LOGGER.info("Creating database engine for %s", url.render_as_string(hide_password=True))
    return create_async_engine(url, echo=runtime_settings.database.echo)


def create_session_factory(
    settings: Settings | None = None,
    *,
    engine: AsyncEngine | None = None,
) -> async_sessionmaker[AsyncSession]:
    """
    Return a session factory bound to ``engine`` or to a new engine.

    Sessions keep their objects loaded after commit and do not autoflush;
    committing stays with the caller.
    """

    return async_sessionmaker(
        engine or create_engine(settings),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


__all__ = ["create_engine", "create_session_factory"]
