"""
Shared pytest fixtures for the database, settings, and repositories.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from content_staging.config import Settings
from content_staging.db.repositories import PostRepository
from content_staging.db.tables import build_posts_table

TEST_TABLE = "wp_posts"
TEST_METADATA = MetaData()
build_posts_table(TEST_METADATA, TEST_TABLE)


@pytest.fixture
async def db_engine() -> AsyncIterator[AsyncEngine]:
    """Provide an async in-memory SQLite engine with the posts table created."""

    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as connection:
        await connection.run_sync(TEST_METADATA.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Create an AsyncSession per test, rolled back afterwards."""

    session_maker = async_sessionmaker(db_engine, expire_on_commit=False)
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def post_repository(db_session: AsyncSession) -> PostRepository:
    """PostRepository bound to the test session and table."""

    return PostRepository(db_session, table_name=TEST_TABLE)


@pytest.fixture
def settings_override(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Override global settings with test-friendly configuration."""

    from content_staging import config as config_module

    base_settings = config_module.Settings()
    database = base_settings.database.model_copy(
        update={"url": "sqlite+aiosqlite:///:memory:", "posts_table": TEST_TABLE}
    )
    overrides = base_settings.model_copy(update={"database": database})
    monkeypatch.setattr(config_module, "get_settings", lambda: overrides)
    return overrides
