"""
Tests for the settings-driven engine and session factory.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncSession

from content_staging.config import Settings
from content_staging.db.engine import create_engine, create_session_factory
from content_staging.db.repositories import PostRepository
from content_staging.db.tables import build_posts_table
from tests.factories import PostFactory


def _settings(tmp_path: Path, *, echo: bool = False, table: str = "wp_2_posts") -> Settings:
    base = Settings(_env_file=None)
    database = base.database.model_copy(
        update={
            "url": f"sqlite+aiosqlite:///{tmp_path / 'staging.db'}",
            "echo": echo,
            "posts_table": table,
        }
    )
    return base.model_copy(update={"database": database})


class TestCreateEngine:
    """Tests for create_engine."""

    @pytest.mark.asyncio
    async def test_uses_configured_url(self, tmp_path: Path) -> None:
        engine = create_engine(_settings(tmp_path))
        try:
            assert engine.url.drivername == "sqlite+aiosqlite"
            assert engine.url.database == str(tmp_path / "staging.db")
            assert engine.echo is False
        finally:
            await engine.dispose()

    @pytest.mark.asyncio
    async def test_echo_follows_settings(self, tmp_path: Path) -> None:
        engine = create_engine(_settings(tmp_path, echo=True))
        try:
            assert engine.echo is True
        finally:
            await engine.dispose()


class TestCreateSessionFactory:
    """Tests for create_session_factory."""

    @pytest.mark.asyncio
    async def test_sessions_keep_objects_after_commit(self, tmp_path: Path) -> None:
        factory = create_session_factory(_settings(tmp_path))
        try:
            assert factory.class_ is AsyncSession
            assert factory.kw["expire_on_commit"] is False
            assert factory.kw["autoflush"] is False
        finally:
            await factory.kw["bind"].dispose()

    @pytest.mark.asyncio
    async def test_repository_round_trip_on_configured_table(self, tmp_path: Path) -> None:
        settings = _settings(tmp_path)
        engine = create_engine(settings)
        metadata = MetaData()
        build_posts_table(metadata, settings.database.posts_table)
        async with engine.begin() as connection:
            await connection.run_sync(metadata.create_all)

        factory = create_session_factory(engine=engine)
        try:
            async with factory() as session:
                repository = PostRepository.from_settings(session, settings)
                post = PostFactory.build(guid="http://example.com/?p=77")
                await repository.insert_new(post)
                await session.commit()

            async with factory() as session:
                repository = PostRepository.from_settings(session, settings)
                found = await repository.find_by_guid("https://other.host/?p=77")

            assert found is not None
            assert found.id == post.id
            assert repository.table.name == "wp_2_posts"
        finally:
            await engine.dispose()
