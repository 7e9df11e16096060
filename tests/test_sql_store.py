"""Tests for the SQL-backed record store."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

import pytest

from app.database import Database
from app.db_models import ContentRow
from app.errors import FetchFailure
from app.services.catalog_store import CatalogStore
from app.services.sql_store import SqlRecordStore


async def _seed(database: Database) -> None:
    """Insert three rows with distinct creation times."""

    now = datetime(2024, 6, 1, 12, 0, 0)
    async with database.session() as session:
        session.add_all(
            [
                ContentRow(
                    id="old",
                    title="Archive Footage",
                    description="Black and white",
                    type="movie",
                    genre=["Documentary"],
                    thumbnail="https://img.example.com/old.jpg",
                    created_at=now - timedelta(days=2),
                ),
                ContentRow(
                    id="new",
                    title="Launch Day",
                    description="Rocket science explained",
                    type="podcast",
                    genre=["Technology"],
                    thumbnail="https://img.example.com/new.jpg",
                    featured=True,
                    created_at=now,
                ),
                ContentRow(
                    id="mid",
                    title="Harbour Lights",
                    description="A lighthouse keeper",
                    type="series",
                    genre=["Drama"],
                    thumbnail="https://img.example.com/mid.jpg",
                    created_at=now - timedelta(days=1),
                ),
            ]
        )
        await session.commit()


def test_reads_are_newest_first(tmp_path) -> None:
    async def runner() -> None:
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'content.db'}")
        await database.create_all()
        await _seed(database)
        store = SqlRecordStore(database.session_factory)

        everything = await store.fetch_all_content()
        featured = await store.fetch_featured_content()
        found = await store.fetch_content_by_id("mid")
        missing = await store.fetch_content_by_id("nope")
        results = await store.search_remote("ROCKET")

        await database.dispose()

        assert [record.id for record in everything] == ["new", "mid", "old"]
        assert [record.id for record in featured] == ["new"]
        assert found is not None and found.title == "Harbour Lights"
        assert missing is None
        assert [record.id for record in results] == ["new"]

    asyncio.run(runner())


def test_persist_new_content_assigns_id_and_timestamp(tmp_path) -> None:
    async def runner() -> None:
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'content.db'}")
        await database.create_all()
        store = SqlRecordStore(database.session_factory)

        await store.persist_new_content(
            {
                "title": "Fresh Upload",
                "description": "Just recorded",
                "type": "movie",
                "genre": ["Comedy"],
                "thumbnail": "https://cdn.example.com/t.jpg",
                "video_url": "https://cdn.example.com/v.mp4",
                "language": ["English"],
                "uploaded_by": "creator-1",
                "featured": False,
                "not_a_column": "dropped",
            }
        )
        records = await store.fetch_all_content()
        await database.dispose()

        assert len(records) == 1
        record = records[0]
        assert record.id
        assert record.created_at is not None
        assert record.video_url == "https://cdn.example.com/v.mp4"
        assert record.language == ["English"]
        assert record.uploaded_by == "creator-1"

    asyncio.run(runner())


def test_favorites_are_idempotent(tmp_path) -> None:
    async def runner() -> None:
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'content.db'}")
        await database.create_all()
        await _seed(database)
        store = SqlRecordStore(database.session_factory)

        await store.add_favorite("user-1", "old")
        await store.add_favorite("user-1", "old")
        await store.add_favorite("user-1", "new")
        await store.add_favorite("user-2", "mid")
        await store.remove_favorite("user-1", "new")
        await store.remove_favorite("user-1", "never-added")

        user_one = await store.list_favorite_ids("user-1")
        user_two = await store.list_favorite_ids("user-2")
        await database.dispose()

        assert user_one == ["old"]
        assert user_two == ["mid"]

    asyncio.run(runner())


def test_missing_tables_raise_fetch_failure(tmp_path) -> None:
    async def runner() -> None:
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        store = SqlRecordStore(database.session_factory)
        try:
            with pytest.raises(FetchFailure) as excinfo:
                await store.fetch_all_content()
        finally:
            await database.dispose()

        assert excinfo.value.message == "Failed to fetch content"

    asyncio.run(runner())


def test_catalog_store_over_sql_backend(tmp_path) -> None:
    """The catalog store loads and favourites records held in SQL."""

    async def runner() -> None:
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'content.db'}")
        await database.create_all()
        await _seed(database)
        backend = SqlRecordStore(database.session_factory)
        store = CatalogStore(backend, favorites_store=backend)

        snapshot = await store.start()
        store.toggle_favorite("mid")
        result = await store.sync_favorites("user-1")
        remote = await backend.list_favorite_ids("user-1")
        await store.close()
        await database.dispose()

        assert snapshot.status.value == "ready"
        assert [record.id for record in snapshot.featured] == ["new"]
        assert result.ok and result.pushed == 1
        assert remote == ["mid"]

    asyncio.run(runner())
