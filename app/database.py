"""Database utilities for the SQL-backed record store."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import MetaData, inspect, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base with consistent naming conventions."""

    metadata = MetaData()


class Database:
    """Thin wrapper managing the SQLAlchemy async engine and sessions."""

    def __init__(self, database_url: str):
        self._engine: AsyncEngine = create_async_engine(database_url, future=True)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self._engine, expire_on_commit=False
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def create_all(self) -> None:
        """Create database tables if they do not yet exist."""

        async with self._engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
            await connection.run_sync(self._apply_schema_migrations)

    @staticmethod
    def _apply_schema_migrations(sync_connection) -> None:
        """Backfill columns added after the first content schema shipped."""

        inspector = inspect(sync_connection)
        if "content" not in inspector.get_table_names():
            return

        existing_columns = {
            column["name"] for column in inspector.get_columns("content")
        }

        def _ensure_column(name: str, ddl: str, init_sql: str | None = None) -> None:
            if name in existing_columns:
                return
            sync_connection.execute(text(ddl))
            if init_sql:
                sync_connection.execute(text(init_sql))
            existing_columns.add(name)

        _ensure_column("video_url", "ALTER TABLE content ADD COLUMN video_url VARCHAR(1024)")
        _ensure_column("uploaded_by", "ALTER TABLE content ADD COLUMN uploaded_by VARCHAR(64)")
        _ensure_column(
            "language",
            "ALTER TABLE content ADD COLUMN language JSON",
            "UPDATE content SET language = '[\"English\"]' WHERE language IS NULL",
        )
        _ensure_column(
            "featured",
            "ALTER TABLE content ADD COLUMN featured BOOLEAN DEFAULT 0",
            "UPDATE content SET featured = 0 WHERE featured IS NULL",
        )

    async def dispose(self) -> None:
        """Dispose of the underlying database engine."""

        await self._engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Provide a transactional scope around a series of operations."""

        async with self.session_factory() as session:
            yield session
