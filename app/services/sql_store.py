"""Record store backed by a SQL database through SQLAlchemy async sessions."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from pydantic import ValidationError
from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..db_models import ContentRow, FavoriteRow
from ..errors import FetchFailure, PersistFailure
from ..models import ContentRecord

logger = logging.getLogger(__name__)

_WRITABLE_COLUMNS = frozenset(
    {
        "title",
        "description",
        "type",
        "genre",
        "thumbnail",
        "video_url",
        "duration",
        "rating",
        "year",
        "language",
        "featured",
        "uploaded_by",
    }
)


class SqlRecordStore:
    """Serves content and favourites from the ``content``/``favorites`` tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @staticmethod
    def _row_to_record(row: ContentRow) -> ContentRecord | None:
        payload = {
            "id": row.id,
            "title": row.title,
            "description": row.description,
            "type": row.type,
            "genre": row.genre,
            "thumbnail": row.thumbnail,
            "video_url": row.video_url,
            "duration": row.duration,
            "rating": row.rating,
            "year": row.year,
            "language": row.language,
            "featured": row.featured,
            "uploaded_by": row.uploaded_by,
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }
        try:
            return ContentRecord.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Stored content %s could not be validated: %s", row.id, exc)
            return None

    async def _select_records(self, resource: str, stmt) -> list[ContentRecord]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except SQLAlchemyError as exc:
            logger.warning("Failed to fetch %s: %s", resource, exc)
            raise FetchFailure(resource, f"Failed to fetch {resource}") from exc
        records: list[ContentRecord] = []
        for row in rows:
            record = self._row_to_record(row)
            if record is not None:
                records.append(record)
        return records

    async def fetch_all_content(self) -> list[ContentRecord]:
        stmt = select(ContentRow).order_by(ContentRow.created_at.desc())
        return await self._select_records("content", stmt)

    async def fetch_featured_content(self) -> list[ContentRecord]:
        stmt = (
            select(ContentRow)
            .where(ContentRow.featured.is_(True))
            .order_by(ContentRow.created_at.desc())
        )
        return await self._select_records("featured content", stmt)

    async def fetch_content_by_id(self, content_id: str) -> ContentRecord | None:
        stmt = select(ContentRow).where(ContentRow.id == content_id).limit(1)
        records = await self._select_records("content item", stmt)
        return records[0] if records else None

    async def search_remote(self, query: str) -> list[ContentRecord]:
        pattern = f"%{query}%"
        stmt = (
            select(ContentRow)
            .where(
                or_(
                    ContentRow.title.ilike(pattern),
                    ContentRow.description.ilike(pattern),
                )
            )
            .order_by(ContentRow.created_at.desc())
        )
        return await self._select_records("search results", stmt)

    async def persist_new_content(self, payload: dict[str, Any]) -> None:
        values = {key: value for key, value in payload.items() if key in _WRITABLE_COLUMNS}
        row = ContentRow(id=uuid.uuid4().hex, **values)
        try:
            async with self._session_factory() as session:
                session.add(row)
                await session.commit()
        except SQLAlchemyError as exc:
            logger.warning("Failed to store content '%s': %s", values.get("title"), exc)
            raise PersistFailure("Failed to create content") from exc
        logger.info("Stored new %s '%s' as %s", row.type, row.title, row.id)

    async def list_favorite_ids(self, user_id: str) -> list[str]:
        stmt = (
            select(FavoriteRow.content_id)
            .where(FavoriteRow.user_id == user_id)
            .order_by(FavoriteRow.created_at.desc(), FavoriteRow.id.desc())
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [row[0] for row in result.all()]
        except SQLAlchemyError as exc:
            logger.warning("Failed to fetch favorites for %s: %s", user_id, exc)
            raise FetchFailure("favorites", "Failed to fetch favorites") from exc

    async def add_favorite(self, user_id: str, content_id: str) -> None:
        try:
            async with self._session_factory() as session:
                existing = await session.execute(
                    select(FavoriteRow.id).where(
                        FavoriteRow.user_id == user_id,
                        FavoriteRow.content_id == content_id,
                    )
                )
                if existing.scalar_one_or_none() is not None:
                    return
                session.add(FavoriteRow(user_id=user_id, content_id=content_id))
                await session.commit()
        except SQLAlchemyError as exc:
            logger.warning("Failed to add favorite %s for %s: %s", content_id, user_id, exc)
            raise PersistFailure("Failed to add favorite") from exc

    async def remove_favorite(self, user_id: str, content_id: str) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(
                    delete(FavoriteRow).where(
                        FavoriteRow.user_id == user_id,
                        FavoriteRow.content_id == content_id,
                    )
                )
                await session.commit()
        except SQLAlchemyError as exc:
            logger.warning("Failed to remove favorite %s for %s: %s", content_id, user_id, exc)
            raise PersistFailure("Failed to remove favorite") from exc
