"""Record store collaborator contracts and the in-memory fixture store."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Protocol, runtime_checkable

from ..errors import PersistFailure
from ..models import ContentRecord
from ..sample_catalog import DEMO_CATALOG

logger = logging.getLogger(__name__)


@runtime_checkable
class RecordStore(Protocol):
    """Read/write access to the content collection.

    Read failures raise :class:`~app.errors.FetchFailure`; write failures raise
    :class:`~app.errors.PersistFailure`. An unknown id is ``None``, never an
    exception.
    """

    async def fetch_all_content(self) -> list[ContentRecord]: ...

    async def fetch_featured_content(self) -> list[ContentRecord]: ...

    async def fetch_content_by_id(self, content_id: str) -> ContentRecord | None: ...

    async def search_remote(self, query: str) -> list[ContentRecord]: ...

    async def persist_new_content(self, payload: dict[str, Any]) -> None: ...


@runtime_checkable
class FavoritesStore(Protocol):
    """Per-user favourite ids kept by the backend."""

    async def list_favorite_ids(self, user_id: str) -> list[str]: ...

    async def add_favorite(self, user_id: str, content_id: str) -> None: ...

    async def remove_favorite(self, user_id: str, content_id: str) -> None: ...


class MediaUploader(Protocol):
    """Turns local files into public URLs; raises ``UploadFailure``."""

    async def upload_video(self, file: Any, user_id: str) -> str: ...

    async def upload_thumbnail(self, file: Any, user_id: str) -> str: ...


def newest_first(records: Iterable[ContentRecord]) -> list[ContentRecord]:
    """Order records by ``created_at`` descending; undated records sort last."""

    def _key(record: ContentRecord) -> tuple[bool, float]:
        if record.created_at is None:
            return False, 0.0
        return True, record.created_at.timestamp()

    return sorted(records, key=_key, reverse=True)


class InMemoryRecordStore:
    """Fixture-backed store used for demos, development and tests."""

    def __init__(
        self,
        records: Iterable[ContentRecord] = DEMO_CATALOG,
        *,
        latency: float = 0.0,
    ) -> None:
        self._records: list[ContentRecord] = list(records)
        self._favorites: dict[str, list[str]] = {}
        self._latency = max(latency, 0.0)

    async def _simulate_latency(self) -> None:
        if self._latency:
            await asyncio.sleep(self._latency)

    async def fetch_all_content(self) -> list[ContentRecord]:
        await self._simulate_latency()
        return newest_first(self._records)

    async def fetch_featured_content(self) -> list[ContentRecord]:
        await self._simulate_latency()
        return newest_first(record for record in self._records if record.featured)

    async def fetch_content_by_id(self, content_id: str) -> ContentRecord | None:
        await self._simulate_latency()
        for record in self._records:
            if record.id == content_id:
                return record
        return None

    async def search_remote(self, query: str) -> list[ContentRecord]:
        await self._simulate_latency()
        needle = query.lower()
        return newest_first(
            record
            for record in self._records
            if needle in record.title.lower() or needle in record.description.lower()
        )

    async def persist_new_content(self, payload: dict[str, Any]) -> None:
        await self._simulate_latency()
        data = {
            **payload,
            "id": uuid.uuid4().hex,
            "created_at": datetime.now(timezone.utc),
        }
        try:
            record = ContentRecord.model_validate(data)
        except ValueError as exc:
            raise PersistFailure(f"Rejected content payload: {exc}") from exc
        self._records.append(record)
        logger.info("Stored new %s '%s' as %s", record.type, record.title, record.id)

    async def list_favorite_ids(self, user_id: str) -> list[str]:
        await self._simulate_latency()
        return list(self._favorites.get(user_id, []))

    async def add_favorite(self, user_id: str, content_id: str) -> None:
        await self._simulate_latency()
        entries = self._favorites.setdefault(user_id, [])
        if content_id not in entries:
            entries.append(content_id)

    async def remove_favorite(self, user_id: str, content_id: str) -> None:
        await self._simulate_latency()
        entries = self._favorites.get(user_id, [])
        if content_id in entries:
            entries.remove(content_id)
