"""Owner of the in-memory catalog, featured subset and favourites."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Iterable

from ..errors import CatalogError, FetchFailure
from ..models import (
    ALL_GENRES,
    CatalogSnapshot,
    CatalogStatus,
    ContentRecord,
    Section,
)
from . import query_engine
from .record_store import FavoritesStore, RecordStore

logger = logging.getLogger(__name__)


@dataclass
class FavoritesSyncResult:
    """Outcome of reconciling local favourites with the backend."""

    pulled: int = 0
    pushed: int = 0
    removed: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_payload(self) -> dict[str, object]:
        return {
            "ok": self.ok,
            "pulled": self.pulled,
            "pushed": self.pushed,
            "removed": self.removed,
            "error": self.error,
        }


class CatalogStore:
    """Holds the authoritative collection and derives views from it.

    One instance lives for one session: build it at start-up, call
    :meth:`start` to load, and :meth:`close` on sign-out. All mutation happens
    on the owning event loop; the store is not safe to share across threads.
    """

    def __init__(
        self,
        record_store: RecordStore,
        *,
        fetch_timeout: float | None = 15.0,
        favorites_store: FavoritesStore | None = None,
    ):
        self._records = record_store
        self._favorites_store = favorites_store
        self._fetch_timeout = fetch_timeout
        self._snapshot = CatalogSnapshot()
        self._favorite_ids: set[str] = set()
        self._pending_removals: set[str] = set()
        self._selected_genre = ALL_GENRES
        self._refresh_task: asyncio.Task[CatalogSnapshot] | None = None

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    @property
    def all(self) -> tuple[ContentRecord, ...]:
        return self._snapshot.all

    @property
    def featured(self) -> tuple[ContentRecord, ...]:
        return self._snapshot.featured

    @property
    def status(self) -> CatalogStatus:
        return self._snapshot.status

    @property
    def selected_genre(self) -> str:
        return self._selected_genre

    async def start(self) -> CatalogSnapshot:
        """Load the catalog for the first time."""

        return await self.refresh()

    async def close(self) -> None:
        """Drop all session state and abandon any in-flight refresh.

        Callers still waiting on that refresh receive the reset snapshot.
        """

        task = self._refresh_task
        self._refresh_task = None
        self._snapshot = CatalogSnapshot()
        self._favorite_ids.clear()
        self._pending_removals.clear()
        self._selected_genre = ALL_GENRES
        if task is not None and not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task

    async def refresh(self) -> CatalogSnapshot:
        """Fetch all and featured content concurrently.

        Callers arriving while a refresh is in flight share its result. A field
        whose fetch fails keeps its last good value and the snapshot ends in
        ``error`` with the first failure message (all content before featured).
        """

        task = self._refresh_task
        if task is None or task.done():
            self._snapshot = replace(
                self._snapshot, status=CatalogStatus.LOADING, error_message=None
            )
            task = asyncio.create_task(self._run_refresh())
            self._refresh_task = task
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            # A refresh abandoned by close() resolves; caller cancellation propagates.
            current = asyncio.current_task()
            abandoned = task.cancelled() and self._refresh_task is not task
            if abandoned and (current is None or not current.cancelling()):
                return self._snapshot
            raise

    async def _run_refresh(self) -> CatalogSnapshot:
        logger.info("Refreshing catalog")
        (all_records, all_error), (featured, featured_error) = await asyncio.gather(
            self._fetch("content", self._records.fetch_all_content),
            self._fetch("featured content", self._records.fetch_featured_content),
        )

        previous = self._snapshot
        errors = [message for message in (all_error, featured_error) if message]
        self._snapshot = CatalogSnapshot(
            all=self._unique(all_records) if all_records is not None else previous.all,
            featured=self._unique(featured) if featured is not None else previous.featured,
            status=CatalogStatus.ERROR if errors else CatalogStatus.READY,
            error_message=errors[0] if errors else None,
        )
        logger.info(
            "Catalog refresh finished with status %s (%d items, %d featured)",
            self._snapshot.status.value,
            len(self._snapshot.all),
            len(self._snapshot.featured),
        )
        return self._snapshot

    async def _fetch(
        self,
        resource: str,
        fetcher: Callable[[], Awaitable[list[ContentRecord]]],
    ) -> tuple[list[ContentRecord] | None, str | None]:
        try:
            records = await self._bounded(fetcher())
        except asyncio.TimeoutError:
            logger.warning("Timed out fetching %s", resource)
            return None, f"Timed out fetching {resource}"
        except FetchFailure as exc:
            logger.warning("Failed to fetch %s: %s", resource, exc.message)
            return None, exc.message
        except Exception as exc:
            logger.exception("Unexpected error fetching %s", resource)
            return None, str(exc) or f"Failed to fetch {resource}"
        return records, None

    async def _bounded(self, awaitable: Awaitable):
        if self._fetch_timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=self._fetch_timeout)

    @staticmethod
    def _unique(records: Iterable[ContentRecord]) -> tuple[ContentRecord, ...]:
        seen: set[str] = set()
        unique: list[ContentRecord] = []
        for record in records:
            if record.id in seen:
                logger.warning("Dropping duplicate content id %s", record.id)
                continue
            seen.add(record.id)
            unique.append(record)
        return tuple(unique)

    def toggle_favorite(self, content_id: str) -> bool:
        """Flip membership of ``content_id`` and return the new state.

        Unknown ids are recorded too; they surface once a refresh delivers them.
        """

        if content_id in self._favorite_ids:
            self._favorite_ids.discard(content_id)
            self._pending_removals.add(content_id)
            return False
        self._favorite_ids.add(content_id)
        self._pending_removals.discard(content_id)
        return True

    def is_favorite(self, content_id: str) -> bool:
        return content_id in self._favorite_ids

    def favorites(self) -> list[ContentRecord]:
        """Favourited records present in the collection, newest first."""

        return [record for record in self._snapshot.all if record.id in self._favorite_ids]

    def select_genre(self, genre: str) -> None:
        self._selected_genre = genre or ALL_GENRES

    def filtered(self) -> list[ContentRecord]:
        return query_engine.by_genre(self._snapshot.all, self._selected_genre)

    def by_type(self, content_type: str) -> list[ContentRecord]:
        return query_engine.by_type(self._snapshot.all, content_type)

    def search(self, query: str | None) -> list[ContentRecord]:
        return query_engine.search_or_empty(self._snapshot.all, query)

    def sections(self, *, limit: int | None = None) -> list[Section]:
        return query_engine.sections(self._snapshot.all, limit=limit)

    async def get_content(self, content_id: str) -> ContentRecord | None:
        """Look up one record from the backend; ``None`` when unavailable."""

        try:
            return await self._bounded(self._records.fetch_content_by_id(content_id))
        except asyncio.TimeoutError:
            logger.warning("Timed out fetching content %s", content_id)
        except CatalogError as exc:
            logger.warning("Failed to fetch content %s: %s", content_id, exc)
        except Exception:
            logger.exception("Unexpected error fetching content %s", content_id)
        return None

    async def sync_favorites(self, user_id: str) -> FavoritesSyncResult:
        """Reconcile local favourites with the backend copy for ``user_id``.

        Local removals are pushed first, then local additions, then remote ids
        are merged in. Stops at the first backend failure.
        """

        result = FavoritesSyncResult()
        store = self._favorites_store
        if store is None:
            result.error = "Favorites sync is not configured"
            return result

        try:
            for content_id in sorted(self._pending_removals):
                await self._bounded(store.remove_favorite(user_id, content_id))
                self._pending_removals.discard(content_id)
                result.removed += 1

            remote_ids = set(await self._bounded(store.list_favorite_ids(user_id)))

            for content_id in sorted(self._favorite_ids - remote_ids):
                await self._bounded(store.add_favorite(user_id, content_id))
                result.pushed += 1
        except asyncio.TimeoutError:
            result.error = "Timed out syncing favorites"
        except CatalogError as exc:
            result.error = str(exc) or "Failed to sync favorites"
        except Exception as exc:
            logger.exception("Unexpected error syncing favorites for %s", user_id)
            result.error = str(exc) or "Failed to sync favorites"
        else:
            # Ids un-favourited while the sync was running stay removed.
            pulled = remote_ids - self._favorite_ids - self._pending_removals
            self._favorite_ids |= pulled
            result.pulled = len(pulled)

        if result.error:
            logger.warning("Favorites sync for %s failed: %s", user_id, result.error)
        else:
            logger.info(
                "Synced favorites for %s (pulled %d, pushed %d, removed %d)",
                user_id,
                result.pulled,
                result.pushed,
                result.removed,
            )
        return result
