"""Record store backed by a hosted PostgREST (Supabase-style) REST API."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..errors import FetchFailure, PersistFailure
from ..models import ContentRecord

logger = logging.getLogger(__name__)

_FILTER_UNSAFE_RE = re.compile(r"[,()*]")


class RemoteRecordStore:
    """Thin wrapper around the backend's ``/rest/v1`` table endpoints."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client
        self._max_retries = settings.remote_retry_limit
        self._content_path = f"/rest/v1/{settings.content_table}"
        self._favorites_path = f"/rest/v1/{settings.favorites_table}"

    def _headers(self, *, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": f"{self._settings.app_name} (streamhub)",
        }
        api_key = self._settings.backend_api_key
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        *,
        resource: str,
        params: dict[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
        retry: bool = True,
    ) -> httpx.Response:
        """Issue a request, retrying transport errors and 5xx responses."""

        attempt = 0
        while True:
            try:
                response = await self._client.request(
                    method,
                    path,
                    params=params,
                    json=json,
                    headers=self._headers(prefer=prefer),
                )
            except httpx.HTTPError as exc:
                attempt += 1
                if retry and attempt <= self._max_retries:
                    backoff = min(2 ** (attempt - 1), 5) + (0.1 * attempt)
                    logger.info(
                        "Transient error fetching %s (%s). Retrying in %.1fs",
                        resource,
                        exc.__class__.__name__,
                        backoff,
                    )
                    await asyncio.sleep(backoff)
                    continue
                raise

            if retry and 500 <= response.status_code < 600:
                attempt += 1
                if attempt <= self._max_retries:
                    backoff = min(2 ** (attempt - 1), 5) + (0.1 * attempt)
                    logger.info(
                        "Backend %s while fetching %s. Retrying in %.1fs",
                        response.status_code,
                        resource,
                        backoff,
                    )
                    await asyncio.sleep(backoff)
                    continue
            return response

    @staticmethod
    def _error_message(response: httpx.Response, fallback: str) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("error")
            if message:
                return str(message)
        return f"{fallback} (HTTP {response.status_code})"

    async def _read_rows(
        self, resource: str, path: str, params: dict[str, str]
    ) -> list[dict[str, Any]]:
        fallback = f"Failed to fetch {resource}"
        try:
            response = await self._send("GET", path, resource=resource, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Failed to fetch %s: %s", resource, exc)
            raise FetchFailure(resource, str(exc) or fallback) from exc
        if response.status_code >= 400:
            message = self._error_message(response, fallback)
            logger.warning("Failed to fetch %s: %s", resource, message)
            raise FetchFailure(resource, message)
        try:
            data = response.json()
        except ValueError as exc:
            raise FetchFailure(resource, f"Unexpected non-JSON response for {resource}") from exc
        if not isinstance(data, list):
            raise FetchFailure(resource, f"Unexpected response structure for {resource}")
        return [row for row in data if isinstance(row, dict)]

    @staticmethod
    def _to_records(rows: list[dict[str, Any]], resource: str) -> list[ContentRecord]:
        records: list[ContentRecord] = []
        for row in rows:
            try:
                records.append(ContentRecord.model_validate(row))
            except ValidationError as exc:
                logger.warning(
                    "Skipping invalid %s row %s: %s", resource, row.get("id"), exc
                )
        return records

    async def fetch_all_content(self) -> list[ContentRecord]:
        rows = await self._read_rows(
            "content",
            self._content_path,
            {"select": "*", "order": "created_at.desc"},
        )
        return self._to_records(rows, "content")

    async def fetch_featured_content(self) -> list[ContentRecord]:
        rows = await self._read_rows(
            "featured content",
            self._content_path,
            {"select": "*", "featured": "eq.true", "order": "created_at.desc"},
        )
        return self._to_records(rows, "featured content")

    async def fetch_content_by_id(self, content_id: str) -> ContentRecord | None:
        rows = await self._read_rows(
            "content item",
            self._content_path,
            {"select": "*", "id": f"eq.{content_id}", "limit": "1"},
        )
        records = self._to_records(rows, "content item")
        return records[0] if records else None

    async def search_remote(self, query: str) -> list[ContentRecord]:
        term = _FILTER_UNSAFE_RE.sub(" ", query).strip()
        if not term:
            return []
        rows = await self._read_rows(
            "search results",
            self._content_path,
            {
                "select": "*",
                "or": f"(title.ilike.*{term}*,description.ilike.*{term}*)",
                "order": "created_at.desc",
            },
        )
        return self._to_records(rows, "search results")

    async def _write(
        self,
        method: str,
        path: str,
        *,
        resource: str,
        params: dict[str, str] | None = None,
        json: Any = None,
        accept_statuses: frozenset[int] = frozenset(),
    ) -> None:
        fallback = f"Failed to write {resource}"
        try:
            response = await self._send(
                method,
                path,
                resource=resource,
                params=params,
                json=json,
                prefer="return=minimal",
                retry=False,
            )
        except httpx.HTTPError as exc:
            logger.warning("Failed to write %s: %s", resource, exc)
            raise PersistFailure(str(exc) or fallback) from exc
        if response.status_code >= 400 and response.status_code not in accept_statuses:
            message = self._error_message(response, fallback)
            logger.warning("Failed to write %s: %s", resource, message)
            raise PersistFailure(message)

    async def persist_new_content(self, payload: dict[str, Any]) -> None:
        await self._write("POST", self._content_path, resource="content", json=payload)

    async def list_favorite_ids(self, user_id: str) -> list[str]:
        rows = await self._read_rows(
            "favorites",
            self._favorites_path,
            {
                "select": "content_id",
                "user_id": f"eq.{user_id}",
                "order": "created_at.desc",
            },
        )
        return [str(row["content_id"]) for row in rows if row.get("content_id") is not None]

    async def add_favorite(self, user_id: str, content_id: str) -> None:
        # 409 means the pair already exists.
        await self._write(
            "POST",
            self._favorites_path,
            resource="favorite",
            json={"user_id": user_id, "content_id": content_id},
            accept_statuses=frozenset({409}),
        )

    async def remove_favorite(self, user_id: str, content_id: str) -> None:
        await self._write(
            "DELETE",
            self._favorites_path,
            resource="favorite",
            params={"user_id": f"eq.{user_id}", "content_id": f"eq.{content_id}"},
        )
