"""Validation and submission of newly created content."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from ..errors import CatalogError, MissingField, UploadFailure
from ..models import DEFAULT_LANGUAGE, NewContent
from .record_store import MediaUploader, RecordStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


@dataclass
class CreationResult:
    """Success flag plus the reason when creation did not happen."""

    ok: bool
    error: str | None = None
    missing_field: str | None = None

    @classmethod
    def success(cls) -> "CreationResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str, *, missing_field: str | None = None) -> "CreationResult":
        return cls(ok=False, error=error, missing_field=missing_field)

    def to_payload(self) -> dict[str, Any]:
        return {"ok": self.ok, "error": self.error, "missingField": self.missing_field}


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _clean_genres(genres: list[str]) -> list[str]:
    return [genre.strip() for genre in genres if genre and genre.strip()]


class ContentCreationWorkflow:
    """Checks creator input and submits one new record.

    The collection held by the catalog store is never touched here; new
    content shows up on the next explicit refresh.
    """

    def __init__(self, record_store: RecordStore):
        self._records = record_store

    @staticmethod
    def _validate_metadata(content: NewContent, creator_id: str | None) -> None:
        if _blank(creator_id):
            raise MissingField("creator_id")
        if _blank(content.title):
            raise MissingField("title")
        if _blank(content.description):
            raise MissingField("description")
        if content.type is None:
            raise MissingField("type")
        if not _clean_genres(content.genre):
            raise MissingField("genre")

    @classmethod
    def validate(
        cls,
        content: NewContent,
        *,
        creator_id: str | None,
        video_url: str | None,
        thumbnail_url: str | None,
    ) -> None:
        """Raise :class:`MissingField` for the first absent required field."""

        cls._validate_metadata(content, creator_id)
        if _blank(video_url):
            raise MissingField("video_url")
        if _blank(thumbnail_url):
            raise MissingField("thumbnail_url")

    @staticmethod
    def build_payload(
        content: NewContent,
        *,
        creator_id: str,
        video_url: str,
        thumbnail_url: str,
    ) -> dict[str, Any]:
        """Return the record store row for a validated submission."""

        return {
            "title": (content.title or "").strip(),
            "type": content.type,
            "genre": _clean_genres(content.genre),
            "description": (content.description or "").strip(),
            "duration": content.duration or None,
            "language": list(content.language or [DEFAULT_LANGUAGE]),
            "video_url": video_url,
            "thumbnail": thumbnail_url,
            "uploaded_by": creator_id,
            "featured": False,
        }

    async def create(
        self,
        content: NewContent,
        *,
        creator_id: str | None,
        video_url: str | None,
        thumbnail_url: str | None,
    ) -> CreationResult:
        """Validate and persist ``content``; never raises."""

        try:
            self.validate(
                content,
                creator_id=creator_id,
                video_url=video_url,
                thumbnail_url=thumbnail_url,
            )
        except MissingField as exc:
            return CreationResult.failure(str(exc), missing_field=exc.field)

        payload = self.build_payload(
            content,
            creator_id=creator_id or "",
            video_url=video_url or "",
            thumbnail_url=thumbnail_url or "",
        )
        try:
            await self._records.persist_new_content(payload)
        except CatalogError as exc:
            logger.warning("Failed to create content '%s': %s", payload["title"], exc)
            return CreationResult.failure(str(exc) or "Failed to create content")
        except Exception as exc:
            logger.exception("Unexpected error creating content '%s'", payload["title"])
            return CreationResult.failure(str(exc) or "Failed to create content")
        logger.info("Created %s '%s' for %s", payload["type"], payload["title"], creator_id)
        return CreationResult.success()

    async def publish(
        self,
        content: NewContent,
        *,
        creator_id: str | None,
        video_file: Any,
        thumbnail_file: Any,
        uploader: MediaUploader,
        on_progress: ProgressCallback | None = None,
    ) -> CreationResult:
        """Upload the media files, then create the record.

        Everything that can be checked locally is checked before the first
        upload starts.
        """

        def _progress(message: str) -> None:
            if on_progress is not None:
                on_progress(message)

        try:
            self._validate_metadata(content, creator_id)
            if video_file is None:
                raise MissingField("video_file")
            if thumbnail_file is None:
                raise MissingField("thumbnail_file")
        except MissingField as exc:
            return CreationResult.failure(str(exc), missing_field=exc.field)

        user_id = creator_id or ""
        _progress("Uploading video...")
        try:
            video_url = await uploader.upload_video(video_file, user_id)
        except UploadFailure as exc:
            _progress("")
            return CreationResult.failure(str(exc) or "Failed to upload video")
        except Exception as exc:
            logger.exception("Unexpected error uploading video for %s", user_id)
            _progress("")
            return CreationResult.failure(str(exc) or "Failed to upload video")

        _progress("Uploading thumbnail...")
        try:
            thumbnail_url = await uploader.upload_thumbnail(thumbnail_file, user_id)
        except UploadFailure as exc:
            _progress("")
            return CreationResult.failure(str(exc) or "Failed to upload thumbnail")
        except Exception as exc:
            logger.exception("Unexpected error uploading thumbnail for %s", user_id)
            _progress("")
            return CreationResult.failure(str(exc) or "Failed to upload thumbnail")

        _progress("Creating content...")
        result = await self.create(
            content,
            creator_id=creator_id,
            video_url=video_url,
            thumbnail_url=thumbnail_url,
        )
        _progress("")
        return result
