"""Resolve what the platform player should play for a content id."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..models import ContentRecord
from ..sample_catalog import DEMO_VIDEO_URL
from .catalog_store import CatalogStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackRequest:
    """Everything the video player needs to start a stream."""

    url: str
    is_live: bool = False
    loop: bool = False
    title: str | None = None
    content_id: str | None = None

    @classmethod
    def for_record(cls, record: ContentRecord, *, fallback_url: str) -> "PlaybackRequest":
        return cls(
            url=record.video_url or fallback_url,
            is_live=record.is_live,
            loop=False,
            title=record.title,
            content_id=record.id,
        )

    def to_payload(self) -> dict[str, object]:
        return {
            "url": self.url,
            "isLive": self.is_live,
            "loop": self.loop,
            "title": self.title,
            "contentId": self.content_id,
        }


async def prepare_playback(
    store: CatalogStore,
    content_id: str | None,
    *,
    fallback_url: str = DEMO_VIDEO_URL,
) -> PlaybackRequest:
    """Return the stream for ``content_id``, or the demo stream if unknown."""

    if not content_id:
        return PlaybackRequest(url=fallback_url)
    record = await store.get_content(content_id)
    if record is None:
        logger.info("No content found for %s, playing default stream", content_id)
        return PlaybackRequest(url=fallback_url, content_id=content_id)
    return PlaybackRequest.for_record(record, fallback_url=fallback_url)
