"""Builders for test records."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.models import ContentRecord

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_record(record_id: str, **overrides: object) -> ContentRecord:
    """Build a minimal valid record, overriding any field by keyword."""

    data: dict[str, object] = {
        "id": record_id,
        "title": f"Title {record_id}",
        "description": f"Description {record_id}",
        "type": "movie",
        "genre": ["Drama"],
        "thumbnail": f"https://img.example.com/{record_id}.jpg",
    }
    data.update(overrides)
    return ContentRecord.model_validate(data)


def stamped(record_id: str, hours_ago: int, **overrides: object) -> ContentRecord:
    """Build a record created ``hours_ago`` hours before ``BASE_TIME``."""

    return make_record(
        record_id, created_at=BASE_TIME - timedelta(hours=hours_ago), **overrides
    )
