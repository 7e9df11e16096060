"""Pure view derivations over a catalog collection.

Every function here takes the collection as an argument and returns a fresh
list. Nothing is sorted and nothing is mutated, so the functions are safe to
call on every interaction against the store's current snapshot.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ..models import ALL_GENRES, CONTENT_TYPES, LIVE_GENRE, ContentRecord, Section

SECTION_TITLES: dict[str, str] = {
    "movie": "Movies",
    "series": "Series",
    "podcast": "Popular Podcasts",
    "live": "Live Now",
}


def by_genre(records: Sequence[ContentRecord], genre: str) -> list[ContentRecord]:
    """Return records carrying ``genre``.

    ``"All"`` is the identity view and ``"Live"`` selects live streams by type
    rather than by tag. Any other value is an exact, case-sensitive tag match;
    records without tags never match.
    """

    if genre == ALL_GENRES:
        return list(records)
    if genre == LIVE_GENRE:
        return [record for record in records if record.type == "live"]
    return [record for record in records if record.matches_genre(genre)]


def by_type(records: Sequence[ContentRecord], content_type: str) -> list[ContentRecord]:
    """Return records whose type equals ``content_type``."""

    return [record for record in records if record.type == content_type]


def search(records: Sequence[ContentRecord], query: str) -> list[ContentRecord]:
    """Case-insensitive substring match on title, description or any genre tag.

    An empty ``query`` matches everything; callers that want "no query, no
    results" should use :func:`search_or_empty`.
    """

    needle = query.lower()

    def _matches(record: ContentRecord) -> bool:
        if needle in record.title.lower():
            return True
        if needle in (record.description or "").lower():
            return True
        return any(needle in tag.lower() for tag in record.genre)

    return [record for record in records if _matches(record)]


def search_or_empty(records: Sequence[ContentRecord], query: str | None) -> list[ContentRecord]:
    """Search, treating a blank query as "nothing to show"."""

    if not query or not query.strip():
        return []
    return search(records, query)


def sections(
    records: Sequence[ContentRecord],
    types: Iterable[str] = CONTENT_TYPES,
    *,
    limit: int | None = None,
) -> list[Section]:
    """Group records into one titled section per type, skipping empty ones."""

    grouped: list[Section] = []
    for content_type in types:
        items = by_type(records, content_type)
        if not items:
            continue
        if limit is not None:
            items = items[: max(limit, 0)]
        grouped.append(
            Section(
                title=SECTION_TITLES.get(content_type, content_type.title()),
                content_type=content_type,
                items=items,
            )
        )
    return grouped


def genres_present(records: Sequence[ContentRecord]) -> list[str]:
    """Return the distinct genre tags in first-seen order."""

    seen: dict[str, None] = {}
    for record in records:
        for tag in record.genre:
            seen.setdefault(tag, None)
    return list(seen)
