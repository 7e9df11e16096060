from __future__ import annotations

from factories import make_record

from app.sample_catalog import DEMO_CATALOG
from app.services import query_engine


def _mixed_catalog():
    return [
        make_record("a", title="Alpha Strike", genre=["Action"]),
        make_record("b", title="Laugh Track", type="series", genre=["Comedy"]),
        make_record("c", title="Double Feature", genre=["Action", "Comedy"]),
        make_record("d", title="Untagged", genre=[]),
        make_record("e", title="City Desk", type="live", genre=["News"]),
        make_record("f", title="Tech Talk", type="podcast", genre=["Technology"]),
    ]


def test_by_genre_matches_any_tag_and_keeps_order() -> None:
    """Records carrying the tag come back in collection order."""

    records = _mixed_catalog()

    action = query_engine.by_genre(records, "Action")
    comedy = query_engine.by_genre(records, "Comedy")

    assert [record.id for record in action] == ["a", "c"]
    assert [record.id for record in comedy] == ["b", "c"]


def test_by_genre_all_is_identity() -> None:
    records = _mixed_catalog()

    result = query_engine.by_genre(records, "All")

    assert result == records
    assert result is not records


def test_by_genre_live_selects_live_type() -> None:
    records = _mixed_catalog()

    assert [record.id for record in query_engine.by_genre(records, "Live")] == ["e"]


def test_by_genre_is_case_sensitive_and_skips_untagged() -> None:
    records = _mixed_catalog()

    assert query_engine.by_genre(records, "action") == []
    assert all(record.id != "d" for record in query_engine.by_genre(records, "Drama"))


def test_by_genre_is_idempotent() -> None:
    records = _mixed_catalog()

    once = query_engine.by_genre(records, "Comedy")
    twice = query_engine.by_genre(once, "Comedy")

    assert once == twice


def test_by_type_filters_exactly() -> None:
    records = _mixed_catalog()

    assert [record.id for record in query_engine.by_type(records, "movie")] == ["a", "c", "d"]
    assert [record.id for record in query_engine.by_type(records, "podcast")] == ["f"]
    assert query_engine.by_type([], "movie") == []


def test_search_is_case_insensitive_across_fields() -> None:
    records = _mixed_catalog()

    assert [record.id for record in query_engine.search(records, "ALPHA")] == ["a"]
    assert [record.id for record in query_engine.search(records, "description b")] == ["b"]
    assert [record.id for record in query_engine.search(records, "techno")] == ["f"]


def test_search_ignores_query_case() -> None:
    records = _mixed_catalog()

    assert query_engine.search(records, "action") == query_engine.search(records, "ACTION")
    assert [record.id for record in query_engine.search(records, "action")] == ["a", "c"]


def test_two_record_genre_filter() -> None:
    records = [
        make_record("1", genre=["Action"]),
        make_record("2", genre=["Comedy"]),
    ]

    assert query_engine.by_genre(records, "Action") == [records[0]]


def test_search_without_match_returns_empty() -> None:
    assert query_engine.search(_mixed_catalog(), "zzz-no-match") == []


def test_search_or_empty_treats_blank_query_as_no_results() -> None:
    records = _mixed_catalog()

    assert query_engine.search_or_empty(records, "") == []
    assert query_engine.search_or_empty(records, "   ") == []
    assert query_engine.search_or_empty(records, None) == []
    assert query_engine.search(records, "") == records


def test_sections_group_by_type_and_skip_empty() -> None:
    records = _mixed_catalog()

    grouped = query_engine.sections(records)

    assert [section.title for section in grouped] == [
        "Movies",
        "Series",
        "Popular Podcasts",
        "Live Now",
    ]
    assert [record.id for record in grouped[0].items] == ["a", "c", "d"]

    trimmed = query_engine.sections(records, ("movie", "podcast"), limit=1)
    assert [section.content_type for section in trimmed] == ["movie", "podcast"]
    assert [len(section.items) for section in trimmed] == [1, 1]

    assert query_engine.sections([make_record("x")], ("series",)) == []


def test_genres_present_in_first_seen_order() -> None:
    records = _mixed_catalog()

    assert query_engine.genres_present(records) == [
        "Action",
        "Comedy",
        "News",
        "Technology",
    ]


def test_demo_catalog_genre_views() -> None:
    """The bundled catalog yields the same views the home screen shows."""

    sci_fi = query_engine.by_genre(DEMO_CATALOG, "Sci-Fi")

    assert sci_fi
    assert all("Sci-Fi" in record.genre for record in sci_fi)
    assert len(query_engine.by_genre(DEMO_CATALOG, "All")) == len(DEMO_CATALOG)
