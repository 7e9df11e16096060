"""Bundled demo catalog served by the in-memory record store."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from .models import ContentRecord

DEMO_VIDEO_URL = (
    "http://commondatastorage.googleapis.com/gtv-videos-bucket/sample/BigBuckBunny.mp4"
)

_EPOCH = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
_IMAGE = "https://images.unsplash.com/{photo}?w={width}&h={height}&fit=crop"


def _stamp(position: int) -> datetime:
    """Timestamps decrease with position so the tuple reads newest first."""

    return _EPOCH - timedelta(hours=position)


def _poster(photo: str) -> str:
    return _IMAGE.format(photo=photo, width=400, height=600)


def _banner(photo: str) -> str:
    return _IMAGE.format(photo=photo, width=800, height=400)


DEMO_CATALOG: tuple[ContentRecord, ...] = (
    ContentRecord(
        id="1",
        title="Maleficent: Mistress of Evil",
        type="movie",
        genre=["Adventure", "Fantasy"],
        thumbnail=_banner("photo-1536440136628-849c177e76a1"),
        description="A powerful fairy and her goddaughter face new challenges.",
        duration="2h 15m",
        rating=7.5,
        year=2019,
        featured=True,
        language=["English", "Hindi"],
        video_url=DEMO_VIDEO_URL,
        created_at=_stamp(0),
    ),
    ContentRecord(
        id="2",
        title="The Dark Knight",
        type="movie",
        genre=["Action", "Drama"],
        thumbnail=_banner("photo-1509347528160-9a9e33742cdb"),
        description="Batman faces his greatest challenge against the Joker.",
        duration="2h 32m",
        rating=9.0,
        year=2008,
        featured=True,
        language=["English"],
        video_url=DEMO_VIDEO_URL,
        created_at=_stamp(1),
    ),
    ContentRecord(
        id="3",
        title="Inception",
        type="movie",
        genre=["Sci-Fi", "Action"],
        thumbnail=_banner("photo-1440404653325-ab127d49abc1"),
        description="A thief who steals secrets through dream-sharing technology.",
        duration="2h 28m",
        rating=8.8,
        year=2010,
        featured=True,
        language=["English"],
        video_url=DEMO_VIDEO_URL,
        created_at=_stamp(2),
    ),
    ContentRecord(
        id="4",
        title="Mad Max: Fury Road",
        type="movie",
        genre=["Action", "Adventure"],
        thumbnail=_poster("photo-1594908900066-3f47337549d8"),
        description="A post-apocalyptic action adventure.",
        duration="2h 0m",
        rating=8.1,
        year=2015,
        language=["English"],
        created_at=_stamp(3),
    ),
    ContentRecord(
        id="5",
        title="John Wick",
        type="movie",
        genre=["Action", "Thriller"],
        thumbnail=_poster("photo-1485846234645-a62644f84728"),
        description="An ex-hitman seeks vengeance.",
        duration="1h 41m",
        rating=7.4,
        year=2014,
        language=["English"],
        created_at=_stamp(4),
    ),
    ContentRecord(
        id="6",
        title="Mission: Impossible",
        type="movie",
        genre=["Action", "Adventure"],
        thumbnail=_poster("photo-1574267432644-f248f5be0b96"),
        description="Ethan Hunt and his team tackle impossible missions.",
        duration="2h 27m",
        rating=7.7,
        year=2018,
        language=["English"],
        created_at=_stamp(5),
    ),
    ContentRecord(
        id="7",
        title="The Grand Budapest Hotel",
        type="movie",
        genre=["Comedy", "Drama"],
        thumbnail=_poster("photo-1478720568477-152d9b164e26"),
        description="Adventures of a legendary concierge.",
        duration="1h 40m",
        rating=8.1,
        year=2014,
        language=["English"],
        created_at=_stamp(6),
    ),
    ContentRecord(
        id="8",
        title="Superbad",
        type="movie",
        genre=["Comedy"],
        thumbnail=_poster("photo-1489599849927-2ee91cede3ba"),
        description="Two high school friends on an adventure.",
        duration="1h 53m",
        rating=7.6,
        year=2007,
        language=["English"],
        created_at=_stamp(7),
    ),
    ContentRecord(
        id="9",
        title="The Shawshank Redemption",
        type="movie",
        genre=["Drama"],
        thumbnail=_poster("photo-1517604931442-7e0c8ed2963c"),
        description="Two imprisoned men bond over years.",
        duration="2h 22m",
        rating=9.3,
        year=1994,
        language=["English"],
        created_at=_stamp(8),
    ),
    ContentRecord(
        id="10",
        title="Forrest Gump",
        type="movie",
        genre=["Drama", "Romance"],
        thumbnail=_poster("photo-1499209974431-9dddcece7f88"),
        description="The extraordinary life of an ordinary man.",
        duration="2h 22m",
        rating=8.8,
        year=1994,
        language=["English"],
        created_at=_stamp(9),
    ),
    ContentRecord(
        id="11",
        title="Tech Talk Daily",
        type="podcast",
        genre=["Technology"],
        thumbnail=_poster("photo-1478737270239-2f02b77fc618"),
        description="Latest news and trends in technology.",
        duration="45m",
        rating=4.5,
        language=["English"],
        created_at=_stamp(10),
    ),
    ContentRecord(
        id="12",
        title="True Crime Stories",
        type="podcast",
        genre=["Crime", "Documentary"],
        thumbnail=_poster("photo-1505682634904-d7c8d95cdc50"),
        description="Deep dives into real crime cases.",
        duration="1h 10m",
        rating=4.8,
        language=["English"],
        created_at=_stamp(11),
    ),
    ContentRecord(
        id="13",
        title="Newsroom Live",
        type="live",
        genre=["News"],
        thumbnail=_poster("photo-1495020689067-958852a7765e"),
        description="Around-the-clock headlines streamed live.",
        language=["English"],
        video_url=DEMO_VIDEO_URL,
        created_at=_stamp(12),
    ),
)
