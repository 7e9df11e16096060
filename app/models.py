"""Pydantic models describing catalog records and snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Literal, get_args

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

ContentType = Literal["movie", "series", "podcast", "live"]

CONTENT_TYPES: tuple[str, ...] = get_args(ContentType)

ALL_GENRES = "All"
LIVE_GENRE = "Live"

DEFAULT_LANGUAGE = "English"


class ContentRecord(BaseModel):
    """A single browsable entry as stored in the record store."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str
    title: str
    description: str = ""
    type: ContentType
    genre: list[str] = Field(default_factory=list)
    thumbnail: str = Field(
        default="",
        validation_alias=AliasChoices("thumbnail", "thumbnail_url", "thumbnailUrl"),
    )
    video_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("video_url", "videoUrl"),
        serialization_alias="videoUrl",
    )
    duration: str | None = None
    rating: float | None = None
    year: int | None = None
    language: list[str] = Field(default_factory=list)
    featured: bool = False
    uploaded_by: str | None = Field(
        default=None,
        validation_alias=AliasChoices("uploaded_by", "uploadedBy"),
        serialization_alias="uploadedBy",
    )
    created_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )
    updated_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        serialization_alias="updatedAt",
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value))
        return value

    @field_validator("genre", "language", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("featured", mode="before")
    @classmethod
    def _none_to_false(cls, value: object) -> object:
        return False if value is None else value

    @property
    def is_live(self) -> bool:
        return self.type == "live"

    def matches_genre(self, genre: str) -> bool:
        """Return whether ``genre`` is one of the record's tags (case-sensitive)."""

        return genre in self.genre

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class NewContent(BaseModel):
    """Metadata supplied by a creator before the record exists.

    Every field is optional at construction time so the creation workflow can
    report exactly which one is missing.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    description: str | None = None
    type: ContentType | None = None
    genre: list[str] = Field(default_factory=list)
    duration: str | None = None
    language: list[str] | None = None

    @field_validator("genre", mode="before")
    @classmethod
    def _genre_none_to_empty(cls, value: object) -> object:
        return [] if value is None else value


class CatalogStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class CatalogSnapshot:
    """Materialised view of the store: collection, featured subset and status."""

    all: tuple[ContentRecord, ...] = ()
    featured: tuple[ContentRecord, ...] = ()
    status: CatalogStatus = CatalogStatus.IDLE
    error_message: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.status is CatalogStatus.LOADING

    def to_payload(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "errorMessage": self.error_message,
            "all": [record.to_payload() for record in self.all],
            "featured": [record.to_payload() for record in self.featured],
        }


@dataclass(frozen=True)
class GenreOption:
    """A browsable genre chip."""

    id: str
    name: str
    color: str


PRIMARY_COLOR = "#E50914"

GENRE_OPTIONS: tuple[GenreOption, ...] = (
    GenreOption(id="1", name="Action", color="#0EA5E9"),
    GenreOption(id="2", name="Adventure", color="#EF4444"),
    GenreOption(id="3", name="Comedy", color="#F59E0B"),
    GenreOption(id="4", name="Drama", color="#10B981"),
    GenreOption(id="5", name="Horror", color="#8B5CF6"),
    GenreOption(id="6", name="Sci-Fi", color="#06B6D4"),
)

UPLOAD_GENRES: tuple[str, ...] = (
    "Action",
    "Adventure",
    "Comedy",
    "Drama",
    "Horror",
    "Sci-Fi",
    "Romance",
    "Thriller",
    "Documentary",
)

UPLOAD_CONTENT_TYPES: tuple[str, ...] = ("movie", "series", "podcast")


def genre_chips(
    options: tuple[GenreOption, ...] = GENRE_OPTIONS,
) -> list[GenreOption]:
    """Return the chip row with the synthetic ``All`` chip first."""

    return [GenreOption(id="0", name=ALL_GENRES, color=PRIMARY_COLOR), *options]


@dataclass
class Section:
    """A titled, ordered sub-list of the collection used for grouping."""

    title: str
    content_type: str
    items: list[ContentRecord] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "type": self.content_type,
            "items": [item.to_payload() for item in self.items],
        }


class ContentSubmission(NewContent):
    """Creation request: metadata plus already-resolved media URLs."""

    creator_id: str | None = Field(
        default=None, validation_alias=AliasChoices("creator_id", "creatorId")
    )
    video_url: str | None = Field(
        default=None, validation_alias=AliasChoices("video_url", "videoUrl")
    )
    thumbnail_url: str | None = Field(
        default=None, validation_alias=AliasChoices("thumbnail_url", "thumbnailUrl")
    )

    def metadata(self) -> NewContent:
        return NewContent.model_validate(
            self.model_dump(include=set(NewContent.model_fields))
        )
