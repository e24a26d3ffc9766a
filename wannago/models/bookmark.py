"""Bookmark model: a place someone in the group wants to visit."""

import uuid
from datetime import datetime
from enum import StrEnum

from pydantic import field_validator
from sqlalchemy import DateTime, Text
from sqlmodel import Column, Field, SQLModel

from wannago.models.base import (
    TimestampMixin,
    blank_to_none,
    new_uuid,
    strip_text,
    validate_url,
)
from wannago.models.theme import ThemeSummary


class Category(StrEnum):
    RESTAURANT = "restaurant"
    SIGHTSEEING = "sightseeing"
    SHOPPING = "shopping"
    ACTIVITY = "activity"
    OTHER = "other"


# Map pin shown for each category
CATEGORY_PIN_EMOJIS: dict[Category, str] = {
    Category.RESTAURANT: "🍽️",
    Category.SIGHTSEEING: "🏛️",
    Category.SHOPPING: "🛍️",
    Category.ACTIVITY: "🎯",
    Category.OTHER: "📍",
}

DEFAULT_PRIORITY = 3


class Bookmark(TimestampMixin, SQLModel, table=True):
    __tablename__ = "bookmarks"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    group_id: str = Field(foreign_key="groups.id", nullable=False, index=True)

    title: str = Field(max_length=200, nullable=False)
    url: str = Field(sa_column=Column(Text, nullable=False))
    category: Category = Field(nullable=False, index=True)
    memo: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    address: str | None = Field(default=None, max_length=500)

    # Location picked from places search; both null when unknown
    place_name: str | None = Field(default=None, max_length=255)
    latitude: float | None = Field(default=None)
    longitude: float | None = Field(default=None)

    priority: int = Field(default=DEFAULT_PRIORITY, ge=1, le=5)
    visited: bool = Field(default=False, index=True)
    visited_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))

    # Fetched from the page's <title> / OpenGraph tags
    auto_title: str | None = Field(default=None, max_length=200)
    auto_description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    auto_image_url: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    auto_site_name: str | None = Field(default=None, max_length=255)


# ── Pydantic schemas ─────────────────────────────────────────

_OPTIONAL_TEXT_FIELDS = (
    "memo",
    "address",
    "place_name",
    "auto_title",
    "auto_description",
    "auto_image_url",
    "auto_site_name",
)


class BookmarkCreate(SQLModel):
    title: str = Field(min_length=1, max_length=200)
    url: str
    category: Category
    memo: str | None = None
    address: str | None = Field(default=None, max_length=500)
    place_name: str | None = Field(default=None, max_length=255)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    priority: int = Field(default=DEFAULT_PRIORITY, ge=1, le=5)
    auto_title: str | None = None
    auto_description: str | None = None
    auto_image_url: str | None = None
    auto_site_name: str | None = None
    theme_ids: list[uuid.UUID] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value: object) -> object:
        return strip_text(value)

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        return validate_url(value)

    @field_validator(*_OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def normalize_optional(cls, value: object) -> object:
        return blank_to_none(value)

    @field_validator("auto_title")
    @classmethod
    def truncate_auto_title(cls, value: str | None) -> str | None:
        return value[:200] if value else value


class BookmarkUpdate(SQLModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    url: str | None = None
    category: Category | None = None
    memo: str | None = None
    address: str | None = Field(default=None, max_length=500)
    place_name: str | None = Field(default=None, max_length=255)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    priority: int | None = Field(default=None, ge=1, le=5)
    visited: bool | None = None
    theme_ids: list[uuid.UUID] | None = Field(
        default=None, description="Replaces the bookmark's themes when given"
    )

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value: object) -> object:
        return strip_text(value)

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str | None) -> str | None:
        return validate_url(value) if value is not None else value

    @field_validator("memo", "address", "place_name", mode="before")
    @classmethod
    def normalize_optional(cls, value: object) -> object:
        return blank_to_none(value)


class VisitedUpdate(SQLModel):
    visited: bool


class BookmarkThemesUpdate(SQLModel):
    theme_ids: list[uuid.UUID]


class BookmarkRead(SQLModel):
    id: uuid.UUID
    group_id: str
    title: str
    url: str
    category: Category
    memo: str | None
    address: str | None
    place_name: str | None
    latitude: float | None
    longitude: float | None
    priority: int
    visited: bool
    visited_at: datetime | None
    auto_title: str | None
    auto_description: str | None
    auto_image_url: str | None
    auto_site_name: str | None
    themes: list[ThemeSummary] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class BookmarkStats(SQLModel):
    total_count: int
    visited_count: int
    unvisited_count: int
    avg_priority: float


class BookmarkList(SQLModel):
    bookmarks: list[BookmarkRead]
    total: int
    stats: BookmarkStats
