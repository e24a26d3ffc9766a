"""Theme model: a named, emoji-tagged collection of bookmarks within a group."""

import uuid
from datetime import datetime

from pydantic import field_validator
from sqlmodel import Field, SQLModel

from wannago.models.base import TimestampMixin, blank_to_none, new_uuid, strip_text


class Theme(TimestampMixin, SQLModel, table=True):
    __tablename__ = "themes"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    group_id: str = Field(foreign_key="groups.id", nullable=False, index=True)

    name: str = Field(max_length=50, nullable=False)
    icon: str | None = Field(default=None, max_length=10)


class BookmarkTheme(SQLModel, table=True):
    """Many-to-many link between bookmarks and themes."""
    __tablename__ = "bookmark_themes"

    bookmark_id: uuid.UUID = Field(foreign_key="bookmarks.id", primary_key=True)
    theme_id: uuid.UUID = Field(foreign_key="themes.id", primary_key=True)


# ── Pydantic schemas ─────────────────────────────────────────

class ThemeCreate(SQLModel):
    name: str = Field(min_length=1, max_length=50)
    icon: str | None = Field(default=None, max_length=10)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: object) -> object:
        return strip_text(value)

    @field_validator("icon", mode="before")
    @classmethod
    def normalize_icon(cls, value: object) -> object:
        return blank_to_none(value)


class ThemeUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    icon: str | None = Field(default=None, max_length=10)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: object) -> object:
        return strip_text(value)

    @field_validator("icon", mode="before")
    @classmethod
    def normalize_icon(cls, value: object) -> object:
        return blank_to_none(value)


class ThemeSummary(SQLModel):
    """Compact theme shape embedded in bookmark responses."""
    id: uuid.UUID
    name: str
    icon: str | None


class ThemeRead(SQLModel):
    id: uuid.UUID
    group_id: str
    name: str
    icon: str | None
    bookmark_count: int = 0
    created_at: datetime
    updated_at: datetime
