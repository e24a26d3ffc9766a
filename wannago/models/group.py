"""Group model: the shared list a set of people collects places into.

A group is addressed only by its 8-character id; whoever knows the id can
read and edit the group.
"""

import re
from datetime import datetime

from pydantic import field_validator
from sqlmodel import Field, SQLModel

from wannago.models.base import TimestampMixin, blank_to_none, strip_text

GROUP_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
GROUP_ID_LENGTH = 8
GROUP_ID_RE = re.compile(r"^[0-9a-z]{8}$")


class Group(TimestampMixin, SQLModel, table=True):
    __tablename__ = "groups"

    id: str = Field(primary_key=True, max_length=GROUP_ID_LENGTH)
    name: str = Field(max_length=100, nullable=False)
    description: str | None = Field(default=None, max_length=1000)


# ── Pydantic schemas ─────────────────────────────────────────

class GroupCreate(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    id: str | None = Field(
        default=None,
        description="Custom 8-character id ([0-9a-z]); generated when omitted",
    )

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: object) -> object:
        return strip_text(value)

    @field_validator("description", "id", mode="before")
    @classmethod
    def normalize_optional(cls, value: object) -> object:
        return blank_to_none(value)


class GroupUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: object) -> object:
        return strip_text(value)

    @field_validator("description", mode="before")
    @classmethod
    def normalize_description(cls, value: object) -> object:
        return blank_to_none(value)


class GroupRead(SQLModel):
    id: str
    name: str
    description: str | None
    created_at: datetime
    updated_at: datetime


class GroupIdAvailability(SQLModel):
    available: bool
    suggested_alternatives: list[str] = Field(default_factory=list)
