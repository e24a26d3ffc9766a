"""Shared base fields and normalizers for all models."""

import uuid
from datetime import datetime, timezone
from urllib.parse import urlparse

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


def strip_text(value: object) -> object:
    """Trim surrounding whitespace from string input, pass anything else through."""
    return value.strip() if isinstance(value, str) else value


def blank_to_none(value: object) -> object:
    """Trim strings and turn empty ones into None."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def validate_url(value: str) -> str:
    """Require a scheme and a host; return the trimmed URL."""
    value = value.strip()
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"Invalid URL format: {value}")
    return value


class TimestampMixin(SQLModel):
    """Created / updated timestamps injected into every table."""

    created_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False
    )
    updated_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False
    )
