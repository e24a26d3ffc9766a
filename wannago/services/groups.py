"""Group workflows."""

import secrets

from sqlalchemy.ext.asyncio import AsyncSession

from wannago.core.cache import TTLCache, generate_cache_key
from wannago.core.config import get_settings
from wannago.core.errors import DuplicateGroupIdError, GroupNotFoundError, InvalidGroupIdError
from wannago.models.base import utcnow
from wannago.models.group import (
    GROUP_ID_ALPHABET,
    GROUP_ID_LENGTH,
    GROUP_ID_RE,
    Group,
    GroupCreate,
    GroupRead,
    GroupUpdate,
)

MAX_ID_ATTEMPTS = 10


def group_cache_key(group_id: str) -> str:
    return generate_cache_key("group", group_id)


def generate_group_id() -> str:
    return "".join(secrets.choice(GROUP_ID_ALPHABET) for _ in range(GROUP_ID_LENGTH))


def validate_group_id(group_id: str) -> str:
    if not GROUP_ID_RE.match(group_id):
        raise InvalidGroupIdError(group_id)
    return group_id


async def is_group_id_available(session: AsyncSession, group_id: str) -> bool:
    return await session.get(Group, group_id) is None


async def generate_unique_group_id(session: AsyncSession) -> str:
    """Draw random ids until one is free, giving up after MAX_ID_ATTEMPTS."""
    candidate = ""
    for _ in range(MAX_ID_ATTEMPTS):
        candidate = generate_group_id()
        if await is_group_id_available(session, candidate):
            return candidate
    raise DuplicateGroupIdError(candidate)


async def create_group(session: AsyncSession, body: GroupCreate) -> GroupRead:
    if body.id is not None:
        group_id = validate_group_id(body.id)
        if not await is_group_id_available(session, group_id):
            raise DuplicateGroupIdError(group_id)
    else:
        group_id = await generate_unique_group_id(session)

    group = Group(id=group_id, name=body.name, description=body.description)
    session.add(group)
    await session.commit()
    await session.refresh(group)
    return GroupRead.model_validate(group)


async def get_group(session: AsyncSession, cache: TTLCache, group_id: str) -> GroupRead:
    """Return the group, served from cache for a short window.

    A missing group raises GroupNotFoundError and is not cached.
    """

    async def _load() -> GroupRead:
        group = await session.get(Group, group_id)
        if group is None:
            raise GroupNotFoundError(group_id)
        return GroupRead.model_validate(group)

    return await cache.get_or_set(
        group_cache_key(group_id), _load, get_settings().group_cache_ttl_ms
    )


async def update_group(
    session: AsyncSession,
    cache: TTLCache,
    group_id: str,
    body: GroupUpdate,
) -> GroupRead:
    group = await session.get(Group, group_id)
    if group is None:
        raise GroupNotFoundError(group_id)

    for field, value in body.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            continue
        setattr(group, field, value)

    group.updated_at = utcnow()
    session.add(group)
    await session.commit()
    await session.refresh(group)

    cache.delete(group_cache_key(group_id))
    return GroupRead.model_validate(group)
