"""FastAPI dependencies for sessions, the shared cache and group resolution."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wannago.core.cache import TTLCache
from wannago.core.database import get_session
from wannago.models.group import GroupRead
from wannago.services.groups import get_group


def get_cache(request: Request) -> TTLCache:
    """Return the process-wide cache owned by the application."""
    return request.app.state.cache


# Typed shorthand for use in route signatures
Session = Annotated[AsyncSession, Depends(get_session)]
CacheDep = Annotated[TTLCache, Depends(get_cache)]


async def get_current_group(
    group_id: str,
    session: Session,
    cache: CacheDep,
) -> GroupRead:
    """Resolve the ``{group_id}`` path segment, 404 when it does not exist."""
    return await get_group(session, cache, group_id)


CurrentGroup = Annotated[GroupRead, Depends(get_current_group)]
