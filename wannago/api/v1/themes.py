"""Theme CRUD and theme bookmark listing: scoped to the group in the path."""

import uuid

from fastapi import APIRouter, status

from wannago.api.deps import CacheDep, CurrentGroup, Session
from wannago.models.bookmark import BookmarkRead
from wannago.models.theme import ThemeCreate, ThemeRead, ThemeUpdate
from wannago.services import bookmarks as bookmark_service
from wannago.services import themes as theme_service

router = APIRouter(prefix="/groups/{group_id}/themes", tags=["themes"])


@router.get("", response_model=list[ThemeRead])
async def list_themes(group: CurrentGroup, session: Session) -> list[ThemeRead]:
    return await theme_service.list_themes(session, group.id)


@router.post("", response_model=ThemeRead, status_code=status.HTTP_201_CREATED)
async def create_theme(
    group: CurrentGroup,
    body: ThemeCreate,
    session: Session,
) -> ThemeRead:
    return await theme_service.create_theme(session, group.id, body)


@router.get("/{theme_id}", response_model=ThemeRead)
async def get_theme(
    group: CurrentGroup,
    theme_id: uuid.UUID,
    session: Session,
) -> ThemeRead:
    return await theme_service.get_theme(session, group.id, theme_id)


@router.patch("/{theme_id}", response_model=ThemeRead)
async def update_theme(
    group: CurrentGroup,
    theme_id: uuid.UUID,
    body: ThemeUpdate,
    session: Session,
    cache: CacheDep,
) -> ThemeRead:
    return await theme_service.update_theme(session, cache, group.id, theme_id, body)


@router.delete("/{theme_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_theme(
    group: CurrentGroup,
    theme_id: uuid.UUID,
    session: Session,
    cache: CacheDep,
) -> None:
    await theme_service.delete_theme(session, cache, group.id, theme_id)


@router.get("/{theme_id}/bookmarks", response_model=list[BookmarkRead])
async def list_theme_bookmarks(
    group: CurrentGroup,
    theme_id: uuid.UUID,
    session: Session,
) -> list[BookmarkRead]:
    return await bookmark_service.list_theme_bookmarks(session, group.id, theme_id)
