"""Bookmark endpoints: all scoped to the group in the path."""

import uuid

from fastapi import APIRouter, Query, status

from wannago.api.deps import CacheDep, CurrentGroup, Session
from wannago.models.bookmark import (
    BookmarkCreate,
    BookmarkList,
    BookmarkRead,
    BookmarkThemesUpdate,
    BookmarkUpdate,
    Category,
    VisitedUpdate,
)
from wannago.services import bookmarks as bookmark_service

router = APIRouter(prefix="/groups/{group_id}/bookmarks", tags=["bookmarks"])

_CATEGORY_FILTER = "^(all|" + "|".join(c.value for c in Category) + ")$"


@router.get("", response_model=BookmarkList)
async def list_bookmarks(
    group: CurrentGroup,
    session: Session,
    cache: CacheDep,
    category: str | None = Query(default=None, pattern=_CATEGORY_FILTER),
    visited: str | None = Query(default=None, pattern="^(all|true|false)$"),
    search: str | None = Query(default=None, max_length=200),
) -> BookmarkList:
    return await bookmark_service.list_bookmarks(
        session,
        cache,
        group.id,
        category=category,
        visited=visited,
        search=search,
    )


@router.post("", response_model=BookmarkRead, status_code=status.HTTP_201_CREATED)
async def create_bookmark(
    group: CurrentGroup,
    body: BookmarkCreate,
    session: Session,
    cache: CacheDep,
) -> BookmarkRead:
    return await bookmark_service.create_bookmark(session, cache, group.id, body)


@router.get("/{bookmark_id}", response_model=BookmarkRead)
async def get_bookmark(
    group: CurrentGroup,
    bookmark_id: uuid.UUID,
    session: Session,
) -> BookmarkRead:
    return await bookmark_service.get_bookmark(session, group.id, bookmark_id)


@router.patch("/{bookmark_id}", response_model=BookmarkRead)
async def update_bookmark(
    group: CurrentGroup,
    bookmark_id: uuid.UUID,
    body: BookmarkUpdate,
    session: Session,
    cache: CacheDep,
) -> BookmarkRead:
    return await bookmark_service.update_bookmark(session, cache, group.id, bookmark_id, body)


@router.post("/{bookmark_id}/visited", response_model=BookmarkRead)
async def set_visited(
    group: CurrentGroup,
    bookmark_id: uuid.UUID,
    body: VisitedUpdate,
    session: Session,
    cache: CacheDep,
) -> BookmarkRead:
    return await bookmark_service.set_visited(
        session, cache, group.id, bookmark_id, body.visited
    )


@router.put("/{bookmark_id}/themes", response_model=BookmarkRead)
async def replace_bookmark_themes(
    group: CurrentGroup,
    bookmark_id: uuid.UUID,
    body: BookmarkThemesUpdate,
    session: Session,
    cache: CacheDep,
) -> BookmarkRead:
    return await bookmark_service.replace_themes(
        session, cache, group.id, bookmark_id, body.theme_ids
    )


@router.post("/{bookmark_id}/refresh-metadata", response_model=BookmarkRead)
async def refresh_bookmark_metadata(
    group: CurrentGroup,
    bookmark_id: uuid.UUID,
    session: Session,
    cache: CacheDep,
) -> BookmarkRead:
    """Re-fetch the page behind the bookmark's URL and store its metadata."""
    return await bookmark_service.refresh_metadata(session, cache, group.id, bookmark_id)


@router.delete("/{bookmark_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bookmark(
    group: CurrentGroup,
    bookmark_id: uuid.UUID,
    session: Session,
    cache: CacheDep,
) -> None:
    await bookmark_service.delete_bookmark(session, cache, group.id, bookmark_id)
