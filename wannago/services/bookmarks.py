"""Bookmark workflows: filtered listing with stats, writes and visit tracking.

Only the unfiltered listing of a group is cached; every write to a group's
bookmarks drops that entry so the next read sees the change.
"""

import logging
import uuid

from sqlalchemy import case, delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from wannago.core.cache import TTLCache, generate_cache_key
from wannago.core.config import get_settings
from wannago.core.errors import BookmarkNotFoundError
from wannago.models.base import blank_to_none, utcnow
from wannago.models.bookmark import (
    Bookmark,
    BookmarkCreate,
    BookmarkList,
    BookmarkRead,
    BookmarkStats,
    BookmarkUpdate,
    Category,
)
from wannago.models.theme import BookmarkTheme, ThemeSummary
from wannago.services import themes as theme_service
from wannago.services.url_metadata import MAX_TITLE_LENGTH, fetch_url_metadata

logger = logging.getLogger(__name__)

ALL = "all"


def bookmarks_cache_key(group_id: str) -> str:
    return generate_cache_key("bookmarks", group_id)


def _to_read(bookmark: Bookmark, themes: list[ThemeSummary] | None = None) -> BookmarkRead:
    return BookmarkRead(**bookmark.model_dump(), themes=themes or [])


async def _with_themes(session: AsyncSession, bookmarks: list[Bookmark]) -> list[BookmarkRead]:
    summaries = await theme_service.theme_summaries_for(session, [b.id for b in bookmarks])
    return [_to_read(b, summaries.get(b.id)) for b in bookmarks]


async def get_bookmark_or_404(
    session: AsyncSession,
    group_id: str,
    bookmark_id: uuid.UUID,
) -> Bookmark:
    stmt = select(Bookmark).where(Bookmark.id == bookmark_id, Bookmark.group_id == group_id)
    bookmark = (await session.execute(stmt)).scalar_one_or_none()
    if bookmark is None:
        raise BookmarkNotFoundError(bookmark_id)
    return bookmark


async def get_bookmark(
    session: AsyncSession,
    group_id: str,
    bookmark_id: uuid.UUID,
) -> BookmarkRead:
    bookmark = await get_bookmark_or_404(session, group_id, bookmark_id)
    return (await _with_themes(session, [bookmark]))[0]


# ── Listing ──────────────────────────────────────────────────

async def _group_stats(session: AsyncSession, group_id: str) -> BookmarkStats:
    stmt = select(
        func.count(),
        func.sum(case((col(Bookmark.visited).is_(True), 1), else_=0)),
        func.avg(Bookmark.priority),
    ).where(Bookmark.group_id == group_id)
    total, visited, avg_priority = (await session.execute(stmt)).one()
    visited = visited or 0
    return BookmarkStats(
        total_count=total,
        visited_count=visited,
        unvisited_count=total - visited,
        avg_priority=round(float(avg_priority), 1) if avg_priority is not None else 0.0,
    )


async def _query_bookmarks(
    session: AsyncSession,
    group_id: str,
    category: Category | None,
    visited: bool | None,
    search: str | None,
) -> BookmarkList:
    stmt = select(Bookmark).where(Bookmark.group_id == group_id)
    if category is not None:
        stmt = stmt.where(Bookmark.category == category)
    if visited is not None:
        stmt = stmt.where(Bookmark.visited == visited)
    if search:
        stmt = stmt.where(
            or_(
                col(Bookmark.title).icontains(search, autoescape=True),
                col(Bookmark.memo).icontains(search, autoescape=True),
                col(Bookmark.address).icontains(search, autoescape=True),
            )
        )
    stmt = stmt.order_by(col(Bookmark.priority).desc(), col(Bookmark.created_at).desc())

    rows = list((await session.execute(stmt)).scalars().all())
    bookmarks = await _with_themes(session, rows)
    return BookmarkList(
        bookmarks=bookmarks,
        total=len(bookmarks),
        stats=await _group_stats(session, group_id),
    )


async def list_bookmarks(
    session: AsyncSession,
    cache: TTLCache,
    group_id: str,
    *,
    category: str | None = None,
    visited: str | None = None,
    search: str | None = None,
) -> BookmarkList:
    """List a group's bookmarks, highest priority and newest first.

    ``category`` and ``visited`` accept ``"all"`` (or None) for no filter;
    ``visited`` is otherwise ``"true"`` or ``"false"``. ``search`` matches a
    case-insensitive substring of title, memo or address. Stats always
    cover the whole group.
    """
    category_filter = None if category in (None, ALL) else Category(category)
    visited_filter = None if visited in (None, ALL) else visited == "true"
    search = (search or "").strip() or None

    if category_filter is None and visited_filter is None and search is None:
        return await cache.get_or_set(
            bookmarks_cache_key(group_id),
            lambda: _query_bookmarks(session, group_id, None, None, None),
            get_settings().bookmarks_cache_ttl_ms,
        )

    return await _query_bookmarks(session, group_id, category_filter, visited_filter, search)


async def list_theme_bookmarks(
    session: AsyncSession,
    group_id: str,
    theme_id: uuid.UUID,
) -> list[BookmarkRead]:
    """Bookmarks filed under a theme, newest first, each with all its themes."""
    await theme_service.get_theme_or_404(session, group_id, theme_id)
    stmt = (
        select(Bookmark)
        .join(BookmarkTheme, col(BookmarkTheme.bookmark_id) == col(Bookmark.id))
        .where(BookmarkTheme.theme_id == theme_id)
        .order_by(col(Bookmark.created_at).desc())
    )
    rows = list((await session.execute(stmt)).scalars().all())
    return await _with_themes(session, rows)


# ── Writes ───────────────────────────────────────────────────

async def create_bookmark(
    session: AsyncSession,
    cache: TTLCache,
    group_id: str,
    body: BookmarkCreate,
) -> BookmarkRead:
    bookmark = Bookmark(group_id=group_id, **body.model_dump(exclude={"theme_ids"}))
    session.add(bookmark)
    await session.flush()

    if body.theme_ids:
        await theme_service.set_bookmark_themes(session, group_id, bookmark.id, body.theme_ids)

    await session.commit()
    await session.refresh(bookmark)
    cache.delete(bookmarks_cache_key(group_id))
    return await get_bookmark(session, group_id, bookmark.id)


def _apply_visited(bookmark: Bookmark, visited: bool) -> None:
    if visited and not bookmark.visited:
        bookmark.visited_at = utcnow()
    elif not visited:
        bookmark.visited_at = None
    bookmark.visited = visited


async def update_bookmark(
    session: AsyncSession,
    cache: TTLCache,
    group_id: str,
    bookmark_id: uuid.UUID,
    body: BookmarkUpdate,
) -> BookmarkRead:
    bookmark = await get_bookmark_or_404(session, group_id, bookmark_id)

    update_data = body.model_dump(exclude_unset=True)
    theme_ids = update_data.pop("theme_ids", None)
    visited = update_data.pop("visited", None)

    for field, value in update_data.items():
        # Required columns cannot be cleared
        if value is None and field in ("title", "url", "category", "priority"):
            continue
        setattr(bookmark, field, value)

    if visited is not None:
        _apply_visited(bookmark, visited)

    if theme_ids is not None:
        await theme_service.set_bookmark_themes(session, group_id, bookmark.id, theme_ids)

    bookmark.updated_at = utcnow()
    session.add(bookmark)
    await session.commit()
    await session.refresh(bookmark)

    cache.delete(bookmarks_cache_key(group_id))
    return await get_bookmark(session, group_id, bookmark.id)


async def set_visited(
    session: AsyncSession,
    cache: TTLCache,
    group_id: str,
    bookmark_id: uuid.UUID,
    visited: bool,
) -> BookmarkRead:
    bookmark = await get_bookmark_or_404(session, group_id, bookmark_id)
    _apply_visited(bookmark, visited)
    bookmark.updated_at = utcnow()
    session.add(bookmark)
    await session.commit()
    await session.refresh(bookmark)

    cache.delete(bookmarks_cache_key(group_id))
    return await get_bookmark(session, group_id, bookmark.id)


async def replace_themes(
    session: AsyncSession,
    cache: TTLCache,
    group_id: str,
    bookmark_id: uuid.UUID,
    theme_ids: list[uuid.UUID],
) -> BookmarkRead:
    bookmark = await get_bookmark_or_404(session, group_id, bookmark_id)
    await theme_service.set_bookmark_themes(session, group_id, bookmark.id, theme_ids)
    await session.commit()

    cache.delete(bookmarks_cache_key(group_id))
    return await get_bookmark(session, group_id, bookmark.id)


async def refresh_metadata(
    session: AsyncSession,
    cache: TTLCache,
    group_id: str,
    bookmark_id: uuid.UUID,
) -> BookmarkRead:
    """Re-fetch the bookmark's page and store its title/description/image/site name.

    A failed fetch leaves the stored metadata untouched.
    """
    bookmark = await get_bookmark_or_404(session, group_id, bookmark_id)
    metadata = await fetch_url_metadata(bookmark.url)
    if not metadata.success:
        logger.info("Keeping previous metadata for bookmark %s", bookmark.id)
        return await get_bookmark(session, group_id, bookmark.id)

    bookmark.auto_title = blank_to_none(metadata.title[:MAX_TITLE_LENGTH])
    bookmark.auto_description = blank_to_none(metadata.description)
    bookmark.auto_image_url = blank_to_none(metadata.image)
    bookmark.auto_site_name = blank_to_none(metadata.site_name)
    bookmark.updated_at = utcnow()
    session.add(bookmark)
    await session.commit()
    await session.refresh(bookmark)

    cache.delete(bookmarks_cache_key(group_id))
    return await get_bookmark(session, group_id, bookmark.id)


async def delete_bookmark(
    session: AsyncSession,
    cache: TTLCache,
    group_id: str,
    bookmark_id: uuid.UUID,
) -> None:
    bookmark = await get_bookmark_or_404(session, group_id, bookmark_id)
    await session.execute(
        delete(BookmarkTheme).where(col(BookmarkTheme.bookmark_id) == bookmark.id)
    )
    await session.delete(bookmark)
    await session.commit()
    cache.delete(bookmarks_cache_key(group_id))
