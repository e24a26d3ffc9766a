"""Theme workflows: CRUD within a group and bookmark/theme assignment."""

import uuid
from collections import defaultdict

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from wannago.core.cache import TTLCache, generate_cache_key
from wannago.core.errors import ThemeNotFoundError
from wannago.models.base import utcnow
from wannago.models.theme import (
    BookmarkTheme,
    Theme,
    ThemeCreate,
    ThemeRead,
    ThemeSummary,
    ThemeUpdate,
)


def _invalidate_bookmarks(cache: TTLCache, group_id: str) -> None:
    # Bookmark listings embed theme names and icons
    cache.delete(generate_cache_key("bookmarks", group_id))


def _to_read(theme: Theme, bookmark_count: int = 0) -> ThemeRead:
    return ThemeRead(
        id=theme.id,
        group_id=theme.group_id,
        name=theme.name,
        icon=theme.icon,
        bookmark_count=bookmark_count,
        created_at=theme.created_at,
        updated_at=theme.updated_at,
    )


async def _count_bookmarks(session: AsyncSession, theme_id: uuid.UUID) -> int:
    stmt = (
        select(func.count())
        .select_from(BookmarkTheme)
        .where(BookmarkTheme.theme_id == theme_id)
    )
    return (await session.execute(stmt)).scalar_one()


async def get_theme_or_404(
    session: AsyncSession,
    group_id: str,
    theme_id: uuid.UUID,
) -> Theme:
    stmt = select(Theme).where(Theme.id == theme_id, Theme.group_id == group_id)
    theme = (await session.execute(stmt)).scalar_one_or_none()
    if theme is None:
        raise ThemeNotFoundError(theme_id)
    return theme


async def list_themes(session: AsyncSession, group_id: str) -> list[ThemeRead]:
    """Themes of a group, oldest first, with how many bookmarks each holds."""
    stmt = (
        select(Theme, func.count(col(BookmarkTheme.bookmark_id)))
        .outerjoin(BookmarkTheme, col(BookmarkTheme.theme_id) == col(Theme.id))
        .where(Theme.group_id == group_id)
        .group_by(col(Theme.id))
        .order_by(col(Theme.created_at).asc())
    )
    result = await session.execute(stmt)
    return [_to_read(theme, count) for theme, count in result.all()]


async def get_theme(session: AsyncSession, group_id: str, theme_id: uuid.UUID) -> ThemeRead:
    theme = await get_theme_or_404(session, group_id, theme_id)
    return _to_read(theme, await _count_bookmarks(session, theme.id))


async def create_theme(session: AsyncSession, group_id: str, body: ThemeCreate) -> ThemeRead:
    theme = Theme(group_id=group_id, name=body.name, icon=body.icon)
    session.add(theme)
    await session.commit()
    await session.refresh(theme)
    return _to_read(theme)


async def update_theme(
    session: AsyncSession,
    cache: TTLCache,
    group_id: str,
    theme_id: uuid.UUID,
    body: ThemeUpdate,
) -> ThemeRead:
    theme = await get_theme_or_404(session, group_id, theme_id)

    for field, value in body.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            continue
        setattr(theme, field, value)

    theme.updated_at = utcnow()
    session.add(theme)
    await session.commit()
    await session.refresh(theme)

    _invalidate_bookmarks(cache, group_id)
    return _to_read(theme, await _count_bookmarks(session, theme.id))


async def delete_theme(
    session: AsyncSession,
    cache: TTLCache,
    group_id: str,
    theme_id: uuid.UUID,
) -> None:
    theme = await get_theme_or_404(session, group_id, theme_id)
    await session.execute(delete(BookmarkTheme).where(col(BookmarkTheme.theme_id) == theme.id))
    await session.delete(theme)
    await session.commit()
    _invalidate_bookmarks(cache, group_id)


async def theme_summaries_for(
    session: AsyncSession,
    bookmark_ids: list[uuid.UUID],
) -> dict[uuid.UUID, list[ThemeSummary]]:
    """Map each bookmark id to its themes (oldest theme first)."""
    summaries: dict[uuid.UUID, list[ThemeSummary]] = defaultdict(list)
    if not bookmark_ids:
        return summaries

    stmt = (
        select(BookmarkTheme.bookmark_id, Theme)
        .join(Theme, col(Theme.id) == col(BookmarkTheme.theme_id))
        .where(col(BookmarkTheme.bookmark_id).in_(bookmark_ids))
        .order_by(col(Theme.created_at).asc())
    )
    result = await session.execute(stmt)
    for bookmark_id, theme in result.all():
        summaries[bookmark_id].append(
            ThemeSummary(id=theme.id, name=theme.name, icon=theme.icon)
        )
    return summaries


async def set_bookmark_themes(
    session: AsyncSession,
    group_id: str,
    bookmark_id: uuid.UUID,
    theme_ids: list[uuid.UUID],
) -> None:
    """Replace a bookmark's theme links. The caller commits.

    Every theme must belong to ``group_id``.
    """
    wanted = list(dict.fromkeys(theme_ids))
    if wanted:
        stmt = select(Theme.id).where(
            col(Theme.id).in_(wanted),
            Theme.group_id == group_id,
        )
        found = set((await session.execute(stmt)).scalars().all())
        missing = [theme_id for theme_id in wanted if theme_id not in found]
        if missing:
            raise ThemeNotFoundError(missing[0])

    await session.execute(
        delete(BookmarkTheme).where(col(BookmarkTheme.bookmark_id) == bookmark_id)
    )
    for theme_id in wanted:
        session.add(BookmarkTheme(bookmark_id=bookmark_id, theme_id=theme_id))
