"""Import all models so SQLModel.metadata picks them up."""

from wannago.models.bookmark import (
    Bookmark,
    BookmarkCreate,
    BookmarkList,
    BookmarkRead,
    BookmarkStats,
    BookmarkThemesUpdate,
    BookmarkUpdate,
    Category,
    VisitedUpdate,
)
from wannago.models.group import Group, GroupCreate, GroupIdAvailability, GroupRead, GroupUpdate
from wannago.models.theme import (
    BookmarkTheme,
    Theme,
    ThemeCreate,
    ThemeRead,
    ThemeSummary,
    ThemeUpdate,
)

__all__ = [
    "Bookmark",
    "BookmarkCreate",
    "BookmarkList",
    "BookmarkRead",
    "BookmarkStats",
    "BookmarkTheme",
    "BookmarkThemesUpdate",
    "BookmarkUpdate",
    "Category",
    "Group",
    "GroupCreate",
    "GroupIdAvailability",
    "GroupRead",
    "GroupUpdate",
    "Theme",
    "ThemeCreate",
    "ThemeRead",
    "ThemeSummary",
    "ThemeUpdate",
    "VisitedUpdate",
]
