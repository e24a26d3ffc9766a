"""Map endpoint: located bookmarks as markers plus a viewport that fits them."""

import uuid

from fastapi import APIRouter
from pydantic import BaseModel
from sqlmodel import col, select

from wannago.api.deps import CurrentGroup, Session
from wannago.models.bookmark import CATEGORY_PIN_EMOJIS, Bookmark, Category
from wannago.services.map_bounds import DEFAULT_CENTER, DEFAULT_ZOOM, compute_bounds

router = APIRouter(prefix="/groups/{group_id}/map", tags=["map"])


# ── Schemas ──────────────────────────────────────────────────

class LatLng(BaseModel):
    latitude: float
    longitude: float


class MapMarker(BaseModel):
    bookmark_id: uuid.UUID
    title: str
    category: Category
    pin: str
    visited: bool
    latitude: float
    longitude: float


class MapView(BaseModel):
    center: LatLng
    zoom: int
    is_fallback: bool
    markers: list[MapMarker]


# ── Routes ───────────────────────────────────────────────────

@router.get("", response_model=MapView)
async def get_map_view(group: CurrentGroup, session: Session) -> MapView:
    """Markers for every bookmark with coordinates, and where to point the map."""
    stmt = (
        select(Bookmark)
        .where(
            Bookmark.group_id == group.id,
            col(Bookmark.latitude).is_not(None),
            col(Bookmark.longitude).is_not(None),
        )
        .order_by(col(Bookmark.priority).desc(), col(Bookmark.created_at).desc())
    )
    bookmarks = list((await session.execute(stmt)).scalars().all())

    markers = [
        MapMarker(
            bookmark_id=b.id,
            title=b.title,
            category=b.category,
            pin=CATEGORY_PIN_EMOJIS[b.category],
            visited=b.visited,
            latitude=b.latitude,
            longitude=b.longitude,
        )
        for b in bookmarks
    ]

    viewport = compute_bounds(bookmarks)
    if viewport is None:
        lat, lng = DEFAULT_CENTER
        return MapView(
            center=LatLng(latitude=lat, longitude=lng),
            zoom=DEFAULT_ZOOM,
            is_fallback=True,
            markers=markers,
        )

    return MapView(
        center=LatLng(latitude=viewport.center.latitude, longitude=viewport.center.longitude),
        zoom=viewport.zoom,
        is_fallback=False,
        markers=markers,
    )
