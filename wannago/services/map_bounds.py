"""Map viewport computation: fit every located bookmark on screen."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

# Centroid of Japan, used when nothing has coordinates
DEFAULT_CENTER = (36.2048, 138.2529)
DEFAULT_ZOOM = 5

FINEST_ZOOM = 15

# Fraction of each axis span added on every side, and its lower bound in degrees
MARGIN_RATIO = 0.1
MARGIN_FLOOR = 0.01

# (minimum padded span in degrees, zoom), coarsest first
ZOOM_STEPS: tuple[tuple[float, int], ...] = (
    (10, 6),
    (5, 7),
    (2, 8),
    (1, 9),
    (0.5, 10),
    (0.2, 11),
    (0.1, 12),
    (0.05, 13),
    (0.02, 14),
)


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Viewport:
    """Map centre, zoom level and the padded box the zoom was chosen for."""
    center: GeoPoint
    zoom: int
    north: float
    south: float
    east: float
    west: float


def _coordinates(point: Any) -> tuple[float | None, float | None]:
    if isinstance(point, Mapping):
        return point.get("latitude"), point.get("longitude")
    return getattr(point, "latitude", None), getattr(point, "longitude", None)


def zoom_for_span(max_diff: float) -> int:
    """Map the largest padded span (degrees) to a discrete zoom level."""
    for threshold, zoom in ZOOM_STEPS:
        if max_diff >= threshold:
            return zoom
    return FINEST_ZOOM


def compute_bounds(points: Iterable[Any]) -> Viewport | None:
    """Compute a viewport showing every point that has both coordinates.

    Points may be objects or mappings exposing ``latitude``/``longitude``.
    Returns None when no point is located; the caller picks a fallback.
    Planar arithmetic only, so it assumes the points do not straddle the
    antimeridian.
    """
    located = []
    for point in points:
        lat, lng = _coordinates(point)
        if lat is not None and lng is not None:
            located.append((float(lat), float(lng)))

    if not located:
        return None

    if len(located) == 1:
        lat, lng = located[0]
        return Viewport(
            center=GeoPoint(lat, lng),
            zoom=FINEST_ZOOM,
            north=lat,
            south=lat,
            east=lng,
            west=lng,
        )

    lats = [lat for lat, _ in located]
    lngs = [lng for _, lng in located]
    min_lat, max_lat = min(lats), max(lats)
    min_lng, max_lng = min(lngs), max(lngs)

    lat_margin = max((max_lat - min_lat) * MARGIN_RATIO, MARGIN_FLOOR)
    lng_margin = max((max_lng - min_lng) * MARGIN_RATIO, MARGIN_FLOOR)

    north = max_lat + lat_margin
    south = min_lat - lat_margin
    east = max_lng + lng_margin
    west = min_lng - lng_margin

    max_diff = max(north - south, east - west)
    return Viewport(
        center=GeoPoint((north + south) / 2, (east + west) / 2),
        zoom=zoom_for_span(max_diff),
        north=north,
        south=south,
        east=east,
        west=west,
    )
