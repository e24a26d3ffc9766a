"""Google Places text search: turns a free-text query into place candidates."""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel

from wannago.core.cache import TTLCache, generate_cache_key
from wannago.core.config import get_settings
from wannago.core.errors import PlacesNotConfiguredError, PlacesSearchError

logger = logging.getLogger(__name__)

TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
MAX_RESULTS = 5

# Upstream statuses that are answers rather than failures
_ANSWER_STATUSES = frozenset({"OK", "ZERO_RESULTS"})


class PlaceCandidate(BaseModel):
    place_id: str
    name: str
    formatted_address: str
    latitude: float
    longitude: float


def _normalize_query(query: str) -> str:
    return " ".join(query.split()).lower()


async def _text_search(query: str, api_key: str) -> list[PlaceCandidate]:
    params = {"query": query, "language": "ja", "region": "jp", "key": api_key}
    try:
        async with httpx.AsyncClient(timeout=10) as client:
            response = await client.get(TEXT_SEARCH_URL, params=params)
            response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning("Places request failed for %r: %s", query, exc)
        raise PlacesSearchError("upstream request failed") from exc

    try:
        data = response.json()
    except ValueError as exc:
        logger.warning("Places search for %r returned a non-JSON body", query)
        raise PlacesSearchError("malformed upstream response") from exc
    if not isinstance(data, dict):
        raise PlacesSearchError("malformed upstream response")

    status = data.get("status", "UNKNOWN_ERROR")
    if status not in _ANSWER_STATUSES:
        logger.warning("Places search for %r returned %s", query, status)
        raise PlacesSearchError(status)

    candidates: list[PlaceCandidate] = []
    for result in data.get("results") or []:
        if not isinstance(result, dict):
            continue
        location = (result.get("geometry") or {}).get("location") or {}
        if not result.get("place_id") or "lat" not in location or "lng" not in location:
            # Unusable without an id and coordinates
            logger.debug("Skipping incomplete place result for %r: %s", query, result)
            continue
        candidates.append(
            PlaceCandidate(
                place_id=result["place_id"],
                name=result.get("name", ""),
                formatted_address=result.get("formatted_address", ""),
                latitude=location["lat"],
                longitude=location["lng"],
            )
        )
        if len(candidates) == MAX_RESULTS:
            break
    return candidates


async def search_places(cache: TTLCache, query: str) -> list[PlaceCandidate]:
    """Search places for ``query``; answers are cached, failures are not.

    The query is normalized (case and whitespace) before it is sent, so
    queries sharing a cache entry also share the upstream request.
    """
    settings = get_settings()
    if not settings.google_maps_api_key:
        raise PlacesNotConfiguredError()

    query = _normalize_query(query)
    return await cache.get_or_set(
        generate_cache_key("places", query),
        lambda: _text_search(query, settings.google_maps_api_key),
        settings.places_cache_ttl_ms,
    )
