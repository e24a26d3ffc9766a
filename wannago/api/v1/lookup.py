"""Lookup helpers used while filling in a bookmark."""

from fastapi import APIRouter
from pydantic import BaseModel, Field, field_validator

from wannago.api.deps import CacheDep
from wannago.models.base import strip_text, validate_url
from wannago.models.bookmark import CATEGORY_PIN_EMOJIS, Category
from wannago.services.places import PlaceCandidate, search_places
from wannago.services.url_metadata import UrlMetadata, fetch_url_metadata

router = APIRouter(tags=["lookup"])


# ── Schemas ──────────────────────────────────────────────────

class UrlMetadataRequest(BaseModel):
    url: str

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        return validate_url(value)


class PlacesSearchRequest(BaseModel):
    query: str = Field(min_length=1, max_length=200)

    @field_validator("query", mode="before")
    @classmethod
    def strip_query(cls, value: object) -> object:
        return strip_text(value)


class PlacesSearchResponse(BaseModel):
    success: bool
    results: list[PlaceCandidate]


class CategoryInfo(BaseModel):
    value: Category
    pin: str


# ── Routes ───────────────────────────────────────────────────

@router.post("/url-metadata", response_model=UrlMetadata)
async def get_url_metadata(body: UrlMetadataRequest) -> UrlMetadata:
    """Fetch title, description, image and favicon for a page.

    Fetch failures come back as ``success: false`` rather than an HTTP error.
    """
    return await fetch_url_metadata(body.url)


@router.post("/places/search", response_model=PlacesSearchResponse)
async def places_search(body: PlacesSearchRequest, cache: CacheDep) -> PlacesSearchResponse:
    results = await search_places(cache, body.query)
    return PlacesSearchResponse(success=True, results=results)


@router.get("/categories", response_model=list[CategoryInfo])
async def list_categories() -> list[CategoryInfo]:
    return [CategoryInfo(value=c, pin=CATEGORY_PIN_EMOJIS[c]) for c in Category]
