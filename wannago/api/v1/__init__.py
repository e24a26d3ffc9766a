"""V1 API router aggregation."""

from fastapi import APIRouter

from wannago.api.v1.bookmarks import router as bookmarks_router
from wannago.api.v1.groups import router as groups_router
from wannago.api.v1.lookup import router as lookup_router
from wannago.api.v1.map import router as map_router
from wannago.api.v1.themes import router as themes_router

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(groups_router)
v1_router.include_router(bookmarks_router)
v1_router.include_router(themes_router)
v1_router.include_router(map_router)
v1_router.include_router(lookup_router)
