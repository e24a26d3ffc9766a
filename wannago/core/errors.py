"""Domain exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class WannaGoError(Exception):
    """Base exception carrying the HTTP status it maps to."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        super().__init__(message)
        self.status_code = status_code


class GroupNotFoundError(WannaGoError):
    def __init__(self, group_id: str):
        super().__init__(f"Group not found: {group_id}", status.HTTP_404_NOT_FOUND)
        self.group_id = group_id


class InvalidGroupIdError(WannaGoError):
    def __init__(self, group_id: str):
        super().__init__(f"Invalid group ID format: {group_id}", status.HTTP_400_BAD_REQUEST)
        self.group_id = group_id


class DuplicateGroupIdError(WannaGoError):
    def __init__(self, group_id: str):
        super().__init__(f"Group ID already exists: {group_id}", status.HTTP_409_CONFLICT)
        self.group_id = group_id


class BookmarkNotFoundError(WannaGoError):
    def __init__(self, bookmark_id: object):
        super().__init__(f"Bookmark not found: {bookmark_id}", status.HTTP_404_NOT_FOUND)


class ThemeNotFoundError(WannaGoError):
    def __init__(self, theme_id: object):
        super().__init__(f"Theme not found: {theme_id}", status.HTTP_404_NOT_FOUND)


class PlacesNotConfiguredError(WannaGoError):
    def __init__(self):
        super().__init__(
            "Google Maps API key not configured",
            status.HTTP_503_SERVICE_UNAVAILABLE,
        )


class PlacesSearchError(WannaGoError):
    def __init__(self, reason: str):
        super().__init__(f"Places search failed: {reason}", status.HTTP_502_BAD_GATEWAY)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(WannaGoError)
    async def handle_wannago_error(_request: Request, exc: WannaGoError):
        return JSONResponse({"detail": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"detail": "Internal server error"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
