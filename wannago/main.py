"""FastAPI application entrypoint."""

import asyncio
import contextlib
import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wannago.api.v1 import v1_router
from wannago.core.cache import TTLCache, run_periodic_cleanup
from wannago.core.config import Settings, get_settings
from wannago.core.database import init_db
from wannago.core.errors import register_error_handlers

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """JSON-ish lines in production, human-readable locally."""
    if settings.is_production:
        fmt = '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}'
    else:
        fmt = "%(levelname)s %(name)s: %(message)s"
    logging.basicConfig(level=settings.log_level.upper(), format=fmt, stream=sys.stdout)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup: ensure tables exist, start the cache sweeper
    await init_db()
    sweeper = asyncio.create_task(
        run_periodic_cleanup(
            app.state.cache, get_settings().cache_cleanup_interval_seconds
        )
    )
    logger.info("wanna-go started")
    yield
    # Shutdown: stop the sweeper
    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="wanna-go",
        version="0.1.0",
        description="Shared bookmarks for places a group wants to go",
        lifespan=lifespan,
    )

    # One cache per process, handed to routes through the CacheDep dependency
    app.state.cache = TTLCache()

    # ── CORS ─────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # ── API routes ───────────────────────────────────────────
    app.include_router(v1_router)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
