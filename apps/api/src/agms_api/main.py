"""FastAPI application factory."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from agms_api.config import settings

# Propagate DB URL so agms_db.database picks it up via os.getenv.
os.environ.setdefault("DATABASE_URL", settings.database_url)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agms_api.cache.redis_client import close_redis, init_redis
from agms_api.middleware.rate_limit import RateLimitMiddleware
from agms_api.routers import (
    admin,
    aircraft,
    assignments,
    auth,
    flights,
    gates,
    operations,
    users,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage startup / shutdown resources."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    await init_redis(settings.redis_url)
    logger.info("AGMS API started")
    yield
    await close_redis()


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    app = FastAPI(
        title="Airport Gate Management System API",
        version="0.1.0",
        lifespan=_lifespan,
    )

    # Middleware (order matters: last added = first executed)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if settings.rate_limit_per_minute > 0:
        app.add_middleware(
            RateLimitMiddleware,
            redis_url=settings.redis_url,
            requests_per_minute=settings.rate_limit_per_minute,
        )

    _prefix = "/api/v1"
    app.include_router(auth.router, prefix=_prefix)
    app.include_router(users.router, prefix=_prefix)
    app.include_router(admin.router, prefix=_prefix)
    app.include_router(gates.router, prefix=_prefix)
    app.include_router(assignments.router, prefix=_prefix)
    app.include_router(flights.router, prefix=_prefix)
    app.include_router(aircraft.router, prefix=_prefix)
    app.include_router(operations.router, prefix=_prefix)

    return app


app = create_app()
