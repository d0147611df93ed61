"""Per-client request throttling on a Redis sorted-set sliding window."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import jwt
import redis.asyncio as aioredis
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from agms_api.config import settings

if TYPE_CHECKING:
    from collections.abc import Iterable

    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60.0
KEY_PREFIX = "agms:rate_limit:"


def client_identifier(request: Request) -> str:
    """Authenticated operators are throttled per account, everyone else per IP."""
    auth = request.headers.get("authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() == "bearer" and token:
        try:
            claims = jwt.decode(
                token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
            )
        except jwt.InvalidTokenError:
            claims = {}
        if subject := claims.get("sub"):
            return f"user:{subject}"

    if forwarded := request.headers.get("x-forwarded-for"):
        return f"ip:{forwarded.split(',')[0].strip()}"
    if request.client is not None:
        return f"ip:{request.client.host}"
    return "ip:unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients exceeding ``requests_per_minute`` with 429."""

    def __init__(
        self,
        app: ASGIApp,
        redis_url: str | None = None,
        requests_per_minute: int | None = None,
        exempt_paths: Iterable[str] = ("/api/v1/health",),
    ) -> None:
        super().__init__(app)
        self._redis_url = redis_url or settings.redis_url
        self._limit = requests_per_minute or settings.rate_limit_per_minute
        self._exempt = frozenset(exempt_paths)
        self._redis: aioredis.Redis | None = None

    async def _connection(self) -> aioredis.Redis:
        if self._redis is None:
            self._redis = aioredis.from_url(self._redis_url, decode_responses=True)
        return self._redis

    async def _hits_in_window(self, identifier: str) -> int:
        """Record this hit and return how many preceded it inside the window."""
        key = f"{KEY_PREFIX}{identifier}"
        now = time.time()
        pipe = (await self._connection()).pipeline()
        pipe.zremrangebyscore(key, "-inf", now - WINDOW_SECONDS)
        pipe.zcard(key)
        pipe.zadd(key, {str(now): now})
        pipe.expire(key, int(WINDOW_SECONDS * 2))
        _, count, _, _ = await pipe.execute()
        return count

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in self._exempt:
            return await call_next(request)

        identifier = client_identifier(request)
        hits = await self._hits_in_window(identifier)
        remaining = max(self._limit - hits - 1, 0)

        if hits >= self._limit:
            logger.warning("Rate limit exceeded for %s (%d hits)", identifier, hits)
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded. Try again later."},
                headers={"Retry-After": str(int(WINDOW_SECONDS))},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self._limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
