"""Shared Redis pool and the JSON cache used for gate read models."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, TypeVar

import redis.asyncio as redis
from pydantic import BaseModel

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

redis_pool: redis.Redis | None = None


async def init_redis(url: str) -> None:
    global redis_pool
    redis_pool = redis.from_url(url, decode_responses=True)
    logger.info("Redis pool initialised: %s", url)


async def close_redis() -> None:
    global redis_pool
    if redis_pool is not None:
        await redis_pool.aclose()
        redis_pool = None
        logger.info("Redis pool closed")


async def get_redis_pool() -> redis.Redis:
    """Return the active Redis connection (raises if not initialised)."""
    if redis_pool is None:
        msg = "Redis pool has not been initialised"
        raise RuntimeError(msg)
    return redis_pool


async def cache_get(key: str) -> Any | None:
    pool = await get_redis_pool()
    raw = await pool.get(key)
    return None if raw is None else json.loads(raw)


async def cache_set(key: str, value: Any, ttl: int) -> None:
    pool = await get_redis_pool()
    await pool.set(key, json.dumps(value, default=str), ex=ttl)


M = TypeVar("M", bound=BaseModel)


async def cached_model(
    key: str,
    model: type[M],
    ttl: int,
    load: Callable[[], Awaitable[M]],
) -> M:
    """Read-through cache for a response model.

    On a miss *load* builds the model, which is stored as JSON for *ttl* seconds.
    """
    cached = await cache_get(key)
    if cached is not None:
        return model.model_validate(cached)
    value = await load()
    await cache_set(key, value.model_dump(mode="json"), ttl)
    return value


async def cache_invalidate(prefix: str) -> int:
    """Delete every key under *prefix*; returns the number removed."""
    pool = await get_redis_pool()
    keys = [key async for key in pool.scan_iter(match=f"{prefix}*")]
    if not keys:
        return 0
    removed = await pool.delete(*keys)
    logger.debug("Invalidated %d cache key(s) under %s", removed, prefix)
    return removed
