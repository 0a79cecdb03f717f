"""Redis connection and pub/sub publishing for ticket events.

Redis only carries notifications for supervisor dashboards. Balances, limits
and idempotency keys live in PostgreSQL, so losing Redis never loses a sale.
"""

import json
from typing import Any

import redis.asyncio as aioredis

from config.settings import settings

_redis_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT_S,
        )
    return _redis_pool


async def publish_json(channel: str, payload: dict[str, Any]) -> int:
    """Publish `payload` as compact JSON; returns the number of subscribers reached."""
    redis = await get_redis()
    return await redis.publish(channel, json.dumps(payload, separators=(",", ":")))


async def close_redis() -> None:
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None
