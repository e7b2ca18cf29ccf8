"""
Redis client lifecycle.

Redis only holds the per-user generation slot. The API runs without it; in
that case get_redis_optional() returns None and slots are not enforced.
"""

import logging
import time
from typing import Optional

from redis.asyncio import ConnectionPool, Redis

from .config import get_settings

logger = logging.getLogger(__name__)

_pool: Optional[ConnectionPool] = None
_client: Optional[Redis] = None


async def init_redis() -> Redis:
    """Open the pool and verify it with a PING. Raises if Redis is unreachable."""
    global _pool, _client

    settings = get_settings()
    _pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=settings.redis_max_connections,
        decode_responses=True,
    )
    _client = Redis(connection_pool=_pool)

    await _client.ping()
    logger.info(f"Redis connected (max_connections={settings.redis_max_connections})")
    return _client


async def close_redis() -> None:
    """Release the client and pool; a no-op when init_redis never succeeded."""
    global _pool, _client

    client, pool = _client, _pool
    _client, _pool = None, None

    if client is not None:
        await client.close()
    if pool is not None:
        await pool.disconnect()
    if client is not None or pool is not None:
        logger.info("Redis connection closed")


async def get_redis_optional() -> Redis | None:
    """The shared client, or None when Redis is not connected."""
    return _client


class RedisHealthCheck:
    """Ping-based check used by /api/health/detailed."""

    @staticmethod
    async def check() -> dict:
        if _client is None:
            return {"status": "not_initialized", "latency_ms": None}

        try:
            start = time.perf_counter()
            await _client.ping()
            latency_ms = (time.perf_counter() - start) * 1000
            info = await _client.info("server")
        except Exception as e:
            return {"status": "unhealthy", "error": str(e), "latency_ms": None}

        return {
            "status": "healthy",
            "latency_ms": round(latency_ms, 2),
            "version": info.get("redis_version", "unknown"),
        }
