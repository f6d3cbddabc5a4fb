"""
Redis caching service for hospital roster listings.

CACHING STRATEGY
================

What we cache:
  - The GET /hospitals response (every hospital with its resolved roster)
  - Cache key pattern: "hospitals:list:all"

Invalidation strategy:
  - On an admission pass that admitted anyone: delete all hospital list keys
  - On removing a patient from a hospital: delete all hospital list keys
  - TTL-based expiry as safety net (REDIS_CACHE_TTL)

Known race:
  - A listing read from the database before an admission commits, but
    written to Redis after that admission's invalidation, stays stale until
    REDIS_CACHE_TTL expires. Accepted: the listing is informational and
    matching never reads it.

What we never cache:
  - The hospital-name universe. Matching and the complement service must see
    the current set of hospitals on every pass.
  - Single-hospital lookups (used right after roster changes)

Redis is advisory: any Redis failure is logged and the request falls
through to the database.
"""

import json
from typing import Optional

import redis.asyncio as redis
from admissions.core.config import get_settings
from admissions.core.logging import get_logger
from admissions.core.metrics import record_cache_operation, redis_connection_errors

logger = get_logger(__name__)
settings = get_settings()

HOSPITAL_LIST_PREFIX = "hospitals:list:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            redis_connection_errors.inc()
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.close()
        _redis_client = None


def _make_hospital_list_key() -> str:
    return f"{HOSPITAL_LIST_PREFIX}all"


async def get_cached_hospitals() -> Optional[list]:
    """Retrieve the cached hospital roster listing."""
    client = await get_redis()
    if not client:
        return None

    key = _make_hospital_list_key()
    try:
        data = await client.get(key)
        record_cache_operation("get", hit=bool(data))
        if data:
            logger.debug("cache_hit", key=key)
            return json.loads(data)
        logger.debug("cache_miss", key=key)
    except Exception as e:
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached_hospitals(data: list) -> None:
    """Cache the hospital roster listing with TTL."""
    client = await get_redis()
    if not client:
        return

    key = _make_hospital_list_key()
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_hospital_cache() -> None:
    """
    Invalidate all cached hospital listings.
    Uses SCAN to find and delete all keys matching the prefix.
    """
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{HOSPITAL_LIST_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
