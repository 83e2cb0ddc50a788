"""Redis client for state shared across workers.

Used for the crawler meta-page cache, translation job status and rate
limit counters. Every helper degrades to a no-op (returning None/False)
when Redis is not configured or unreachable, so callers always have a
local fallback.
"""

import json
import os
import redis
import logging
from flask import current_app, has_app_context

logger = logging.getLogger(__name__)

# Redis connection (lazy initialization)
_redis_client = None
_redis_url = None


def _configured_url():
    if has_app_context():
        return current_app.config.get('REDIS_URL') or None
    return os.environ.get('REDIS_URL') or None


def get_redis():
    """Get or create Redis connection."""
    global _redis_client, _redis_url

    redis_url = _configured_url()

    if not redis_url:
        return None

    if _redis_client is not None and redis_url == _redis_url:
        return _redis_client

    try:
        client = redis.from_url(redis_url, decode_responses=True)
        # Test connection
        client.ping()
        _redis_client, _redis_url = client, redis_url
        logger.info("Redis connected successfully")
        return _redis_client
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        return None


# Key prefixes
ARTICLE_META_PREFIX = "article:meta:"
TRANSLATION_JOB_PREFIX = "translation:job:"
RATE_LIMIT_PREFIX = "ratelimit:"

ARTICLE_META_TTL = 3600        # 1 hour, matches the Cache-Control we send crawlers
TRANSLATION_JOB_TTL = 86400    # 1 day


def cache_get(key: str):
    """Get a cached string value."""
    r = get_redis()
    if not r:
        return None

    try:
        return r.get(key)
    except Exception as e:
        logger.error(f"Redis cache_get error: {e}")
        return None


def cache_set(key: str, value: str, ttl: int) -> bool:
    """Set a string value with a TTL in seconds."""
    r = get_redis()
    if not r:
        return False

    try:
        r.setex(key, ttl, value)
        return True
    except Exception as e:
        logger.error(f"Redis cache_set error: {e}")
        return False


def cache_delete(key: str) -> bool:
    r = get_redis()
    if not r:
        return False

    try:
        return r.delete(key) > 0
    except Exception as e:
        logger.error(f"Redis cache_delete error: {e}")
        return False


def cache_get_json(key: str):
    raw = cache_get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning(f"Discarding unreadable cached value for {key}")
        return None


def cache_set_json(key: str, value, ttl: int) -> bool:
    return cache_set(key, json.dumps(value), ttl)


def incr_window(key: str, window: int):
    """Count a hit in a fixed window that starts at the first hit.

    Returns (count, seconds_left) or None when Redis is unavailable.
    """
    r = get_redis()
    if not r:
        return None

    try:
        count = r.incr(key)
        if count == 1:
            r.expire(key, window)
        ttl = r.ttl(key)
        return count, ttl if ttl > 0 else window
    except Exception as e:
        logger.error(f"Redis incr_window error: {e}")
        return None
