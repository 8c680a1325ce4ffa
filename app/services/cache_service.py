"""
Redis read-through cache for catalog data (tariff bands).

Keys look like ``{prefix}:{module}:{key}``. When the cache is disabled or
Redis cannot be reached every lookup is a miss and loaders hit the database.
"""

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Optional

import redis
from redis.exceptions import RedisError
from flask import Flask, current_app

logger = logging.getLogger(__name__)

DECIMAL_TAG = "__decimal__"


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        # Tagged so money comes back as Decimal, not float
        return {DECIMAL_TAG: str(obj)}
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    raise TypeError(f"Cannot cache value of type {type(obj).__name__}")


def _json_object_hook(obj: dict) -> Any:
    if DECIMAL_TAG in obj:
        return Decimal(obj[DECIMAL_TAG])
    return obj


class CacheService:
    """Thin Redis wrapper with graceful degradation."""

    def __init__(self, app: Optional[Flask] = None):
        self.client: Optional[redis.Redis] = None
        self.enabled = False
        self.prefix = "cotizador"

        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Connect to REDIS_URL unless CACHE_ENABLED is off."""
        self.prefix = app.config.get('CACHE_KEY_PREFIX', self.prefix)
        if not app.config.get('CACHE_ENABLED', True):
            logger.info("[CACHE] Disabled by configuration")
            return

        url = app.config.get('REDIS_URL', 'redis://localhost:6379/0')
        try:
            client = redis.Redis.from_url(
                url,
                decode_responses=True,
                socket_connect_timeout=3,
                socket_timeout=3,
                retry_on_timeout=True,
            )
            client.ping()
        except RedisError as e:
            logger.warning(f"[CACHE] Redis unreachable at {url}: {e}. Running without cache.")
            return

        self.client = client
        self.enabled = True
        logger.info(f"[CACHE] Connected to {url}")

    def is_available(self) -> bool:
        if not self.enabled or self.client is None:
            return False
        try:
            return bool(self.client.ping())
        except RedisError:
            return False

    def make_key(self, module: str, key: str) -> str:
        return f"{self.prefix}:{module}:{key}"

    def get(self, module: str, key: str) -> Optional[Any]:
        """Cached value, or None on a miss or any Redis failure."""
        if not self.is_available():
            return None
        try:
            raw = self.client.get(self.make_key(module, key))
        except RedisError as e:
            logger.warning(f"[CACHE] Read failed for {module}:{key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw, object_hook=_json_object_hook)
        except ValueError:
            logger.warning(f"[CACHE] Discarding unreadable entry {module}:{key}")
            return None

    def set(self, module: str, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store value for ttl seconds (CACHE_DEFAULT_TTL when omitted)."""
        if not self.is_available():
            return False
        if ttl is None:
            ttl = current_app.config.get('CACHE_DEFAULT_TTL', 60)
        try:
            payload = json.dumps(value, default=_json_default)
            self.client.setex(self.make_key(module, key), ttl, payload)
        except (RedisError, TypeError) as e:
            logger.warning(f"[CACHE] Write failed for {module}:{key}: {e}")
            return False
        return True

    def memoize(self, module: str, key: str, loader_fn: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        """Return the cached value, or call loader_fn and cache its result."""
        cached = self.get(module, key)
        if cached is not None:
            logger.debug(f"[CACHE] HIT {module}:{key}")
            return cached
        value = loader_fn()
        self.set(module, key, value, ttl)
        return value

    def invalidate_module(self, module: str) -> int:
        """Delete every key of a module. Returns the number of keys removed."""
        if not self.is_available():
            return 0
        pattern = self.make_key(module, "*")
        try:
            keys = list(self.client.scan_iter(match=pattern, count=100))
            if keys:
                self.client.delete(*keys)
        except RedisError as e:
            logger.warning(f"[CACHE] Invalidation failed for {pattern}: {e}")
            return 0
        if keys:
            logger.info(f"[CACHE] Invalidated {pattern} ({len(keys)} keys)")
        return len(keys)


def init_cache(app: Flask) -> CacheService:
    """Create the cache service and register it on the app."""
    cache = CacheService(app)
    app.extensions['cache'] = cache
    return cache


def get_cache() -> CacheService:
    """Cache service of the current app."""
    cache = current_app.extensions.get('cache')
    if cache is None:
        raise RuntimeError("Cache service not initialized; call init_cache(app) first")
    return cache
