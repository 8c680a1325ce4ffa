"""
Unit tests for the Redis cache service.
"""

from decimal import Decimal
from unittest.mock import MagicMock

from flask import Flask

from app.services.cache_service import CacheService


def make_app(**config):
    app = Flask(__name__)
    app.config.update(CACHE_KEY_PREFIX='test', CACHE_DEFAULT_TTL=60, **config)
    return app


def connected_cache(app):
    """Cache service wired to a mocked Redis client."""
    cache = CacheService()
    cache.enabled = True
    cache.prefix = app.config["CACHE_KEY_PREFIX"]
    cache.client = MagicMock()
    return cache


class TestCacheDisabled:
    """Graceful degradation when the cache is off."""

    def test_memoize_always_calls_loader(self):
        app = make_app(CACHE_ENABLED=False)
        cache = CacheService(app)
        loader = MagicMock(return_value=[1, 2])

        with app.app_context():
            assert cache.memoize('tariffs', 'bands', loader) == [1, 2]
            assert cache.memoize('tariffs', 'bands', loader) == [1, 2]

        assert loader.call_count == 2
        assert cache.is_available() is False

    def test_invalidate_is_a_noop(self):
        cache = CacheService(make_app(CACHE_ENABLED=False))
        assert cache.invalidate_module('tariffs') == 0


class TestCacheEnabled:
    """Behaviour against a (mocked) Redis client."""

    def test_keys_are_namespaced(self):
        app = make_app()
        cache = connected_cache(app)
        cache.client.get.return_value = None

        with app.app_context():
            cache.set('tariffs', 'bands', [1], ttl=300)

        cache.client.setex.assert_called_once()
        key, ttl, _ = cache.client.setex.call_args[0]
        assert key == 'test:tariffs:bands'
        assert ttl == 300

    def test_decimals_survive_round_trip(self):
        app = make_app()
        cache = connected_cache(app)
        value = [{'price_per_kg': Decimal('40.25'), 'weight_max': None}]

        with app.app_context():
            cache.set('tariffs', 'bands', value)
        stored = cache.client.setex.call_args[0][2]
        cache.client.get.return_value = stored

        restored = cache.get('tariffs', 'bands')
        assert restored == value
        assert isinstance(restored[0]['price_per_kg'], Decimal)

    def test_memoize_hit_skips_loader(self):
        app = make_app()
        cache = connected_cache(app)
        cache.client.get.return_value = '[1, 2, 3]'
        loader = MagicMock()

        assert cache.memoize('tariffs', 'bands', loader) == [1, 2, 3]
        loader.assert_not_called()

    def test_invalidate_module_deletes_matching_keys(self):
        cache = connected_cache(make_app())
        cache.client.scan_iter.return_value = iter(['test:tariffs:bands', 'test:tariffs:other'])

        assert cache.invalidate_module('tariffs') == 2
        cache.client.scan_iter.assert_called_once_with(match='test:tariffs:*', count=100)
        cache.client.delete.assert_called_once_with('test:tariffs:bands', 'test:tariffs:other')
