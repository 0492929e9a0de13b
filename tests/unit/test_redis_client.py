"""Unit tests for the best-effort Redis cache wrapper."""

from __future__ import annotations

from unittest.mock import MagicMock

import redis

from app.services.redis_client import RedisClient


def _cache(enabled: bool = True) -> RedisClient:
    cache = RedisClient(enabled=enabled)
    cache.client = MagicMock()
    return cache


def test_get_decodes_json() -> None:
    cache = _cache()
    cache.client.get.return_value = '{"latitude": 34.4, "longitude": 133.2}'
    assert cache.get("k") == {"latitude": 34.4, "longitude": 133.2}


def test_get_miss() -> None:
    cache = _cache()
    cache.client.get.return_value = None
    assert cache.get("k") is None


def test_set_with_ttl_uses_setex() -> None:
    cache = _cache()
    assert cache.set("k", {"a": "尾道"}, ttl=60) is True
    cache.client.setex.assert_called_once_with("k", 60, '{"a": "尾道"}')


def test_connection_errors_are_swallowed() -> None:
    cache = _cache()
    cache.client.get.side_effect = redis.ConnectionError("down")
    cache.client.set.side_effect = redis.ConnectionError("down")
    cache.client.ping.side_effect = redis.ConnectionError("down")

    assert cache.get("k") is None
    assert cache.set("k", 1) is False
    assert cache.ping() is False


def test_disabled_cache_never_touches_redis() -> None:
    cache = _cache(enabled=False)
    assert cache.get("k") is None
    assert cache.set("k", 1) is False
    cache.client.get.assert_not_called()
    cache.client.set.assert_not_called()
