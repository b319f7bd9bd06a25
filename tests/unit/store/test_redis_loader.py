# tests/unit/store/test_redis_loader.py — v1
"""Tests for store/redis_loader.py — mocked Redis client."""

from __future__ import annotations

import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest


def _make_loader(storage: dict[str, str]):
    from reviewref.store.redis_loader import RedisContentLoader

    client = MagicMock()
    client.get = AsyncMock(side_effect=lambda k: storage.get(k))
    client.aclose = AsyncMock()
    with patch("redis.asyncio.Redis.from_url", return_value=client):
        loader = RedisContentLoader(redis_url="redis://localhost")
    return loader, client


class TestRedisContentLoader:
    def test_import_error_without_redis(self):
        """Clear ImportError when redis is not available."""
        saved = {k: sys.modules.get(k) for k in ("redis", "redis.asyncio")}
        sys.modules["redis"] = None  # type: ignore[assignment]
        sys.modules["redis.asyncio"] = None  # type: ignore[assignment]
        try:
            from reviewref.store.redis_loader import RedisContentLoader
            with pytest.raises(ImportError, match="redis"):
                RedisContentLoader(redis_url="redis://localhost")
        finally:
            for name, mod in saved.items():
                if mod is not None:
                    sys.modules[name] = mod
                else:
                    sys.modules.pop(name, None)

    @pytest.mark.asyncio
    async def test_read(self):
        loader, client = _make_loader({"reviewref:content:rust": "body"})
        assert await loader.read("rust") == "body"
        client.get.assert_awaited_once_with("reviewref:content:rust")

    @pytest.mark.asyncio
    async def test_missing_key(self):
        loader, _ = _make_loader({})
        with pytest.raises(FileNotFoundError):
            await loader.read("rust")

    @pytest.mark.asyncio
    async def test_connection_failure_is_os_error(self):
        loader, client = _make_loader({})
        client.get.side_effect = ConnectionError("refused")
        with pytest.raises(OSError, match="Redis read failed"):
            await loader.read("rust")

    def test_describe(self):
        loader, _ = _make_loader({})
        assert loader.describe("qt") == "redis:reviewref:content:qt"

    @pytest.mark.asyncio
    async def test_close(self):
        loader, client = _make_loader({})
        await loader.close()
        client.aclose.assert_awaited_once()
