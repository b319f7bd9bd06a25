# src/store/redis_loader.py — v1
"""Redis-backed content loader (CONTENT_BACKEND=redis).

Requires 'redis' package: pip install redis.
Suitable when several review workers share one guideline corpus.
"""

from __future__ import annotations

from reviewref.store.base_content_loader import BaseContentLoader

_KEY_PREFIX = "reviewref:content:"


class RedisContentLoader(BaseContentLoader):
    """Read document bodies stored as Redis string values."""

    def __init__(self, redis_url: str, key_prefix: str = _KEY_PREFIX) -> None:
        try:
            import redis.asyncio as aioredis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = aioredis.Redis.from_url(redis_url, decode_responses=True)
        self._prefix = key_prefix

    async def read(self, location: str) -> str:
        try:
            data = await self._client.get(f"{self._prefix}{location}")
        except Exception as e:
            raise OSError(f"Redis read failed for {location!r}: {e}") from e
        if data is None:
            raise FileNotFoundError(f"No Redis value for {location!r}")
        return data

    def describe(self, location: str) -> str:
        return f"redis:{self._prefix}{location}"

    async def close(self) -> None:
        await self._client.aclose()
