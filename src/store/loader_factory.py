# src/store/loader_factory.py — v1
"""Factory for content loader instantiation."""

from __future__ import annotations

from collections.abc import Mapping

from reviewref.config.settings import Settings
from reviewref.store.base_content_loader import BaseContentLoader


def create_content_loader(
    settings: Settings | None = None,
    contents: Mapping[str, str] | None = None,
) -> BaseContentLoader:
    """Instantiate the configured content backend.

    Args:
        settings: Application settings. Defaults to the file backend rooted
            at the current directory.
        contents: Bundled bodies for the memory backend.

    Returns:
        Configured BaseContentLoader implementation.
    """
    backend = "file" if settings is None else settings.content_backend

    if backend == "file":
        from reviewref.store.file_loader import FileContentLoader
        if settings is None:
            return FileContentLoader(".")
        return FileContentLoader(
            settings.resolved_content_root, encoding=settings.content_encoding
        )

    if backend == "memory":
        from reviewref.store.memory_loader import MemoryContentLoader
        return MemoryContentLoader(contents)

    if backend == "redis":
        from reviewref.store.redis_loader import RedisContentLoader
        if settings is None or not settings.content_redis_url:
            raise ValueError(
                "CONTENT_REDIS_URL must be set when CONTENT_BACKEND=redis"
            )
        return RedisContentLoader(
            redis_url=settings.content_redis_url,
            key_prefix=settings.content_redis_prefix,
        )

    raise ValueError(f"Unsupported content backend: {backend!r}")
