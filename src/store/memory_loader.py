# src/store/memory_loader.py — v1
"""In-process content loader (CONTENT_BACKEND=memory).

Serves bodies from a mapping embedded in the calling program. Useful for
bundled guidance and for tests.
"""

from __future__ import annotations

from collections.abc import Mapping

from reviewref.store.base_content_loader import BaseContentLoader


class MemoryContentLoader(BaseContentLoader):
    """Serve document bodies from a read-only mapping."""

    def __init__(self, contents: Mapping[str, str] | None = None) -> None:
        self._contents = dict(contents or {})

    async def read(self, location: str) -> str:
        try:
            return self._contents[location]
        except KeyError:
            raise FileNotFoundError(f"No bundled content at {location!r}") from None

    def describe(self, location: str) -> str:
        return f"memory:{location}"
