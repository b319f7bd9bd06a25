# src/store/file_loader.py — v1
"""File-system content loader (CONTENT_BACKEND=file).

Relative locators are resolved against ``content_root``, normally the
directory holding the manifest. Reads run in a worker thread.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from reviewref.store.base_content_loader import BaseContentLoader

_FILE_SCHEME = "file:"


class FileContentLoader(BaseContentLoader):
    """Read document bodies from local files."""

    def __init__(self, content_root: Path | str = ".", encoding: str = "utf-8") -> None:
        self._root = Path(content_root).expanduser()
        self._encoding = encoding

    @property
    def root(self) -> Path:
        return self._root

    async def read(self, location: str) -> str:
        path = self.resolve_path(location)
        if not path.is_file():
            raise FileNotFoundError(f"No such reference file: {path}")
        return await asyncio.to_thread(path.read_text, encoding=self._encoding)

    def describe(self, location: str) -> str:
        return str(self.resolve_path(location))

    def resolve_path(self, location: str) -> Path:
        """Map a locator to a concrete path (``file:`` prefix optional)."""
        if location.startswith(_FILE_SCHEME):
            location = location[len(_FILE_SCHEME):]
        path = Path(location).expanduser()
        if not path.is_absolute():
            path = self._root / path
        return path
