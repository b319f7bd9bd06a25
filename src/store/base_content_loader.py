# src/store/base_content_loader.py — v1
"""Abstract content loader interface.

A loader turns a document's opaque ``content_location`` into its body. The
reference store never interprets locators itself.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseContentLoader(ABC):
    """Unified interface for document body backends."""

    @abstractmethod
    async def read(self, location: str) -> str:
        """Return the body stored at ``location``.

        Raises:
            FileNotFoundError: If nothing is stored at ``location``.
            OSError: On any other backing storage failure.
        """

    @abstractmethod
    def describe(self, location: str) -> str:
        """Human-readable form of ``location`` for logs and diagnostics."""

    async def close(self) -> None:
        """Release backend resources. Default: nothing to release."""
