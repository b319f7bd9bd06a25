# src/store/reference_store.py — v1
"""Immutable reference store: the manifest index plus a body accessor.

The store holds no mutable state after construction. Caching of bodies is the
session cache's job, not the store's.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from types import MappingProxyType

from reviewref.core.errors import ConfigurationError, LoadError, NotFoundError
from reviewref.core.models import Document, DocumentDescriptor
from reviewref.store.base_content_loader import BaseContentLoader
from reviewref.store.manifest import load_manifest_file, normalize_trigger

logger = logging.getLogger(__name__)


class ReferenceStore:
    """Named review-guideline documents with lazily readable bodies."""

    def __init__(
        self,
        descriptors: Iterable[DocumentDescriptor],
        loader: BaseContentLoader,
        case_sensitive: bool = False,
    ) -> None:
        self._loader = loader
        self._case_sensitive = case_sensitive
        self._descriptors: dict[str, DocumentDescriptor] = {}
        self._positions: dict[str, int] = {}
        trigger_index: dict[str, list[str]] = {}

        for descriptor in descriptors:
            if descriptor.key in self._descriptors:
                raise ConfigurationError(f"Duplicate document key: {descriptor.key!r}")
            self._positions[descriptor.key] = len(self._descriptors)
            self._descriptors[descriptor.key] = descriptor
            for trigger in descriptor.triggers:
                norm = normalize_trigger(trigger, case_sensitive)
                keys = trigger_index.setdefault(norm, [])
                if descriptor.key not in keys:
                    keys.append(descriptor.key)

        self._trigger_index = MappingProxyType(
            {t: tuple(keys) for t, keys in trigger_index.items()}
        )

    @classmethod
    def from_manifest_file(
        cls,
        path: Path | str,
        loader: BaseContentLoader,
        case_sensitive: bool = False,
    ) -> ReferenceStore:
        descriptors = load_manifest_file(path, case_sensitive=case_sensitive)
        return cls(descriptors, loader, case_sensitive=case_sensitive)

    # --- Metadata access ---

    @property
    def case_sensitive(self) -> bool:
        return self._case_sensitive

    @property
    def loader(self) -> BaseContentLoader:
        return self._loader

    @property
    def keys(self) -> list[str]:
        """Document keys in manifest order."""
        return list(self._descriptors)

    @property
    def trigger_index(self) -> MappingProxyType[str, tuple[str, ...]]:
        """Normalized trigger -> keys (manifest order)."""
        return self._trigger_index

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, key: object) -> bool:
        return key in self._descriptors

    def list(self) -> list[Document]:
        """All documents in manifest order, metadata only."""
        return [Document.from_descriptor(d) for d in self._descriptors.values()]

    def descriptor(self, key: str) -> DocumentDescriptor:
        try:
            return self._descriptors[key]
        except KeyError:
            raise NotFoundError(key) from None

    def position(self, key: str) -> int:
        """Manifest declaration index of ``key``."""
        try:
            return self._positions[key]
        except KeyError:
            raise NotFoundError(key) from None

    def find_by_trigger(self, hint: str) -> set[str]:
        """Keys whose triggers equal ``hint`` under the store's case mode."""
        return set(self._trigger_index.get(normalize_trigger(hint, self._case_sensitive), ()))

    # --- Body access ---

    async def load(self, key: str) -> Document:
        """Return ``key``'s document with its body read from backing storage.

        Raises:
            NotFoundError: If ``key`` is not in the manifest.
            LoadError: If the backing storage cannot produce the body.
        """
        descriptor = self.descriptor(key)
        location = descriptor.content_location
        try:
            body = await self._loader.read(location)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(
                "Failed to read %s from %s: %s",
                key, self._loader.describe(location), e,
            )
            raise LoadError(key, self._loader.describe(location), str(e)) from e

        logger.debug("Read %s (%d chars)", key, len(body))
        return Document.from_descriptor(descriptor, body=body)

    async def close(self) -> None:
        await self._loader.close()
