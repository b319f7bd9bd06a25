# src/cache/session_cache.py — v1
"""Session-scoped document cache with single-flight loading.

Each key moves through UNLOADED -> LOADING -> LOADED / FAILED. While a key is
LOADING, every requester awaits the same task, so the backing store sees at
most one read per key at a time. Requesters await the task through
``asyncio.shield``: cancelling one of them never cancels the shared load.

Failures are not cached. Invalidating a key while it is loading bumps its
epoch, so the stale result is handed to existing waiters but never stored.
The detached load stays tracked: a fresh load of the same key waits for it to
finish before reading, so a key never has two reads in flight.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from reviewref.cache.fingerprint import content_hash, short_hash
from reviewref.cache.models import CacheEntry, CacheStats, CacheStatus
from reviewref.core.models import Document

logger = logging.getLogger(__name__)

DocumentLoader = Callable[[str], Awaitable[Document]]


class SessionCache:
    """Write-once, optionally LRU-bounded cache of loaded documents."""

    def __init__(
        self, loader: DocumentLoader, max_entries: int | None = None
    ) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._loader = loader
        self._max_entries = max_entries
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._inflight: dict[str, asyncio.Task[Document]] = {}
        # Detached loads still running after an invalidation.
        self._stale: dict[str, asyncio.Task[Document]] = {}
        self._failures: dict[str, str] = {}
        self._key_epochs: dict[str, int] = {}
        self._clear_epoch = 0
        self._stats = CacheStats(max_entries=max_entries)

    # --- Lookup ---

    async def get(self, key: str) -> Document:
        """Return the cached document for ``key``, loading it on a miss.

        Raises whatever the loader raises; the failure is recorded but the
        key stays retryable.
        """
        entry = self._entries.get(key)
        if entry is not None:
            self._entries.move_to_end(key)
            self._stats.hits += 1
            return entry.document

        task = self._inflight.get(key)
        if task is None:
            self._stats.misses += 1
            task = self._start_load(key)
        else:
            logger.debug("Joining in-flight load for %s", key)

        return await asyncio.shield(task)

    def peek(self, key: str) -> CacheEntry | None:
        """Cached entry without touching LRU order or counters."""
        return self._entries.get(key)

    def status(self, key: str) -> CacheStatus:
        if key in self._entries:
            return CacheStatus.LOADED
        if key in self._inflight:
            return CacheStatus.LOADING
        if key in self._failures:
            return CacheStatus.FAILED
        return CacheStatus.UNLOADED

    def last_error(self, key: str) -> str | None:
        return self._failures.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> CacheStats:
        return self._stats.model_copy(update={"entries": len(self._entries)})

    # --- Invalidation ---

    def invalidate(self, key: str | None = None) -> int:
        """Drop one entry, or every entry when ``key`` is None.

        In-flight loads are detached: their waiters still receive the result
        but it is not stored. Idempotent. Returns the number of entries dropped.
        """
        if key is None:
            dropped = len(self._entries)
            self._entries.clear()
            for inflight_key in list(self._inflight):
                self._detach(inflight_key)
            self._failures.clear()
            self._clear_epoch += 1
            if dropped:
                logger.info("Invalidated all %d cache entries", dropped)
            return dropped

        self._key_epochs[key] = self._key_epochs.get(key, 0) + 1
        self._detach(key)
        self._failures.pop(key, None)
        if self._entries.pop(key, None) is None:
            return 0
        logger.info("Invalidated cache entry %s", key)
        return 1

    async def reload(self, key: str) -> Document:
        """Explicitly re-read ``key`` from the backing store."""
        previous = self._entries.get(key)
        self.invalidate(key)
        document = await self.get(key)
        current = self._entries.get(key)
        if previous is not None and current is not None:
            if previous.content_hash != current.content_hash:
                logger.warning(
                    "Content of %s changed on reload (%s -> %s)",
                    key,
                    short_hash(previous.content_hash),
                    short_hash(current.content_hash),
                )
        return document

    def clear(self) -> None:
        """Session teardown: drop everything and reset counters."""
        self.invalidate(None)
        self._key_epochs.clear()
        self._stats = CacheStats(max_entries=self._max_entries)

    # --- Internals ---

    def _epoch(self, key: str) -> tuple[int, int]:
        return self._clear_epoch, self._key_epochs.get(key, 0)

    def _detach(self, key: str) -> None:
        task = self._inflight.pop(key, None)
        if task is not None and not task.done():
            self._stale[key] = task

    def _start_load(self, key: str) -> asyncio.Task[Document]:
        predecessor = self._stale.pop(key, None)
        task = asyncio.get_running_loop().create_task(
            self._load(key, self._epoch(key), predecessor),
            name=f"reviewref-load:{key}",
        )
        self._inflight[key] = task
        task.add_done_callback(lambda t: self._on_load_done(key, t))
        return task

    async def _load(
        self,
        key: str,
        epoch: tuple[int, int],
        predecessor: asyncio.Task[Document] | None = None,
    ) -> Document:
        self._failures.pop(key, None)
        if predecessor is not None and not predecessor.done():
            logger.debug("Waiting for detached load of %s", key)
            # asyncio.wait neither raises the predecessor's error nor cancels it.
            await asyncio.wait([predecessor])
        self._stats.loads += 1
        try:
            document = await self._loader(key)
        except Exception as e:
            if self._epoch(key) == epoch:
                self._failures[key] = str(e)
            self._stats.failures += 1
            logger.debug("Load failed for %s: %s", key, e)
            raise

        if self._epoch(key) != epoch:
            logger.debug("Discarding stale load of %s", key)
            return document

        self._store(key, document)
        return document

    def _store(self, key: str, document: Document) -> None:
        if key in self._entries:
            return
        self._entries[key] = CacheEntry(
            key=key,
            document=document,
            loaded_at=datetime.now(timezone.utc),
            content_hash=content_hash(document.body or ""),
        )
        while self._max_entries is not None and len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            self._stats.evictions += 1
            logger.debug("Evicted %s (LRU)", evicted)

    def _on_load_done(self, key: str, task: asyncio.Task[Document]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        elif self._stale.get(key) is task:
            del self._stale[key]
        # Mark the exception retrieved when every waiter was cancelled.
        if not task.cancelled():
            task.exception()
