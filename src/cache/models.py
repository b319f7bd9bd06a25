# src/cache/models.py — v1
"""Session cache domain models: CacheStatus, CacheEntry, CacheStats."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from reviewref.core.models import Document


class CacheStatus(str, Enum):
    """Per-key load state.

    UNLOADED -> LOADING -> LOADED on success,
    UNLOADED -> LOADING -> FAILED on error. FAILED is retried on the next
    request, so it behaves like UNLOADED apart from reporting.
    """

    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class CacheEntry(BaseModel):
    """A loaded document body held for the lifetime of a session."""

    key: str
    document: Document
    loaded_at: datetime
    content_hash: str


class CacheStats(BaseModel):
    """Counters for one session cache."""

    entries: int = 0
    hits: int = 0
    misses: int = 0
    loads: int = 0
    failures: int = 0
    evictions: int = 0
    max_entries: int | None = None
