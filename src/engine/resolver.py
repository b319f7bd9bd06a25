# src/engine/resolver.py — v1
"""Resolution engine: context hints in, ordered reference documents out.

One engine instance is one review session. It owns the session cache; the
reference store underneath is shared and immutable.

Usage:
    async with ResolutionEngine(store, default_keys=["general"]) as engine:
        result = await engine.resolve(["rust", "qt"])
        for doc in result.documents:
            ...
"""

from __future__ import annotations

import asyncio
import contextvars
import logging
import uuid
from collections.abc import Iterable
from typing import TYPE_CHECKING

from reviewref.cache.models import CacheStats, CacheStatus
from reviewref.cache.session_cache import SessionCache
from reviewref.core.errors import ConfigurationError, LoadError, NotFoundError
from reviewref.core.models import (
    Diagnostic,
    Document,
    MatchPolicy,
    ResolutionResult,
    ResolveOptions,
)
from reviewref.engine.matching import match_hints, normalize_hints
from reviewref.logging.context import (
    reset_request_context,
    reset_session_context,
    set_request_context,
    set_session_context,
)
from reviewref.store.manifest import check_known_keys

if TYPE_CHECKING:
    from reviewref.config.settings import Settings
    from reviewref.store.reference_store import ReferenceStore

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """Map context hints to a prioritized, deduplicated set of documents."""

    def __init__(
        self,
        store: ReferenceStore,
        default_keys: Iterable[str] = (),
        cache_max_entries: int | None = None,
        match_policy: MatchPolicy = "exact",
        session_id: str | None = None,
        case_sensitive_triggers: bool | None = None,
    ) -> None:
        """
        Args:
            store: Reference store to resolve against.
            default_keys: Fallback documents returned when no hint matches.
            cache_max_entries: Optional LRU bound for the session cache.
            match_policy: Default matching policy ("exact" or "partial").
            session_id: Identifier used in log context. Generated if None.
            case_sensitive_triggers: Expected trigger case mode. The store
                owns the trigger index, so this only checks that it agrees.
                None accepts whatever the store was built with.

        Raises:
            ConfigurationError: If a default key is not in the manifest, or
                the trigger case mode differs from the store's.
        """
        if (
            case_sensitive_triggers is not None
            and case_sensitive_triggers != store.case_sensitive
        ):
            raise ConfigurationError(
                f"case_sensitive_triggers={case_sensitive_triggers} but the "
                f"store was built with case_sensitive={store.case_sensitive}"
            )
        defaults = list(dict.fromkeys(default_keys))
        check_known_keys(defaults, store.list(), "default_keys")

        self._store = store
        self._default_keys = sorted(defaults, key=store.position)
        self._match_policy: MatchPolicy = match_policy
        self._cache = SessionCache(store.load, max_entries=cache_max_entries)
        self._session_id = session_id or uuid.uuid4().hex[:12]
        self._closed = False
        self._context_token: contextvars.Token[str | None] | None = None

    @classmethod
    def from_settings(
        cls, store: ReferenceStore, settings: Settings
    ) -> ResolutionEngine:
        return cls(
            store,
            default_keys=settings.default_keys_list,
            cache_max_entries=settings.cache_max_entries,
            match_policy=settings.match_policy,
            case_sensitive_triggers=settings.case_sensitive_triggers,
        )

    # --- Properties ---

    @property
    def store(self) -> ReferenceStore:
        return self._store

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def default_keys(self) -> list[str]:
        return list(self._default_keys)

    @property
    def closed(self) -> bool:
        return self._closed

    # --- Public API ---

    def list(self) -> list[Document]:
        """Manifest entries in declaration order, without bodies."""
        return self._store.list()

    async def resolve(
        self,
        hints: Iterable[str],
        options: ResolveOptions | None = None,
    ) -> ResolutionResult:
        """Resolve ``hints`` (in priority order) into loaded documents.

        Never raises for an individual document: unknown keys and load
        failures are dropped from ``documents`` and reported in
        ``diagnostics``.
        """
        if self._closed:
            raise RuntimeError(f"Session {self._session_id} is closed")

        options = options or ResolveOptions()
        policy = options.match_policy or self._match_policy
        ordered_hints = normalize_hints(hints)

        session_token = set_session_context(self._session_id)
        request_token = set_request_context(uuid.uuid4().hex[:8])
        try:
            if not ordered_hints:
                logger.debug("No hints given, nothing to resolve")
                return ResolutionResult()

            matches = match_hints(self._store, ordered_hints, policy)
            keys = [m.key for m in matches]
            matched_by = {m.key: m.hint for m in matches}
            used_fallback = False

            if not keys and options.use_fallback and self._default_keys:
                keys = list(self._default_keys)
                used_fallback = True
                logger.info(
                    "No document matched %s, using defaults %s",
                    ordered_hints, keys,
                )

            if options.limit is not None:
                keys = keys[: options.limit]

            documents, diagnostics = await self._fetch(keys)

            result = ResolutionResult(
                hints=ordered_hints,
                documents=documents,
                diagnostics=diagnostics,
                matched_by={k: matched_by[k] for k in keys if k in matched_by},
                used_fallback=used_fallback,
            )
            logger.info(
                "Resolved %s -> %s (%d diagnostic(s))",
                ordered_hints, result.keys, len(diagnostics),
            )
            return result
        finally:
            reset_request_context(request_token)
            reset_session_context(session_token)

    def invalidate(self, key: str | None = None) -> int:
        """Drop one cached document, or all of them. Idempotent."""
        return self._cache.invalidate(key)

    async def reload(self, key: str) -> Document:
        """Re-read ``key`` from the store, replacing the cached copy.

        Raises:
            NotFoundError: If ``key`` is not in the manifest.
            LoadError: If the backing storage fails.
        """
        return await self._cache.reload(key)

    def status(self, key: str) -> CacheStatus:
        return self._cache.status(key)

    def stats(self) -> CacheStats:
        return self._cache.stats()

    async def close(self) -> None:
        """End the session: drop the cache. The shared store stays open."""
        if self._closed:
            return
        self._closed = True
        logger.info("Closing session %s (%s)", self._session_id, self._cache.stats())
        self._cache.clear()

    async def __aenter__(self) -> ResolutionEngine:
        self._context_token = set_session_context(self._session_id)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        try:
            await self.close()
        finally:
            if self._context_token is not None:
                reset_session_context(self._context_token)
                self._context_token = None

    # --- Internals ---

    async def _fetch(self, keys: list[str]) -> tuple[list[Document], list[Diagnostic]]:
        outcomes = await asyncio.gather(
            *(self._cache.get(key) for key in keys), return_exceptions=True
        )

        documents: list[Document] = []
        diagnostics: list[Diagnostic] = []
        for key, outcome in zip(keys, outcomes):
            if isinstance(outcome, Document):
                documents.append(outcome)
            elif isinstance(outcome, asyncio.CancelledError):
                raise outcome
            elif isinstance(outcome, BaseException):
                diagnostics.append(_diagnostic(key, outcome))
        return documents, diagnostics


def _diagnostic(key: str, exc: BaseException) -> Diagnostic:
    if isinstance(exc, NotFoundError):
        return Diagnostic(key=key, error="not_found", message=str(exc))
    if isinstance(exc, LoadError):
        logger.warning("Dropping %s from result: %s", key, exc)
        return Diagnostic(key=key, error="load_error", message=str(exc), retryable=True)
    logger.error("Unexpected error loading %s", key, exc_info=exc)
    return Diagnostic(
        key=key,
        error="load_error",
        message=f"{type(exc).__name__}: {exc}",
        retryable=True,
    )
