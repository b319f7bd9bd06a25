# src/api/facade.py — v1
"""Public API facade — build a store, open review sessions, resolve hints.

Usage:
    from reviewref.api.facade import open_session
    async with open_session() as session:
        result = await session.resolve(["rs", "cpp"])

``ConfigurationError`` raised here means the store is broken and must not be
served; callers should abort startup.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable, Mapping
from contextlib import asynccontextmanager
from pathlib import PurePath

from reviewref.config.settings import Settings
from reviewref.core.models import ResolutionResult, ResolveOptions
from reviewref.engine.hints import hints_from_paths
from reviewref.engine.resolver import ResolutionEngine
from reviewref.store.loader_factory import create_content_loader
from reviewref.store.reference_store import ReferenceStore

logger = logging.getLogger(__name__)


def build_store(
    settings: Settings | None = None,
    contents: Mapping[str, str] | None = None,
) -> ReferenceStore:
    """Load and validate the manifest, wiring the configured content backend.

    Args:
        settings: Application settings. Loaded from .env if None.
        contents: Bundled bodies, used when CONTENT_BACKEND=memory.

    Raises:
        ConfigurationError: If the manifest is missing or invalid.
    """
    settings = settings or Settings()
    loader = create_content_loader(settings, contents=contents)
    return ReferenceStore.from_manifest_file(
        settings.manifest_path,
        loader,
        case_sensitive=settings.case_sensitive_triggers,
    )


@asynccontextmanager
async def open_session(
    settings: Settings | None = None,
    store: ReferenceStore | None = None,
    contents: Mapping[str, str] | None = None,
) -> AsyncIterator[ResolutionEngine]:
    """Open a review session; its cache is torn down on exit.

    A store passed in is shared and left open; a store built here is closed
    with the session.
    """
    settings = settings or Settings()
    owns_store = store is None
    if store is None:
        store = build_store(settings, contents=contents)

    try:
        engine = ResolutionEngine.from_settings(store, settings)
        logger.debug("Opened session %s", engine.session_id)
        try:
            yield engine
        finally:
            await engine.close()
    finally:
        if owns_store:
            await store.close()


async def resolve_references(
    hints: Iterable[str] = (),
    paths: Iterable[str | PurePath] = (),
    settings: Settings | None = None,
    options: ResolveOptions | None = None,
    store: ReferenceStore | None = None,
) -> ResolutionResult:
    """One-shot resolution for explicit hints and/or changed file paths.

    Explicit hints rank before hints derived from ``paths``.
    """
    combined = list(hints) + hints_from_paths(paths)
    async with open_session(settings=settings, store=store) as session:
        return await session.resolve(combined, options)
