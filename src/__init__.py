# src/__init__.py — v1
"""reviewref — progressive-disclosure resolution of code review guidelines.

Public API:
    ReferenceStore: Immutable manifest of guideline documents
    ResolutionEngine: Hints -> ordered documents, with a session cache
    open_session / resolve_references: Settings-driven entry points

    Exceptions:
        ConfigurationError: Broken manifest or settings (fatal)
        NotFoundError: Unknown document key
        LoadError: Backing storage failure (retryable)
"""

from reviewref.api.facade import build_store, open_session, resolve_references
from reviewref.core.errors import (
    ConfigurationError,
    LoadError,
    NotFoundError,
    ReviewRefError,
)
from reviewref.core.models import (
    Diagnostic,
    Document,
    DocumentDescriptor,
    ResolutionResult,
    ResolveOptions,
)
from reviewref.engine.hints import hints_from_paths
from reviewref.engine.resolver import ResolutionEngine
from reviewref.store.reference_store import ReferenceStore
from reviewref.version import __version__

__all__ = [
    "ConfigurationError",
    "Diagnostic",
    "Document",
    "DocumentDescriptor",
    "LoadError",
    "NotFoundError",
    "ReferenceStore",
    "ResolutionEngine",
    "ResolutionResult",
    "ResolveOptions",
    "ReviewRefError",
    "__version__",
    "build_store",
    "hints_from_paths",
    "open_session",
    "resolve_references",
]
