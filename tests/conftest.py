# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides a small guideline manifest, an in-memory load-counting content
loader and stores/engines built on top of them. No external dependencies.
"""

from __future__ import annotations

import asyncio
import json
from collections import Counter
from pathlib import Path

import pytest

from reviewref.core.models import DocumentDescriptor
from reviewref.engine.resolver import ResolutionEngine
from reviewref.logging.context import clear_context
from reviewref.store.base_content_loader import BaseContentLoader
from reviewref.store.manifest import parse_manifest
from reviewref.store.reference_store import ReferenceStore

SAMPLE_MANIFEST = [
    {
        "key": "rust",
        "triggers": ["rust", "rs"],
        "title": "Rust review guidelines",
        "summary": "Ownership, unsafe, error handling",
        "content_location": "rust.md",
    },
    {
        "key": "qt",
        "triggers": ["qt", "cpp"],
        "title": "Qt review guidelines",
        "summary": "Object trees, signals and slots",
        "content_location": "qt.md",
    },
    {
        "key": "python",
        "triggers": ["python", "py", "Django"],
        "title": "Python review guidelines",
        "summary": "Typing, async, packaging",
        "content_location": "python.md",
    },
    {
        "key": "general",
        "triggers": ["general"],
        "title": "General review guidelines",
        "summary": "Language-agnostic checklist",
        "content_location": "general.md",
    },
]

SAMPLE_BODIES = {
    "rust.md": "# Rust\n\nPrefer `?` over `unwrap()`.\n",
    "qt.md": "# Qt\n\nParent every QObject.\n",
    "python.md": "# Python\n\nAvoid mutable default arguments.\n",
    "general.md": "# General\n\nKeep functions small.\n",
}


class CountingLoader(BaseContentLoader):
    """In-memory loader that counts reads and can inject failures."""

    def __init__(
        self,
        contents: dict[str, str],
        failing: set[str] | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.contents = dict(contents)
        self.failing = set(failing or ())
        self.gate = gate
        self.reads: Counter[str] = Counter()
        self.active: Counter[str] = Counter()
        self.max_active = 0
        self.started = asyncio.Event() if gate is not None else None

    async def read(self, location: str) -> str:
        self.reads[location] += 1
        self.active[location] += 1
        self.max_active = max(self.max_active, self.active[location])
        try:
            if self.started is not None:
                self.started.set()
            if self.gate is not None:
                await self.gate.wait()
            if location in self.failing:
                raise OSError(f"injected failure for {location}")
            try:
                return self.contents[location]
            except KeyError:
                raise FileNotFoundError(location) from None
        finally:
            self.active[location] -= 1

    def describe(self, location: str) -> str:
        return f"counting:{location}"

    @property
    def total_reads(self) -> int:
        return sum(self.reads.values())


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()


@pytest.fixture
def manifest_data() -> list[dict]:
    return [dict(entry) for entry in SAMPLE_MANIFEST]


@pytest.fixture
def descriptors(manifest_data) -> list[DocumentDescriptor]:
    return parse_manifest(manifest_data)


@pytest.fixture
def counting_loader() -> CountingLoader:
    return CountingLoader(SAMPLE_BODIES)


@pytest.fixture
def store(descriptors, counting_loader) -> ReferenceStore:
    return ReferenceStore(descriptors, counting_loader)


@pytest.fixture
def engine(store) -> ResolutionEngine:
    return ResolutionEngine(store, session_id="test-session")


@pytest.fixture
def manifest_dir(tmp_path: Path, manifest_data) -> Path:
    """Manifest plus guideline files on disk."""
    ref_dir = tmp_path / "references"
    ref_dir.mkdir()
    (ref_dir / "manifest.json").write_text(
        json.dumps({"version": 1, "documents": manifest_data}), encoding="utf-8"
    )
    for name, body in SAMPLE_BODIES.items():
        (ref_dir / name).write_text(body, encoding="utf-8")
    return ref_dir
