# tests/unit/store/test_reference_store.py — v1
"""Tests for store/reference_store.py — metadata, triggers, body loading."""

from __future__ import annotations

import pytest

from reviewref.core.errors import ConfigurationError, LoadError, NotFoundError
from reviewref.core.models import DocumentDescriptor
from reviewref.store.manifest import parse_manifest
from reviewref.store.memory_loader import MemoryContentLoader
from reviewref.store.reference_store import ReferenceStore
from tests.conftest import SAMPLE_BODIES, CountingLoader


class TestListAndMetadata:
    def test_list_manifest_order_without_body(self, store):
        docs = store.list()
        assert [d.key for d in docs] == ["rust", "qt", "python", "general"]
        assert all(d.body is None for d in docs)

    def test_list_has_no_side_effects(self, store, counting_loader):
        store.list()
        assert counting_loader.total_reads == 0

    def test_keys_and_len(self, store):
        assert store.keys == ["rust", "qt", "python", "general"]
        assert len(store) == 4
        assert "qt" in store
        assert "go" not in store

    def test_position(self, store):
        assert store.position("rust") == 0
        assert store.position("general") == 3

    def test_position_unknown(self, store):
        with pytest.raises(NotFoundError):
            store.position("go")

    def test_descriptor_unknown(self, store):
        with pytest.raises(NotFoundError):
            store.descriptor("go")

    def test_duplicate_keys_on_direct_construction(self):
        d = DocumentDescriptor(key="rust", triggers=["rust"], content_location="x")
        with pytest.raises(ConfigurationError, match="Duplicate"):
            ReferenceStore([d, d], MemoryContentLoader())


class TestFindByTrigger:
    def test_exact(self, store):
        assert store.find_by_trigger("rs") == {"rust"}
        assert store.find_by_trigger("cpp") == {"qt"}

    def test_case_insensitive(self, store):
        assert store.find_by_trigger("RUST") == {"rust"}
        assert store.find_by_trigger("django") == {"python"}
        assert store.find_by_trigger("  Py ") == {"python"}

    def test_no_match_is_empty_set(self, store):
        assert store.find_by_trigger("haskell") == set()

    def test_shared_trigger(self):
        descriptors = parse_manifest([
            {"key": "cpp", "triggers": ["cpp"], "content_location": "a"},
            {"key": "qt", "triggers": ["qt", "cpp"], "content_location": "b"},
        ])
        store = ReferenceStore(descriptors, MemoryContentLoader())
        assert store.find_by_trigger("cpp") == {"cpp", "qt"}
        assert store.trigger_index["cpp"] == ("cpp", "qt")

    def test_case_sensitive_store(self, manifest_data):
        descriptors = parse_manifest(manifest_data, case_sensitive=True)
        store = ReferenceStore(descriptors, MemoryContentLoader(), case_sensitive=True)
        assert store.find_by_trigger("Django") == {"python"}
        assert store.find_by_trigger("django") == set()


class TestLoad:
    @pytest.mark.asyncio
    async def test_load_populates_body(self, store):
        doc = await store.load("rust")
        assert doc.key == "rust"
        assert doc.title == "Rust review guidelines"
        assert doc.body == SAMPLE_BODIES["rust.md"]

    @pytest.mark.asyncio
    async def test_load_is_idempotent(self, store):
        first = await store.load("qt")
        second = await store.load("qt")
        assert first == second

    @pytest.mark.asyncio
    async def test_load_reads_every_time(self, store, counting_loader):
        await store.load("qt")
        await store.load("qt")
        assert counting_loader.reads["qt.md"] == 2

    @pytest.mark.asyncio
    async def test_unknown_key(self, store):
        with pytest.raises(NotFoundError):
            await store.load("go")

    @pytest.mark.asyncio
    async def test_storage_failure_wrapped(self, descriptors):
        loader = CountingLoader(SAMPLE_BODIES, failing={"qt.md"})
        store = ReferenceStore(descriptors, loader)
        with pytest.raises(LoadError) as exc_info:
            await store.load("qt")
        assert exc_info.value.key == "qt"
        assert "counting:qt.md" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_content_is_load_error(self, descriptors):
        store = ReferenceStore(descriptors, CountingLoader({}))
        with pytest.raises(LoadError):
            await store.load("rust")


class TestFromManifestFile:
    @pytest.mark.asyncio
    async def test_round_trip_from_disk(self, manifest_dir):
        from reviewref.store.file_loader import FileContentLoader

        store = ReferenceStore.from_manifest_file(
            manifest_dir / "manifest.json", FileContentLoader(manifest_dir)
        )
        doc = await store.load("python")
        assert "mutable default" in doc.body
