# tests/unit/config/test_settings.py — v1
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

from pathlib import Path

import pytest

from reviewref.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_default_manifest(self):
        s = Settings(_env_file=None)
        assert s.manifest_path == Path("references/manifest.json")

    def test_default_resolution(self):
        s = Settings(_env_file=None)
        assert s.match_policy == "exact"
        assert s.case_sensitive_triggers is False
        assert s.default_keys_list == []

    def test_default_cache_unbounded(self):
        s = Settings(_env_file=None)
        assert s.cache_max_entries is None

    def test_default_backend(self):
        s = Settings(_env_file=None)
        assert s.content_backend == "file"


class TestSettingsValidation:
    def test_redis_without_url(self):
        with pytest.raises(ConfigurationError, match="CONTENT_REDIS_URL"):
            Settings(_env_file=None, content_backend="redis")

    def test_redis_with_url(self):
        s = Settings(
            _env_file=None,
            content_backend="redis",
            content_redis_url="redis://localhost:6379/0",
        )
        assert s.content_backend == "redis"

    def test_duplicate_default_keys(self):
        with pytest.raises(ConfigurationError, match="DEFAULT_KEYS"):
            Settings(_env_file=None, default_keys="general,general")

    def test_cache_max_entries_zero(self):
        with pytest.raises(ValueError, match="cache_max_entries"):
            Settings(_env_file=None, cache_max_entries=0)

    def test_negative_log_retention(self):
        with pytest.raises(ValueError, match="log_retention"):
            Settings(_env_file=None, log_retention=-1)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, content_backend="s3")

    def test_env_var(self, monkeypatch):
        monkeypatch.setenv("MATCH_POLICY", "partial")
        monkeypatch.setenv("CACHE_MAX_ENTRIES", "4")
        s = Settings(_env_file=None)
        assert s.match_policy == "partial"
        assert s.cache_max_entries == 4


class TestSettingsHelpers:
    def test_default_keys_list(self):
        s = Settings(_env_file=None, default_keys=" general , security ,")
        assert s.default_keys_list == ["general", "security"]

    def test_content_root_defaults_to_manifest_dir(self, tmp_path):
        s = Settings(_env_file=None, manifest_path=tmp_path / "refs" / "manifest.json")
        assert s.resolved_content_root == tmp_path / "refs"

    def test_explicit_content_root(self, tmp_path):
        s = Settings(_env_file=None, content_root=tmp_path)
        assert s.resolved_content_root == tmp_path


class TestLoadSettings:
    def test_with_overrides(self):
        s = load_settings(_env_file=None, match_policy="partial")
        assert s.match_policy == "partial"

    def test_overrides_validated(self):
        with pytest.raises(ConfigurationError):
            load_settings(_env_file=None, content_backend="redis")
