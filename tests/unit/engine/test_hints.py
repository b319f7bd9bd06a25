# tests/unit/engine/test_hints.py — v1
"""Tests for engine/hints.py — hints from changed file paths."""

from __future__ import annotations

from pathlib import Path

import pytest

from reviewref.engine.hints import hint_from_path, hints_from_paths


class TestHintFromPath:
    @pytest.mark.parametrize("path,expected", [
        ("src/lib.rs", "rs"),
        ("ui/MainWindow.CPP", "cpp"),
        ("Cargo.toml", "rust"),
        ("docker/Dockerfile", "docker"),
        ("CMakeLists.txt", "cmake"),
        ("notes.txt", "txt"),
        ("LICENSE", None),
        ("", None),
    ])
    def test_hint(self, path, expected):
        assert hint_from_path(path) == expected

    def test_accepts_path_objects(self):
        assert hint_from_path(Path("a/b.py")) == "py"


class TestHintsFromPaths:
    def test_first_appearance_order(self):
        assert hints_from_paths(["src/lib.rs", "ui/main.cpp", "src/main.rs"]) == ["rs", "cpp"]

    def test_skips_paths_without_hint(self):
        assert hints_from_paths(["README", "setup.py"]) == ["python"]

    def test_empty(self):
        assert hints_from_paths([]) == []
