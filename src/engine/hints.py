# src/engine/hints.py — v1
"""Derive context hints from the file paths touched by a change."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePath

# Build and config files whose name, not suffix, identifies the ecosystem.
WELL_KNOWN_FILES: dict[str, str] = {
    "cargo.toml": "rust",
    "cargo.lock": "rust",
    "cmakelists.txt": "cmake",
    "dockerfile": "docker",
    "go.mod": "go",
    "go.sum": "go",
    "makefile": "make",
    "package.json": "javascript",
    "pyproject.toml": "python",
    "setup.py": "python",
    "requirements.txt": "python",
    "pom.xml": "java",
    "build.gradle": "java",
    "gemfile": "ruby",
}


def hint_from_path(path: str | PurePath) -> str | None:
    """Single hint for one path: well-known file name, else the suffix."""
    pure = PurePath(path)
    name = pure.name.lower()
    if not name:
        return None
    if name in WELL_KNOWN_FILES:
        return WELL_KNOWN_FILES[name]
    suffix = pure.suffix.lower().lstrip(".")
    return suffix or None


def hints_from_paths(paths: Iterable[str | PurePath]) -> list[str]:
    """Ordered, deduplicated hints for a set of changed paths.

    >>> hints_from_paths(["src/lib.rs", "ui/main.cpp", "src/main.rs"])
    ['rs', 'cpp']
    """
    hints: list[str] = []
    for path in paths:
        hint = hint_from_path(path)
        if hint and hint not in hints:
            hints.append(hint)
    return hints
