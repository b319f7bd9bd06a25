# src/cache/fingerprint.py — v2
"""Content fingerprints for cached document bodies.

Used to detect whether an explicit reload picked up changed content.
"""

from __future__ import annotations

import hashlib


def content_hash(body: str) -> str:
    """SHA-256 of the UTF-8 encoded body."""
    return hashlib.sha256(body.encode("utf-8")).hexdigest()


def short_hash(digest: str, length: int = 12) -> str:
    """Abbreviated digest for log lines."""
    return digest[:length]
