# src/engine/matching.py — v1
"""Hint-to-document matching and result ordering.

Policies:
  exact:   a hint matches a trigger when both normalize to the same string.
  partial: additionally, a hint matches a trigger when one equals a token
            of the other ("rust-async" ~ "rust"). Partial matches always
            sort after exact ones.

Ordering key for a matched document: (tier, earliest hint rank, manifest
position). A document matched by several hints keeps its best key.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from reviewref.core.models import MatchPolicy
from reviewref.store.manifest import normalize_trigger
from reviewref.store.reference_store import ReferenceStore

EXACT = 0
PARTIAL = 1

_TOKEN_RE = re.compile(r"[\w+#]+")


@dataclass(frozen=True)
class Match:
    """One selected document and why it was selected."""

    key: str
    hint: str
    hint_rank: int
    tier: int
    position: int

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return self.tier, self.hint_rank, self.position


def normalize_hints(hints: Iterable[str]) -> list[str]:
    """Strip hints, drop blanks and repeats, keep first-seen order."""
    if isinstance(hints, str):
        hints = [hints]
    result: list[str] = []
    for hint in hints:
        if not isinstance(hint, str):
            raise TypeError(f"hints must be strings, got {type(hint).__name__}")
        hint = hint.strip()
        if hint and hint not in result:
            result.append(hint)
    return result


def tokenize(value: str) -> tuple[str, ...]:
    return tuple(_TOKEN_RE.findall(value))


def is_partial_match(hint: str, trigger: str) -> bool:
    """True when ``hint`` and ``trigger`` differ but share a whole token."""
    if hint == trigger:
        return False
    return trigger in tokenize(hint) or hint in tokenize(trigger)


def match_hints(
    store: ReferenceStore,
    hints: list[str],
    policy: MatchPolicy = "exact",
) -> list[Match]:
    """Select and order the documents answering to ``hints``.

    ``hints`` must already be normalized (see ``normalize_hints``); their
    order defines priority.
    """
    best: dict[str, Match] = {}

    def offer(key: str, hint: str, rank: int, tier: int) -> None:
        candidate = Match(key, hint, rank, tier, store.position(key))
        current = best.get(key)
        if current is None or candidate.sort_key < current.sort_key:
            best[key] = candidate

    for rank, hint in enumerate(hints):
        for key in store.find_by_trigger(hint):
            offer(key, hint, rank, EXACT)

        if policy == "partial":
            norm = normalize_trigger(hint, store.case_sensitive)
            for trigger, keys in store.trigger_index.items():
                if is_partial_match(norm, trigger):
                    for key in keys:
                        offer(key, hint, rank, PARTIAL)

    return sorted(best.values(), key=lambda m: m.sort_key)
