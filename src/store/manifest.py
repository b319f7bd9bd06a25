# src/store/manifest.py — v1
"""Manifest loading and validation.

A manifest is a JSON list of document descriptors, or an object of the form
``{"version": 1, "documents": [...]}``. Validation collects every problem
before failing so that a broken manifest is reported in one pass and never
partially served.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from reviewref.core.errors import ConfigurationError
from reviewref.core.models import DocumentDescriptor

logger = logging.getLogger(__name__)

SUPPORTED_VERSIONS = (1,)
_REQUIRED_FIELDS = ("key", "triggers", "content_location")


def normalize_trigger(trigger: str, case_sensitive: bool = False) -> str:
    """Canonical form used for trigger comparison."""
    trigger = trigger.strip()
    return trigger if case_sensitive else trigger.casefold()


def load_manifest_file(
    path: Path | str, case_sensitive: bool = False
) -> list[DocumentDescriptor]:
    """Read and validate a manifest file.

    Raises:
        ConfigurationError: If the file is missing, not valid JSON, or any
            descriptor fails validation.
    """
    path = Path(path).expanduser()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigurationError(f"Manifest not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Manifest {path} is not valid JSON: {e}") from e

    descriptors = parse_manifest(raw, case_sensitive=case_sensitive)
    logger.info("Loaded manifest %s (%d documents)", path, len(descriptors))
    return descriptors


def parse_manifest(
    raw: Any, case_sensitive: bool = False
) -> list[DocumentDescriptor]:
    """Validate raw manifest data into descriptors, in declaration order."""
    if isinstance(raw, Mapping):
        version = raw.get("version", 1)
        if version not in SUPPORTED_VERSIONS:
            raise ConfigurationError(f"Unsupported manifest version: {version!r}")
        entries = raw.get("documents")
        if not isinstance(entries, list):
            raise ConfigurationError("Manifest 'documents' must be a list")
    elif isinstance(raw, list):
        entries = raw
    else:
        raise ConfigurationError(
            "Manifest must be a list of documents or an object with 'documents'"
        )

    errors: list[str] = []
    descriptors: list[DocumentDescriptor] = []
    seen_keys: set[str] = set()

    for index, entry in enumerate(entries):
        descriptor = _parse_entry(entry, index, errors)
        if descriptor is None:
            continue
        if descriptor.key in seen_keys:
            errors.append(f"documents[{index}]: duplicate key {descriptor.key!r}")
            continue
        seen_keys.add(descriptor.key)
        descriptors.append(_normalize(descriptor, case_sensitive))

    if errors:
        raise ConfigurationError(
            f"Invalid manifest ({len(errors)} error(s)): " + "; ".join(errors),
            errors=errors,
        )

    return descriptors


def check_known_keys(
    keys: Iterable[str], descriptors: Iterable[DocumentDescriptor], label: str
) -> None:
    """Raise ConfigurationError if any of ``keys`` is not declared."""
    known = {d.key for d in descriptors}
    unknown = [k for k in keys if k not in known]
    if unknown:
        raise ConfigurationError(
            f"{label} references unknown document key(s): {', '.join(unknown)}"
        )


def _parse_entry(
    entry: Any, index: int, errors: list[str]
) -> DocumentDescriptor | None:
    if not isinstance(entry, Mapping):
        errors.append(f"documents[{index}]: must be an object")
        return None

    missing = [f for f in _REQUIRED_FIELDS if f not in entry]
    if missing:
        label = entry.get("key", index)
        errors.append(f"documents[{label}]: missing field(s) {', '.join(missing)}")
        return None

    try:
        return DocumentDescriptor.model_validate(dict(entry))
    except ValidationError as e:
        for err in e.errors():
            loc = ".".join(str(p) for p in err["loc"])
            errors.append(f"documents[{entry.get('key', index)}].{loc}: {err['msg']}")
        return None


def _normalize(
    descriptor: DocumentDescriptor, case_sensitive: bool
) -> DocumentDescriptor:
    triggers: list[str] = []
    for t in descriptor.triggers:
        t = normalize_trigger(t, case_sensitive)
        if t not in triggers:
            triggers.append(t)
    return descriptor.model_copy(update={"triggers": tuple(triggers)})
