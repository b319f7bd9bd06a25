# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types — all imports come from core.models.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MatchPolicy = Literal["exact", "partial"]


# === MANIFEST / DOCUMENTS ===


class DocumentDescriptor(BaseModel):
    """One manifest entry: metadata plus an opaque content locator."""

    model_config = ConfigDict(frozen=True)

    key: str
    triggers: tuple[str, ...]
    content_location: str
    title: str = ""
    summary: str = ""

    @field_validator("key", "content_location")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:  # noqa: N805
        v = v.strip()
        if not v:
            raise ValueError("must be a non-empty string")
        return v

    @field_validator("triggers", mode="before")
    @classmethod
    def validate_triggers(cls, v: object) -> tuple[str, ...]:  # noqa: N805
        """Triggers must be a non-empty list of non-empty strings; duplicates dropped."""
        if isinstance(v, str) or not isinstance(v, (list, tuple, set, frozenset)):
            raise ValueError("triggers must be a list of strings")
        seen: list[str] = []
        for item in v:
            if not isinstance(item, str) or not item.strip():
                raise ValueError(f"invalid trigger {item!r}")
            item = item.strip()
            if item not in seen:
                seen.append(item)
        if not seen:
            raise ValueError("triggers must not be empty")
        return tuple(seen)


class Document(BaseModel):
    """A reference document as handed to callers.

    ``body`` is ``None`` for metadata-only listings and populated once the
    document has been loaded.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    triggers: tuple[str, ...]
    title: str = ""
    summary: str = ""
    body: str | None = None

    @classmethod
    def from_descriptor(
        cls, descriptor: DocumentDescriptor, body: str | None = None
    ) -> Document:
        return cls(
            key=descriptor.key,
            triggers=descriptor.triggers,
            title=descriptor.title,
            summary=descriptor.summary,
            body=body,
        )

    @property
    def is_loaded(self) -> bool:
        return self.body is not None


# === RESOLUTION ===


class ResolveOptions(BaseModel):
    """Per-call overrides for ``ResolutionEngine.resolve``."""

    match_policy: MatchPolicy | None = None
    use_fallback: bool = True
    limit: int | None = Field(default=None, ge=1)


class Diagnostic(BaseModel):
    """Non-fatal report about a document that could not be served."""

    key: str
    error: Literal["not_found", "load_error"]
    message: str
    retryable: bool = False


class ResolutionResult(BaseModel):
    """Ordered, deduplicated documents for one set of hints."""

    hints: list[str] = Field(default_factory=list)
    documents: list[Document] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    matched_by: dict[str, str] = Field(default_factory=dict)
    used_fallback: bool = False

    @property
    def keys(self) -> list[str]:
        return [d.key for d in self.documents]

    @property
    def has_diagnostics(self) -> bool:
        return bool(self.diagnostics)

    @property
    def is_empty(self) -> bool:
        """True when nothing matched and nothing failed."""
        return not self.documents and not self.diagnostics
