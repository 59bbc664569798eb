"""Content domain models as pure Pydantic v2 data types.

A ContentRecord is one post or page: the metadata parsed from its
front-matter header plus the Markdown body, and the structural identity
(slug, path) the store derives from where the file lives.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from folio.errors import Diagnostic, Severity
from pydantic import BaseModel, Field, field_validator

# Canonical header key order, also the set of keys the store understands.
FRONT_MATTER_KEYS: tuple[str, ...] = (
    "title",
    "published",
    "description",
    "image",
    "tags",
    "category",
    "github",
    "live",
    "draft",
)

_TEXT_FIELDS = ("description", "image", "category", "github", "live")


def _scalar_to_str(value: Any) -> Any:
    """Coerce YAML scalars (numbers, dates) to text; leave others for pydantic."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float, date)):
        return str(value)
    return value


class ContentRecord(BaseModel):
    """One post or page from the content directory.

    ``slug`` and ``path`` come from the file location, never from the
    header, so two records may carry the same title.
    """

    title: str | None = None
    published: date | None = None
    description: str = ""
    image: str = ""
    tags: list[str] = Field(default_factory=list)
    category: str = ""
    github: str = ""
    live: str = ""
    draft: bool = False
    extra: dict[str, Any] = Field(default_factory=dict)
    body: str = ""
    slug: str = ""
    path: str = ""

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, value: Any) -> Any:
        return _scalar_to_str(value)

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        return _scalar_to_str(value)

    @field_validator("published", mode="before")
    @classmethod
    def _narrow_published(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return value.date()
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            # Allow "a, b" or "a"
            value = value.split(",")
        if not isinstance(value, (list, tuple, set)):
            raise ValueError("tags must be a list of strings")
        seen: set[str] = set()
        out: list[str] = []
        for item in value:
            if isinstance(item, (dict, list)):
                raise ValueError("tags must be a list of strings")
            if item is None:
                continue
            tag = str(_scalar_to_str(item)).strip()
            if tag and tag not in seen:
                seen.add(tag)
                out.append(tag)
        return out

    @field_validator("draft", mode="before")
    @classmethod
    def _default_draft(cls, value: Any) -> Any:
        return False if value is None else value

    @classmethod
    def from_front_matter(
        cls,
        front_matter: Mapping[str, Any],
        *,
        body: str = "",
        slug: str = "",
        path: str = "",
    ) -> ContentRecord:
        """Build a record, routing unrecognized header keys into ``extra``."""
        known = {k: v for k, v in front_matter.items() if k in FRONT_MATTER_KEYS}
        extra = {k: v for k, v in front_matter.items() if k not in FRONT_MATTER_KEYS}
        return cls.model_validate(
            {**known, "extra": extra, "body": body, "slug": slug, "path": path}
        )

    @property
    def is_published(self) -> bool:
        return not self.draft

    def front_matter(self) -> dict[str, Any]:
        """Return the header mapping in canonical order, without defaults."""
        fm: dict[str, Any] = {}
        for key in FRONT_MATTER_KEYS:
            value = getattr(self, key)
            if key == "draft":
                if value:
                    fm[key] = True
                continue
            if value is None or value == "" or value == []:
                continue
            fm[key] = list(value) if key == "tags" else value
        for key, value in self.extra.items():
            fm[key] = value
        return fm


class ScanReport(BaseModel):
    """Outcome of one full pass over the content directory."""

    scanned: int = 0
    loaded: int = 0
    drafts: int = 0
    failed: int = 0
    records: list[ContentRecord] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def published(self) -> list[ContentRecord]:
        return [r for r in self.records if r.is_published]

    @property
    def ok(self) -> bool:
        return not self.errors
