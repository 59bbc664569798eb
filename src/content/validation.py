"""Record validation and reference checks."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from folio.content.models import ContentRecord
from folio.errors import BrokenReference, Diagnostic, MissingRequiredField

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("title",)
URL_FIELDS: tuple[str, ...] = ("github", "live")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_metadata(front_matter: Mapping[str, Any]) -> None:
    """Reject a raw header mapping that lacks a required field."""
    for name in REQUIRED_FIELDS:
        if _is_blank(front_matter.get(name)):
            raise MissingRequiredField(f"required field '{name}' is missing", field=name)


def validate(record: ContentRecord) -> None:
    """Reject a record whose ``title`` is absent or blank.

    This is the only rule that keeps a record out of listings; everything
    else is reported as a warning by ``check_references``.
    """
    if _is_blank(record.title):
        raise MissingRequiredField(
            "required field 'title' is missing", path=record.path, field="title"
        )


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _check_image(record: ContentRecord, record_dir: Path, public_dir: Path | None) -> str | None:
    """Return a problem description, or None if the image resolves."""
    image = record.image.strip()
    if not image:
        return None
    if "://" in image:
        if not _is_http_url(image):
            return f"image URL is not http(s): {image}"
        return None
    if image.startswith("/"):
        if public_dir is None:
            logger.debug("Skipping root-relative image %s in %s", image, record.path)
            return None
        target = public_dir / image.lstrip("/")
    else:
        target = record_dir / image
    if not target.is_file():
        return f"image not found: {image}"
    return None


def check_references(
    record: ContentRecord,
    record_dir: Path,
    *,
    public_dir: Path | None = None,
) -> list[Diagnostic]:
    """Check ``image``/``github``/``live`` references without network access.

    Args:
        record: The parsed record.
        record_dir: Directory holding the record file; relative image
            paths resolve against it.
        public_dir: Static asset root for ``/``-prefixed image paths.
            Root-relative images are not checked when it is None.

    Returns:
        One ``broken_reference`` warning per unresolved reference.
    """
    problems: list[BrokenReference] = []

    image_problem = _check_image(record, record_dir, public_dir)
    if image_problem:
        problems.append(BrokenReference(image_problem, path=record.path, field="image"))

    for name in URL_FIELDS:
        value = getattr(record, name).strip()
        if value and not _is_http_url(value):
            problems.append(
                BrokenReference(f"'{name}' is not an http(s) URL: {value}", path=record.path, field=name)
            )

    for problem in problems:
        logger.warning("Broken reference: %s", problem)
    return [p.to_diagnostic() for p in problems]
