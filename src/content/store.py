"""File-backed content record store.

Treats a directory of Markdown files as a collection of independent
ContentRecords.  Every read goes back to disk, so enumeration is
restartable and always reflects the author's latest edits.  Defects are
isolated per record: one broken header never stops the others from
loading.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePosixPath

from folio.content.frontmatter import parse_frontmatter, render_document, split_frontmatter
from folio.content.models import ContentRecord, ScanReport
from folio.content.validation import check_references, validate, validate_metadata
from folio.errors import ContentError, MalformedMetadata
from pydantic import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = (".md", ".mdx")
INDEX_STEM = "index"


def slug_for(relative_path: str | PurePosixPath) -> str:
    """Derive a record's slug from its path relative to the store root.

    ``posts/react-admin/index.md`` -> ``posts/react-admin``;
    ``about.md`` -> ``about``.
    """
    rel = PurePosixPath(relative_path)
    if rel.stem == INDEX_STEM and rel.parent != PurePosixPath("."):
        return rel.parent.as_posix()
    return rel.with_suffix("").as_posix()


def _describe_validation_error(exc: ValidationError) -> tuple[str, str]:
    """Return (field, message) for the first pydantic error."""
    first = exc.errors()[0]
    loc = first.get("loc") or ()
    field = str(loc[0]) if loc else ""
    msg = first.get("msg", "invalid value")
    value = first.get("input")
    if field and value is not None and not isinstance(value, (dict, list)):
        return field, f"invalid '{field}' value {value!r}: {msg}"
    if field:
        return field, f"invalid '{field}': {msg}"
    return field, msg


def parse_record(text: str, *, path: str = "", slug: str = "") -> ContentRecord:
    """Parse one record file's text into a validated ContentRecord.

    Raises:
        MalformedMetadata: The header cannot be parsed or a field has
            an invalid value (bad date, broken list, non-boolean draft).
        MissingRequiredField: ``title`` is absent or blank.
    """
    try:
        header, body = split_frontmatter(text)
        front_matter = parse_frontmatter(header) if header is not None else {}
        validate_metadata(front_matter)
    except ContentError as exc:
        exc.with_path(path)
        raise

    try:
        record = ContentRecord.from_front_matter(front_matter, body=body, slug=slug, path=path)
    except ValidationError as exc:
        field, message = _describe_validation_error(exc)
        raise MalformedMetadata(message, path=path, field=field) from exc

    validate(record)
    return record


class ContentStore:
    """Directory of Markdown content records.

    The store hands records to consumers unmodified and in discovery
    order (sorted relative path).  Sorting by date, grouping and
    rendering are left to whoever consumes it.
    """

    def __init__(
        self,
        root: Path,
        *,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        skip_hidden: bool = True,
        check_references: bool = True,
        public_dir: Path | None = None,
    ) -> None:
        self.root = Path(root)
        self.extensions = {e.lower() if e.startswith(".") else f".{e.lower()}" for e in extensions}
        self.skip_hidden = skip_hidden
        self.check_references = check_references
        self.public_dir = Path(public_dir) if public_dir is not None else None

    # ── Private helpers ──────────────────────────────────────────

    def _relative(self, path: Path) -> PurePosixPath:
        # Identity is where the file sits under root, not where a symlink points.
        try:
            return PurePosixPath(path.relative_to(self.root).as_posix())
        except ValueError:
            pass
        try:
            return PurePosixPath(path.absolute().relative_to(self.root.absolute()).as_posix())
        except ValueError:
            return PurePosixPath(path.name)

    def _is_hidden(self, rel: PurePosixPath) -> bool:
        return any(part.startswith(".") for part in rel.parts)

    # ── Discovery ────────────────────────────────────────────────

    def discover(self) -> list[Path]:
        """Return candidate record files in stable discovery order."""
        if not self.root.is_dir():
            logger.warning("Content directory not found: %s", self.root)
            return []

        found: list[tuple[str, Path]] = []
        for path in self.root.rglob("*"):
            if not path.is_file() or path.suffix.lower() not in self.extensions:
                continue
            rel = self._relative(path)
            if self.skip_hidden and self._is_hidden(rel):
                logger.debug("Skipping hidden file %s", rel)
                continue
            found.append((rel.as_posix(), path))

        return [path for _, path in sorted(found, key=lambda item: item[0])]

    # ── Read operations ──────────────────────────────────────────

    def load(self, path: Path) -> ContentRecord:
        """Read, parse and validate a single record file.

        Raises MalformedMetadata or MissingRequiredField.
        """
        path = Path(path)
        if not path.is_absolute():
            path = self.root / path
        rel = self._relative(path)

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise MalformedMetadata(f"could not read file: {exc}", path=rel.as_posix()) from exc

        return parse_record(text, path=rel.as_posix(), slug=slug_for(rel))

    def enumerate(self, published_only: bool = False) -> Iterator[ContentRecord]:
        """Lazily yield valid records in discovery order.

        Each call rescans the directory.  Records that fail to parse or
        validate are logged and skipped; drafts are skipped when
        ``published_only`` is set.
        """
        for path in self.discover():
            try:
                record = self.load(path)
            except ContentError as exc:
                logger.warning("Skipping record: %s", exc)
                continue
            if published_only and record.draft:
                logger.debug("Skipping draft %s", record.path)
                continue
            yield record

    def scan(self) -> ScanReport:
        """Load every record and collect all diagnostics in one pass."""
        report = ScanReport()
        for path in self.discover():
            report.scanned += 1
            try:
                record = self.load(path)
            except ContentError as exc:
                logger.warning("Skipping record: %s", exc)
                report.failed += 1
                report.diagnostics.append(exc.to_diagnostic())
                continue

            report.loaded += 1
            if record.draft:
                report.drafts += 1
            if self.check_references:
                report.diagnostics.extend(
                    check_references(record, path.parent, public_dir=self.public_dir)
                )
            report.records.append(record)

        logger.info(
            "Scanned %d files: %d loaded (%d drafts), %d failed",
            report.scanned,
            report.loaded,
            report.drafts,
            report.failed,
        )
        return report

    def get(self, slug: str) -> ContentRecord | None:
        """Return the first valid record with this slug, or None."""
        for record in self.enumerate():
            if record.slug == slug:
                return record
        return None

    # ── Write operations ─────────────────────────────────────────

    def write(self, record: ContentRecord) -> Path:
        """Write a record back to its file with canonical front matter.

        Raises ValueError if the record has no storage path.
        """
        if not record.path:
            raise ValueError("record has no path to write to")
        target = self.root / record.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render_document(record.front_matter(), record.body), encoding="utf-8")
        return target
