"""Content domain: record models, front-matter codec and the file store.

A content record is one Markdown file with a YAML front-matter header.
The ContentStore discovers records under a directory, validates them,
and isolates authoring defects per record.
"""

from folio.content.frontmatter import (
    dump_frontmatter,
    parse_frontmatter,
    render_document,
    split_frontmatter,
)
from folio.content.listing import duplicate_titles, sort_by_published
from folio.content.models import FRONT_MATTER_KEYS, ContentRecord, ScanReport
from folio.content.store import ContentStore, parse_record, slug_for
from folio.content.validation import check_references, validate, validate_metadata

__all__ = [
    "FRONT_MATTER_KEYS",
    "ContentRecord",
    "ContentStore",
    "ScanReport",
    "check_references",
    "dump_frontmatter",
    "duplicate_titles",
    "parse_frontmatter",
    "parse_record",
    "render_document",
    "slug_for",
    "sort_by_published",
    "split_frontmatter",
    "validate",
    "validate_metadata",
]
