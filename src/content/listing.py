"""Ordering and grouping helpers for consumers of the store."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from folio.content.models import ContentRecord


def sort_by_published(
    records: Iterable[ContentRecord], *, newest_first: bool = True
) -> list[ContentRecord]:
    """Sort records by publish date; undated records always come last."""
    records = list(records)
    dated = [r for r in records if r.published is not None]
    undated = [r for r in records if r.published is None]
    # Two stable sorts: slug first, then date
    dated.sort(key=lambda r: r.slug)
    dated.sort(key=lambda r: r.published, reverse=newest_first)
    undated.sort(key=lambda r: r.slug)
    return dated + undated


def duplicate_titles(records: Iterable[ContentRecord]) -> dict[str, list[str]]:
    """Map each title carried by more than one record to those records' slugs."""
    by_title: dict[str, list[str]] = defaultdict(list)
    for record in records:
        if record.title:
            by_title[record.title.strip()].append(record.slug)
    return {title: slugs for title, slugs in by_title.items() if len(slugs) > 1}
