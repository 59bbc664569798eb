"""Front-matter header parsing and serialization.

A record file starts with a ``---`` line, holds a YAML mapping, and closes
the header with the next ``---`` line.  Everything after the closing
marker is the body and is kept byte-for-byte.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

import yaml
from folio.errors import MalformedMetadata

DELIMITER = "---"

_OPEN_RE = re.compile(r"\A---[ \t]*\r?\n")
_CLOSE_RE = re.compile(r"^---[ \t]*(?:\r?\n|\Z)", re.MULTILINE)
_MERGE_TAG = "tag:yaml.org,2002:merge"


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects duplicate mapping keys instead of overwriting."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            if key_node.tag == _MERGE_TAG:
                continue
            key = self.construct_object(key_node, deep=deep)
            try:
                duplicate = key in seen
            except TypeError:
                # Unhashable key; let the base constructor report it.
                continue
            if duplicate:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Split raw file text into ``(header, body)``.

    Returns ``(None, text)`` when the file has no header at all.  Raises
    MalformedMetadata when the opening marker is never closed.
    """
    text = text.removeprefix("\ufeff")
    opening = _OPEN_RE.match(text)
    if opening is None:
        return None, text

    closing = _CLOSE_RE.search(text, opening.end())
    if closing is None:
        raise MalformedMetadata("front matter is not closed with '---'")

    header = text[opening.end() : closing.start()]
    body = text[closing.end() :]
    return header, body


def parse_frontmatter(header: str) -> dict[str, Any]:
    """Parse a YAML header into a mapping.

    Raises MalformedMetadata on invalid YAML, duplicate keys, impossible
    dates, or a header that is not a mapping.
    """
    if not header.strip():
        return {}

    try:
        loaded = yaml.load(header, Loader=_UniqueKeyLoader)  # noqa: S506
    except yaml.YAMLError as exc:
        raise MalformedMetadata(_describe_yaml_error(exc)) from exc
    except ValueError as exc:
        # PyYAML matches the timestamp pattern before building the date,
        # so "2024-13-45" surfaces here rather than as a YAMLError.
        raise MalformedMetadata(f"invalid date in front matter: {exc}") from exc
    except RecursionError as exc:
        raise MalformedMetadata("front matter is nested too deeply") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise MalformedMetadata(
            f"front matter must be a mapping, got {type(loaded).__name__}"
        )

    front_matter: dict[str, Any] = {}
    for key, value in loaded.items():
        name = str(key)
        if name in front_matter:
            raise MalformedMetadata(f"duplicate key {name!r} in front matter", field=name)
        front_matter[name] = value
    return front_matter


def dump_frontmatter(front_matter: Mapping[str, Any]) -> str:
    """Serialize a header mapping as block-style YAML (no delimiters)."""
    if not front_matter:
        return ""
    return yaml.safe_dump(
        dict(front_matter),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=1000,
    )


def render_document(front_matter: Mapping[str, Any], body: str) -> str:
    """Assemble a complete record file from header and body."""
    return f"{DELIMITER}\n{dump_frontmatter(front_matter)}{DELIMITER}\n{body}"


def _describe_yaml_error(exc: yaml.YAMLError) -> str:
    mark = getattr(exc, "problem_mark", None)
    problem = getattr(exc, "problem", None) or str(exc)
    if mark is not None:
        # +2: one for 1-based lines, one for the opening delimiter line
        return f"invalid YAML at line {mark.line + 2}: {problem}"
    return f"invalid YAML: {problem}"
