"""Tests for front-matter splitting, parsing and serialization."""

from datetime import date

import pytest
from folio.content.frontmatter import (
    dump_frontmatter,
    parse_frontmatter,
    render_document,
    split_frontmatter,
)
from folio.content.models import ContentRecord
from folio.errors import MalformedMetadata

SAMPLE_POST = """\
---
title: React Admin Dashboard
published: 2024-03-02
description: An admin panel built on a hosted backend
image: ./cover.png
tags:
  - react
  - dashboard
category: Projects
github: https://github.com/example/react-admin
live: https://admin.example.com
draft: false
---

# React Admin Dashboard

Built with a component library and a charting library.

```js
const x = 1;
```

<div class="note">Raw HTML stays as-is.</div>
"""


class TestSplitFrontmatter:
    def test_splits_header_and_body(self):
        header, body = split_frontmatter(SAMPLE_POST)
        assert header is not None
        assert header.startswith("title: React Admin Dashboard")
        assert body.startswith("\n# React Admin Dashboard")

    def test_body_keeps_code_and_html(self):
        _, body = split_frontmatter(SAMPLE_POST)
        assert "```js\nconst x = 1;\n```" in body
        assert '<div class="note">' in body

    def test_no_header(self):
        header, body = split_frontmatter("# Just a heading\n")
        assert header is None
        assert body == "# Just a heading\n"

    def test_dashes_later_in_file_are_not_a_header(self):
        text = "Intro\n---\ntitle: x\n---\n"
        header, body = split_frontmatter(text)
        assert header is None
        assert body == text

    def test_unclosed_header_raises(self):
        with pytest.raises(MalformedMetadata, match="not closed"):
            split_frontmatter("---\ntitle: x\n\nbody without closing marker\n")

    def test_empty_header(self):
        header, body = split_frontmatter("---\n---\nbody\n")
        assert header == ""
        assert body == "body\n"

    def test_horizontal_rule_in_body_preserved(self):
        text = "---\ntitle: x\n---\nintro\n\n---\n\nmore\n"
        header, body = split_frontmatter(text)
        assert header == "title: x\n"
        assert body == "intro\n\n---\n\nmore\n"

    def test_bom_is_ignored(self):
        header, body = split_frontmatter("\ufeff---\ntitle: x\n---\nbody")
        assert header == "title: x\n"
        assert body == "body"

    def test_crlf_line_endings(self):
        header, body = split_frontmatter("---\r\ntitle: x\r\n---\r\nbody\r\n")
        assert header is not None
        assert parse_frontmatter(header) == {"title": "x"}
        assert body == "body\r\n"

    def test_closing_marker_at_end_of_file(self):
        header, body = split_frontmatter("---\ntitle: x\n---")
        assert header == "title: x\n"
        assert body == ""


class TestParseFrontmatter:
    def test_basic_fields(self):
        header, _ = split_frontmatter(SAMPLE_POST)
        fm = parse_frontmatter(header)
        assert fm["title"] == "React Admin Dashboard"
        assert fm["published"] == date(2024, 3, 2)
        assert fm["tags"] == ["react", "dashboard"]
        assert fm["draft"] is False

    def test_empty_header(self):
        assert parse_frontmatter("") == {}
        assert parse_frontmatter("   \n") == {}

    def test_null_document(self):
        assert parse_frontmatter("# only a comment\n") == {}

    def test_invalid_yaml(self):
        with pytest.raises(MalformedMetadata, match="invalid YAML"):
            parse_frontmatter("title: [unclosed\n")

    def test_broken_list_syntax(self):
        with pytest.raises(MalformedMetadata):
            parse_frontmatter("tags:\n  - a\n - b\n")

    def test_duplicate_keys_rejected(self):
        with pytest.raises(MalformedMetadata, match="duplicate key 'title'"):
            parse_frontmatter("title: One\ntitle: Two\n")

    def test_duplicate_nested_keys_rejected(self):
        with pytest.raises(MalformedMetadata, match="duplicate key"):
            parse_frontmatter("extra:\n  a: 1\n  a: 2\n")

    def test_impossible_date(self):
        with pytest.raises(MalformedMetadata, match="invalid date"):
            parse_frontmatter("title: x\npublished: 2024-13-45\n")

    def test_non_mapping_header(self):
        with pytest.raises(MalformedMetadata, match="must be a mapping"):
            parse_frontmatter("- just\n- a list\n")

    def test_keys_equal_after_stringifying_rejected(self):
        with pytest.raises(MalformedMetadata, match="duplicate key '1'"):
            parse_frontmatter("1: a\n'1': b\ntitle: t\n")

    def test_deep_nesting_is_malformed(self):
        header = "x: " + "[" * 3000 + "]" * 3000 + "\n"
        with pytest.raises(MalformedMetadata, match="nested too deeply"):
            parse_frontmatter(header)

    def test_error_line_is_file_line(self):
        # Line 1 of the file is the opening delimiter.
        with pytest.raises(MalformedMetadata, match=r"at line 3:"):
            parse_frontmatter("title: ok\nsubtitle: a: b\n")

    def test_merge_keys_still_work(self):
        fm = parse_frontmatter("base: &b\n  x: 1\nchild:\n  <<: *b\n  y: 2\n")
        assert fm["child"] == {"x": 1, "y": 2}


class TestDumpFrontmatter:
    def test_block_style_in_given_order(self):
        text = dump_frontmatter({"title": "X", "tags": ["a", "b"], "draft": True})
        assert text == "title: X\ntags:\n- a\n- b\ndraft: true\n"

    def test_empty_mapping(self):
        assert dump_frontmatter({}) == ""

    def test_unicode_kept(self):
        assert "Café" in dump_frontmatter({"title": "Café"})

    def test_date_like_strings_are_quoted(self):
        fm = {"title": "2024-01-01"}
        assert parse_frontmatter(dump_frontmatter(fm)) == fm


class TestRoundTrip:
    def test_record_metadata_round_trips(self):
        header, body = split_frontmatter(SAMPLE_POST)
        record = ContentRecord.from_front_matter(parse_frontmatter(header), body=body)

        rendered = render_document(record.front_matter(), record.body)
        header2, body2 = split_frontmatter(rendered)
        again = ContentRecord.from_front_matter(parse_frontmatter(header2), body=body2)

        assert again == record
        assert body2 == body

    def test_extra_keys_round_trip(self):
        fm = {"title": "About", "layout": "page", "order": 2}
        assert parse_frontmatter(dump_frontmatter(fm)) == fm

    def test_render_document_shape(self):
        doc = render_document({"title": "X"}, "Body\n")
        assert doc == "---\ntitle: X\n---\nBody\n"

    def test_render_document_without_metadata(self):
        doc = render_document({}, "Body\n")
        assert split_frontmatter(doc) == ("", "Body\n")
