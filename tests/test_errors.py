"""Tests for the content error taxonomy."""

from folio.errors import (
    BrokenReference,
    ContentError,
    Diagnostic,
    DiagnosticKind,
    MalformedMetadata,
    MissingRequiredField,
    Severity,
)


class TestContentErrors:
    def test_hierarchy(self):
        for cls in (MissingRequiredField, MalformedMetadata, BrokenReference):
            assert issubclass(cls, ContentError)

    def test_str_includes_path(self):
        err = MalformedMetadata("bad date", path="posts/a.md", field="published")
        assert str(err) == "posts/a.md: bad date"

    def test_str_without_path(self):
        assert str(MalformedMetadata("bad date")) == "bad date"

    def test_with_path_does_not_overwrite(self):
        err = MissingRequiredField("missing", path="a.md")
        assert err.with_path("b.md").path == "a.md"
        assert MissingRequiredField("missing").with_path("b.md").path == "b.md"

    def test_severity_per_kind(self):
        assert MissingRequiredField("x").to_diagnostic().severity == Severity.ERROR
        assert MalformedMetadata("x").to_diagnostic().severity == Severity.ERROR
        assert BrokenReference("x").to_diagnostic().severity == Severity.WARNING

    def test_to_diagnostic(self):
        diag = BrokenReference("image not found: a.png", path="p.md", field="image").to_diagnostic()
        assert diag == Diagnostic(
            kind=DiagnosticKind.BROKEN_REFERENCE,
            severity=Severity.WARNING,
            path="p.md",
            field="image",
            message="image not found: a.png",
        )
        assert str(diag) == "p.md:image: image not found: a.png"
