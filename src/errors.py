"""Authoring-time content defects and their diagnostic form.

Every defect is scoped to a single record.  Parsing and validation raise
one of the ``ContentError`` subclasses; the store catches them per record,
converts them to ``Diagnostic`` entries, and keeps going.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class DiagnosticKind(StrEnum):
    """Category of an authoring defect."""

    MISSING_REQUIRED_FIELD = "missing_required_field"
    MALFORMED_METADATA = "malformed_metadata"
    BROKEN_REFERENCE = "broken_reference"


class Severity(StrEnum):
    """How a defect affects the record it was found in."""

    ERROR = "error"  # record is not listed
    WARNING = "warning"  # record is listed, author should fix


class Diagnostic(BaseModel):
    """A single build-time finding about one record."""

    kind: DiagnosticKind
    severity: Severity
    path: str
    field: str = ""
    message: str

    def __str__(self) -> str:
        where = f"{self.path}:{self.field}" if self.field else self.path
        return f"{where}: {self.message}"


class ContentError(Exception):
    """Base error for content record defects."""

    kind: DiagnosticKind = DiagnosticKind.MALFORMED_METADATA
    severity: Severity = Severity.ERROR

    def __init__(self, message: str, *, path: str = "", field: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.field = field

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message

    def with_path(self, path: str) -> ContentError:
        """Attach the record path if the raiser did not know it."""
        if not self.path:
            self.path = path
        return self

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            kind=self.kind,
            severity=self.severity,
            path=self.path,
            field=self.field,
            message=self.message,
        )


class MissingRequiredField(ContentError):
    """A required front-matter field (``title``) is absent or blank."""

    kind = DiagnosticKind.MISSING_REQUIRED_FIELD


class MalformedMetadata(ContentError):
    """The front-matter header cannot be parsed or holds invalid values."""

    kind = DiagnosticKind.MALFORMED_METADATA


class BrokenReference(ContentError):
    """An ``image``, ``github`` or ``live`` reference does not resolve."""

    kind = DiagnosticKind.BROKEN_REFERENCE
    severity = Severity.WARNING
