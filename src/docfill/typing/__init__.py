"""Typing-centric domain modules."""

from docfill.typing.enums import FieldKind, FieldSource
from docfill.typing.models import (
    DocumentContent,
    DocumentReference,
    ExtractionOutcome,
    FieldDescriptor,
    FieldPosition,
    FilledArtifact,
    NativeFieldHint,
    PageContent,
    Substitution,
    Template,
)
from docfill.typing.protocol import DocumentContentProvider, DocumentWriter

__all__ = [
    "DocumentContent",
    "DocumentContentProvider",
    "DocumentReference",
    "DocumentWriter",
    "ExtractionOutcome",
    "FieldDescriptor",
    "FieldKind",
    "FieldPosition",
    "FieldSource",
    "FilledArtifact",
    "NativeFieldHint",
    "PageContent",
    "Substitution",
    "Template",
]
