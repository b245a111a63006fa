"""Core domain model exports."""

from docfill.typing.models.document import (
    DocumentContent,
    DocumentReference,
    ExtractionOutcome,
    FilledArtifact,
    NativeFieldHint,
    PageContent,
    Substitution,
    Template,
)
from docfill.typing.models.field import FieldDescriptor, FieldPosition, generate_field_id, new_field

__all__ = [
    "DocumentContent",
    "DocumentReference",
    "ExtractionOutcome",
    "FieldDescriptor",
    "FieldPosition",
    "FilledArtifact",
    "NativeFieldHint",
    "PageContent",
    "Substitution",
    "Template",
    "generate_field_id",
    "new_field",
]
