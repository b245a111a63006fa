"""Fill/export engine: validated field values to a filled artifact."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docfill.exceptions import PackageError, ProcessingError, ValidationError
from docfill.logging import get_logger
from docfill.processing.normalization import normalize_field_value
from docfill.typing.models import Substitution

if TYPE_CHECKING:
    from collections.abc import Sequence

    from docfill.typing.models import DocumentReference, FieldDescriptor, FilledArtifact
    from docfill.typing.protocol import DocumentWriter

logger = get_logger(__name__)


def missing_required_fields(fields: Sequence[FieldDescriptor]) -> list[FieldDescriptor]:
    """Return required fields whose value is absent or blank."""
    return [field for field in fields if field.required and not field.has_value]


def validate_required_fields(fields: Sequence[FieldDescriptor]) -> None:
    """Ensure every required field holds a value.

    Args:
        fields (Sequence[FieldDescriptor]): Fields to check.

    Raises:
        ValidationError: If one or more required fields are unfilled.
    """
    missing = missing_required_fields(fields)
    if missing:
        raise ValidationError(missing_fields=tuple(field.name for field in missing))


def build_substitutions(fields: Sequence[FieldDescriptor]) -> list[Substitution]:
    """Turn filled fields into normalized substitutions, skipping empty ones.

    Args:
        fields (Sequence[FieldDescriptor]): Fields in display order.

    Returns:
        list[Substitution]: One substitution per field holding a value.
    """
    substitutions: list[Substitution] = []
    for field in fields:
        if not field.has_value:
            continue
        substitutions.append(
            Substitution(
                name=field.name,
                value=normalize_field_value(field),
                kind=field.kind,
                source=field.source,
                page=field.page,
                position=field.position,
            ),
        )
    return substitutions


async def fill_document(
    document: DocumentReference,
    fields: Sequence[FieldDescriptor],
    writer: DocumentWriter,
) -> FilledArtifact:
    """Validate `fields` and write their values into a copy of `document`.

    All-or-nothing: the writer is not called when validation fails, and writer
    faults surface as `ProcessingError` with no artifact.

    Args:
        document (DocumentReference): Source document.
        fields (Sequence[FieldDescriptor]): Fields with user values.
        writer (DocumentWriter): Backend producing the artifact.

    Raises:
        ValidationError: If required fields are unfilled.
        ProcessingError: If the document content cannot be transformed.

    Returns:
        FilledArtifact: Reference to the filled document.
    """
    validate_required_fields(fields)
    substitutions = build_substitutions(fields)

    try:
        artifact = await writer.write(document, substitutions)
    except ProcessingError:
        raise
    except PackageError as exc:
        raise ProcessingError(message=f"Failed to fill document '{document.name}': {exc}") from exc
    except Exception as exc:
        logger.exception("Unexpected writer failure", extra={"document": document.name})
        raise ProcessingError(message=f"Failed to fill document '{document.name}': {exc}") from exc

    logger.info(
        "Document filled",
        extra={
            "document": document.name,
            "substitutions": len(substitutions),
            "applied": len(artifact.applied),
            "artifact": artifact.content_url,
        },
    )
    return artifact
