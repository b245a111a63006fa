"""Document session orchestration: extract, merge, edit, fill."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docfill.async_runner import run_async
from docfill.exceptions import ExtractionFailure, UnknownFieldError
from docfill.logging import document_log_context, get_logger
from docfill.processing.extraction import extract_fields, fallback_fields
from docfill.processing.fill import fill_document
from docfill.processing.merge import append_field, merge_fields
from docfill.processing.placement import place_at
from docfill.typing.models import ExtractionOutcome

if TYPE_CHECKING:
    from collections.abc import Mapping

    from docfill.typing.models import DocumentReference, FieldDescriptor, FilledArtifact, Template
    from docfill.typing.protocol import DocumentContentProvider, DocumentWriter

logger = get_logger(__name__)


async def aextract_document(
    document: DocumentReference,
    provider: DocumentContentProvider,
    *,
    template: Template | None = None,
) -> ExtractionOutcome:
    """Scan a document and resolve its field list.

    The document's fields are replaced by the extracted fields, merged after
    the template's fields when a template is active. Content that cannot be
    read yields the fallback fields and a warning instead of an error.

    Args:
        document (DocumentReference): Loaded document, mutated in place.
        provider (DocumentContentProvider): Content source.
        template (Template | None): Active template.

    Returns:
        ExtractionOutcome: Resolved fields and recoverable warnings.
    """
    with document_log_context(document.id):
        try:
            content = await provider.read(document)
        except Exception as exc:
            failure = ExtractionFailure(message=f"Unreadable document content: {exc}")
            logger.warning("Document content unreadable, using fallback fields", extra={"error": str(failure)})
            outcome = ExtractionOutcome(fields=fallback_fields(), warnings=[str(failure)], used_fallback=True)
        else:
            outcome = extract_fields(content.pages, content.native_fields)

        fields = outcome.fields
        if template is not None:
            document.template_id = template.id
            fields = merge_fields(template.fields, outcome.fields)
            logger.info(
                "Template merged",
                extra={"template_id": template.id, "template_fields": len(template.fields), "fields": len(fields)},
            )

        document.fields = fields
        return outcome.model_copy(update={"fields": list(fields)})


def extract_document(
    document: DocumentReference,
    provider: DocumentContentProvider,
    *,
    template: Template | None = None,
) -> ExtractionOutcome:
    """Run `aextract_document` from synchronous code."""
    return run_async(aextract_document(document, provider, template=template))


def add_field_at(
    document: DocumentReference,
    *,
    x: float,
    y: float,
    page: int,
    name: str,
) -> FieldDescriptor | None:
    """Place a manual field on the document.

    Args:
        document (DocumentReference): Document owning the field list.
        x (float): Horizontal click position.
        y (float): Vertical click position.
        page (int): 1-based page number.
        name (str): Field name.

    Returns:
        FieldDescriptor | None: The new field, or None when the name is already taken.
    """
    field = place_at(x, y, page, name)
    if not append_field(document.fields, field):
        logger.info("Field name already present, placement ignored", extra={"field": name})
        return None
    return field


def set_field_value(document: DocumentReference, field_id: str, value: str | None) -> FieldDescriptor:
    """Update the value of one field.

    Args:
        document (DocumentReference): Document owning the field.
        field_id (str): Field identifier.
        value (str | None): New value, None to clear.

    Raises:
        UnknownFieldError: If the document has no such field.

    Returns:
        FieldDescriptor: Updated field.
    """
    field = document.find_field(field_id)
    if field is None:
        raise UnknownFieldError(field_id=field_id)
    field.value = value
    return field


def apply_values(document: DocumentReference, values: Mapping[str, str]) -> list[str]:
    """Set field values by field name.

    Args:
        document (DocumentReference): Document owning the fields.
        values (Mapping[str, str]): Values keyed by field name.

    Returns:
        list[str]: Names in `values` matching no field.
    """
    by_name = {field.name: field for field in document.fields}
    unknown: list[str] = []
    for name, value in values.items():
        field = by_name.get(name)
        if field is None:
            unknown.append(name)
            continue
        field.value = value
    if unknown:
        logger.warning("Values for unknown fields ignored", extra={"fields": unknown})
    return unknown


async def afill_document(document: DocumentReference, writer: DocumentWriter) -> FilledArtifact:
    """Fill the document with the current values of its own fields.

    Args:
        document (DocumentReference): Document with edited field values.
        writer (DocumentWriter): Backend producing the artifact.

    Returns:
        FilledArtifact: Reference to the filled document.
    """
    with document_log_context(document.id):
        return await fill_document(document, document.fields, writer)


def fill(document: DocumentReference, writer: DocumentWriter) -> FilledArtifact:
    """Run `afill_document` from synchronous code."""
    return run_async(afill_document(document, writer))
