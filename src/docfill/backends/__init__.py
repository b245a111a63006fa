"""Document content providers and writers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docfill.backends.pdf import PdfContentProvider, PdfDocumentWriter
from docfill.backends.text import TextContentProvider, TextDocumentWriter
from docfill.documents import document_suffix
from docfill.typing.protocol import DocumentContentProvider, DocumentWriter

if TYPE_CHECKING:
    from docfill.settings import Settings
    from docfill.typing.models import DocumentReference


def select_backends(
    document: DocumentReference,
    settings: Settings,
) -> tuple[DocumentContentProvider, DocumentWriter]:
    """Pick the provider and writer matching the document type.

    Args:
        document (DocumentReference): Loaded document.
        settings (Settings): Runtime settings.

    Returns:
        tuple[DocumentContentProvider, DocumentWriter]: Provider and writer.
    """
    if document_suffix(document) == ".pdf":
        return PdfContentProvider(settings), PdfDocumentWriter(settings)
    return TextContentProvider(settings), TextDocumentWriter(settings)


__all__ = [
    "DocumentContentProvider",
    "DocumentWriter",
    "PdfContentProvider",
    "PdfDocumentWriter",
    "TextContentProvider",
    "TextDocumentWriter",
    "select_backends",
]
