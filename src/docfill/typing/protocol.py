"""Backend interfaces."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from docfill.typing.models import DocumentContent, DocumentReference, FilledArtifact, Substitution


class DocumentContentProvider(Protocol):
    """Source of per-page text and native form-field metadata."""

    async def read(self, document: DocumentReference) -> DocumentContent:
        """Read the content of a loaded document.

        Args:
            document: Document to read.

        Returns:
            DocumentContent: Page text and native field hints.
        """


class DocumentWriter(Protocol):
    """Producer of filled artifacts."""

    async def write(self, document: DocumentReference, substitutions: list[Substitution]) -> FilledArtifact:
        """Write substitutions into a copy of the document.

        Args:
            document: Source document.
            substitutions: Normalized values to write.

        Returns:
            FilledArtifact: Reference to the produced document.
        """
