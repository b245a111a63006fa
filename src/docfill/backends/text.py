"""Plain-text documents: pages separated by form feeds."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from docfill.documents import artifact_path, read_document_bytes, write_bytes_atomic
from docfill.exceptions import BackendError
from docfill.logging import get_logger
from docfill.processing.placeholders import substitute_placeholders
from docfill.typing.enums import FieldSource
from docfill.typing.models import DocumentContent, FilledArtifact, PageContent

if TYPE_CHECKING:
    from docfill.settings import Settings
    from docfill.typing.models import DocumentReference, Substitution

logger = get_logger(__name__)

PAGE_SEPARATOR = "\f"


def _decode(data: bytes, document: DocumentReference) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BackendError(message=f"Document '{document.name}' is not valid UTF-8 text") from exc


class TextContentProvider:
    """Read UTF-8 text documents page by page."""

    def __init__(self, settings: Settings) -> None:
        """Initialize provider.

        Args:
            settings (Settings): Runtime settings.
        """
        self._settings = settings

    async def read(self, document: DocumentReference) -> DocumentContent:
        """Split the document text into pages.

        Args:
            document (DocumentReference): Document to read.

        Returns:
            DocumentContent: Pages without anchors or native fields.
        """
        text = _decode(await read_document_bytes(document, self._settings), document)
        pages = [
            PageContent(number=number, text=page_text)
            for number, page_text in enumerate(text.split(PAGE_SEPARATOR), start=1)
        ]
        return DocumentContent(pages=pages)


class TextDocumentWriter:
    """Substitute `{{name}}` markers in text documents."""

    def __init__(self, settings: Settings) -> None:
        """Initialize writer.

        Args:
            settings (Settings): Runtime settings.
        """
        self._settings = settings

    async def write(self, document: DocumentReference, substitutions: list[Substitution]) -> FilledArtifact:
        """Write a filled copy of the document into the output directory.

        Manual fields have no textual anchor and are not written.

        Args:
            document (DocumentReference): Source document.
            substitutions (list[Substitution]): Values to write.

        Returns:
            FilledArtifact: Reference to the filled copy.
        """
        text = _decode(await read_document_bytes(document, self._settings), document)
        values = {item.name: item.value for item in substitutions if item.source != FieldSource.MANUAL}
        filled, applied = substitute_placeholders(text, values)

        skipped = [item.name for item in substitutions if item.name not in applied]
        if skipped:
            logger.debug("Values without marker in text document", extra={"fields": skipped})

        target = await asyncio.to_thread(
            write_bytes_atomic,
            artifact_path(document, self._settings.output_dir),
            filled.encode("utf-8"),
        )
        return FilledArtifact(
            document_id=document.id,
            name=target.name,
            content_url=str(target),
            applied=[item.name for item in substitutions if item.name in applied],
        )
