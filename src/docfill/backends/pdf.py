"""PyMuPDF-backed PDF content provider and writer."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

try:
    import pymupdf as fitz
except Exception:  # pragma: no cover - optional dependency at runtime
    fitz: Any
    fitz = None

from docfill.documents import artifact_path, read_document_bytes, write_bytes_atomic
from docfill.exceptions import BackendError
from docfill.logging import get_logger
from docfill.processing.placeholders import iter_placeholder_markers
from docfill.typing.enums import FieldKind, FieldSource
from docfill.typing.models import DocumentContent, FieldPosition, FilledArtifact, NativeFieldHint, PageContent

if TYPE_CHECKING:
    from docfill.settings import Settings
    from docfill.typing.models import DocumentReference, Substitution

logger = get_logger(__name__)

_PDF_FIELD_IS_REQUIRED = 1 << 1
_TEXT_WIDGETS = {"Text"}
_CHOICE_WIDGETS = {"ComboBox", "ListBox"}
_REDACTION_FILL = (1, 1, 1)


def _require_fitz() -> None:
    if fitz is None:
        raise BackendError(message="PyMuPDF is required for PDF documents")


def _position_from_rect(rect: Any) -> FieldPosition:
    return FieldPosition(x=rect.x0, y=rect.y0, width=rect.width, height=rect.height)


def _hint_from_widget(widget: Any, page_number: int) -> NativeFieldHint | None:
    """Map a PDF widget to native field metadata.

    Args:
        widget (Any): PyMuPDF widget.
        page_number (int): 1-based page number.

    Returns:
        NativeFieldHint | None: Hint, or None for unsupported widget types.
    """
    name = (widget.field_name or "").strip()
    type_name = widget.field_type_string
    if not name or type_name not in _TEXT_WIDGETS | _CHOICE_WIDGETS:
        logger.debug("Skipping native widget", extra={"field": name, "type": type_name})
        return None

    options = [str(choice) for choice in widget.choice_values or []] if type_name in _CHOICE_WIDGETS else []
    return NativeFieldHint(
        name=name,
        kind=FieldKind.SELECT if options else FieldKind.TEXT,
        page=page_number,
        position=_position_from_rect(widget.rect),
        required=bool((widget.field_flags or 0) & _PDF_FIELD_IS_REQUIRED),
        placeholder_hint=(widget.field_label or "").strip() or None,
        options=options or None,
    )


def _read_pdf_content(data: bytes) -> DocumentContent:
    """Extract page text, marker boxes and native widgets from PDF bytes."""
    pages: list[PageContent] = []
    native_fields: list[NativeFieldHint] = []

    with fitz.open(stream=data, filetype="pdf") as doc:
        for number, page in enumerate(doc, start=1):
            text = page.get_text("text")
            anchors: dict[str, FieldPosition] = {}
            for raw, name in iter_placeholder_markers(text):
                if name in anchors:
                    continue
                rects = page.search_for(raw)
                if rects:
                    anchors[name] = _position_from_rect(rects[0])
            pages.append(PageContent(number=number, text=text, anchors=anchors))

            for widget in page.widgets() or []:
                hint = _hint_from_widget(widget, number)
                if hint is not None:
                    native_fields.append(hint)

    return DocumentContent(pages=pages, native_fields=native_fields)


class PdfContentProvider:
    """Read PDF text and form widgets with PyMuPDF."""

    def __init__(self, settings: Settings) -> None:
        """Initialize provider.

        Args:
            settings (Settings): Runtime settings.
        """
        self._settings = settings

    async def read(self, document: DocumentReference) -> DocumentContent:
        """Read page text, marker coordinates and native fields.

        Args:
            document (DocumentReference): Document to read.

        Raises:
            BackendError: If PyMuPDF is unavailable or the PDF cannot be parsed.

        Returns:
            DocumentContent: Extracted content.
        """
        _require_fitz()
        data = await read_document_bytes(document, self._settings)
        try:
            content = await asyncio.to_thread(_read_pdf_content, data)
        except Exception as exc:
            raise BackendError(message=f"Failed to read PDF '{document.name}': {exc}") from exc

        logger.info(
            "PDF content read",
            extra={"pages": len(content.pages), "native_fields": len(content.native_fields)},
        )
        return content


def _fill_widgets(page: Any, by_name: dict[str, Substitution]) -> set[str]:
    """Set the value of every widget whose name has a substitution."""
    filled: set[str] = set()
    for widget in page.widgets() or []:
        item = by_name.get(widget.field_name)
        if item is None:
            continue
        widget.field_value = item.value
        widget.update()
        filled.add(item.name)
    return filled


def _replace_markers(page: Any, by_name: dict[str, Substitution], font_size: float) -> set[str]:
    """Redact `{{name}}` markers of `page` and write their values in place.

    Args:
        page (Any): PyMuPDF page.
        by_name (dict[str, Substitution]): Substitutions keyed by field name.
        font_size (float): Font size of written text.

    Returns:
        set[str]: Names whose marker was found and replaced.
    """
    placements: list[tuple[Any, str]] = []
    replaced: set[str] = set()
    for raw, name in iter_placeholder_markers(page.get_text("text")):
        item = by_name.get(name)
        if item is None:
            continue
        rects = page.search_for(raw)
        for rect in rects:
            page.add_redact_annot(rect, fill=_REDACTION_FILL)
            placements.append((rect, item.value))
        if rects:
            replaced.add(name)

    if placements:
        page.apply_redactions()
        for rect, value in placements:
            page.insert_text(fitz.Point(rect.x0, rect.y1 - rect.height * 0.2), value, fontsize=font_size)
    return replaced


def _fill_pdf(data: bytes, substitutions: list[Substitution], font_size: float) -> tuple[bytes, set[str]]:
    """Write substitutions into PDF bytes.

    A value goes into the form widgets bearing its field name, whatever the
    field source. Values without a widget replace their text markers. Manual
    fields with neither are drawn at their position.

    Args:
        data (bytes): Source PDF.
        substitutions (list[Substitution]): Values to write.
        font_size (float): Font size of written text.

    Returns:
        tuple[bytes, set[str]]: Filled PDF and names that were written.
    """
    by_name = {item.name: item for item in substitutions}
    applied: set[str] = set()

    with fitz.open(stream=data, filetype="pdf") as doc:
        for page in doc:
            applied |= _fill_widgets(page, by_name)

        textual = {name: item for name, item in by_name.items() if name not in applied}
        for page in doc:
            applied |= _replace_markers(page, textual, font_size)

        for item in textual.values():
            if item.name in applied or item.source != FieldSource.MANUAL or item.position is None:
                continue
            page_index = (item.page or 1) - 1
            if not 0 <= page_index < len(doc):
                logger.warning("Field page out of range", extra={"field": item.name, "page": item.page})
                continue
            box = item.position
            doc[page_index].insert_text(
                fitz.Point(box.x, box.y + min(box.height, font_size * 1.2)),
                item.value,
                fontsize=font_size,
            )
            applied.add(item.name)

        skipped = [name for name in by_name if name not in applied]
        if skipped:
            logger.info("Values without widget, marker or manual position", extra={"fields": skipped})
        return doc.tobytes(garbage=3, deflate=True), applied


class PdfDocumentWriter:
    """Fill PDF widgets and placeholder markers with PyMuPDF."""

    def __init__(self, settings: Settings) -> None:
        """Initialize writer.

        Args:
            settings (Settings): Runtime settings.
        """
        self._settings = settings

    async def write(self, document: DocumentReference, substitutions: list[Substitution]) -> FilledArtifact:
        """Write a filled copy of the PDF into the output directory.

        Args:
            document (DocumentReference): Source document.
            substitutions (list[Substitution]): Values to write.

        Raises:
            BackendError: If PyMuPDF is unavailable or the PDF cannot be transformed.

        Returns:
            FilledArtifact: Reference to the filled copy.
        """
        _require_fitz()
        data = await read_document_bytes(document, self._settings)
        try:
            filled, applied = await asyncio.to_thread(
                _fill_pdf,
                data,
                substitutions,
                self._settings.fill_font_size,
            )
        except Exception as exc:
            raise BackendError(message=f"Failed to fill PDF '{document.name}': {exc}") from exc

        target = await asyncio.to_thread(
            write_bytes_atomic,
            artifact_path(document, self._settings.output_dir),
            filled,
        )
        return FilledArtifact(
            document_id=document.id,
            name=target.name,
            content_url=str(target),
            applied=[item.name for item in substitutions if item.name in applied],
        )
