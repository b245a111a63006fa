"""Placeholder extraction: raw page content to canonical field descriptors."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docfill.exceptions import ExtractionFailure
from docfill.logging import get_logger
from docfill.processing.placeholders import iter_placeholder_markers
from docfill.typing.enums import FieldKind, FieldSource
from docfill.typing.models import (
    ExtractionOutcome,
    FieldDescriptor,
    FieldPosition,
    NativeFieldHint,
    PageContent,
    generate_field_id,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)

DEFAULT_BOX_X = 100.0
DEFAULT_BOX_Y = 200.0
DEFAULT_ROW_HEIGHT = 50.0
DEFAULT_BOX_WIDTH = 300.0
DEFAULT_BOX_HEIGHT = 30.0

FALLBACK_FIELD_NAMES = ("Full Name", "Email")


def _hint_for(name: str) -> str:
    return f"Enter {name}"


def _default_position(index: int) -> FieldPosition:
    """Return the advisory box of the `index`-th unique placeholder."""
    return FieldPosition(
        x=DEFAULT_BOX_X,
        y=DEFAULT_BOX_Y + index * DEFAULT_ROW_HEIGHT,
        width=DEFAULT_BOX_WIDTH,
        height=DEFAULT_BOX_HEIGHT,
    )


def _coerce_pages(pages: Sequence[str | PageContent]) -> list[PageContent]:
    """Normalize raw strings into numbered page content.

    Args:
        pages (Sequence[str | PageContent]): Pages in document order.

    Raises:
        ExtractionFailure: If a page is neither text nor page content.

    Returns:
        list[PageContent]: Pages numbered from 1.
    """
    coerced: list[PageContent] = []
    for number, page in enumerate(pages, start=1):
        if isinstance(page, PageContent):
            coerced.append(page)
        elif isinstance(page, str):
            coerced.append(PageContent(number=number, text=page))
        else:
            raise ExtractionFailure(message=f"Unreadable content on page {number}: {type(page).__name__}")
    return coerced


def placeholder_fields(pages: Sequence[str | PageContent]) -> list[FieldDescriptor]:
    """Build one descriptor per unique placeholder, first occurrence wins.

    Args:
        pages (Sequence[str | PageContent]): Pages in document order.

    Returns:
        list[FieldDescriptor]: Placeholder-derived descriptors.
    """
    fields: dict[str, FieldDescriptor] = {}
    for page in _coerce_pages(pages):
        for _, name in iter_placeholder_markers(page.text):
            if name in fields:
                continue
            anchor = page.anchors.get(name)
            fields[name] = FieldDescriptor(
                name=name,
                kind=FieldKind.TEXT,
                required=True,
                placeholder_hint=_hint_for(name),
                position=anchor or _default_position(len(fields)),
                page=page.number if anchor else 1,
                source=FieldSource.PLACEHOLDER,
            )
    return list(fields.values())


def _from_native(hint: NativeFieldHint, fallback: FieldDescriptor | None) -> FieldDescriptor:
    """Build a descriptor from native metadata, borrowing defaults from `fallback`."""
    required = hint.required
    if required is None:
        required = fallback.required if fallback else True
    placeholder_hint = hint.placeholder_hint
    if not placeholder_hint:
        placeholder_hint = fallback.placeholder_hint if fallback else _hint_for(hint.name)

    return FieldDescriptor(
        id=fallback.id if fallback else generate_field_id(),
        name=hint.name,
        kind=hint.kind,
        required=required,
        placeholder_hint=placeholder_hint,
        options=hint.options if hint.kind == FieldKind.SELECT else None,
        position=hint.position,
        page=hint.page,
        source=FieldSource.NATIVE,
    )


def apply_native_hints(
    fields: list[FieldDescriptor],
    native_hints: Sequence[NativeFieldHint],
) -> list[FieldDescriptor]:
    """Let native form fields take precedence over same-named placeholders.

    Native entries replace placeholder descriptors in place; native-only entries
    are appended in native order.

    Args:
        fields (list[FieldDescriptor]): Placeholder-derived descriptors.
        native_hints (Sequence[NativeFieldHint]): Native form-field metadata.

    Returns:
        list[FieldDescriptor]: Combined descriptors, unique by name.
    """
    by_name = {field.name: field for field in fields}
    resolved = dict(by_name)
    applied: set[str] = set()
    for hint in native_hints:
        if hint.name in applied:
            continue
        applied.add(hint.name)
        resolved[hint.name] = _from_native(hint, by_name.get(hint.name))
    return list(resolved.values())


def fallback_fields() -> list[FieldDescriptor]:
    """Return the generic fields offered when nothing was found."""
    return [
        FieldDescriptor(
            name=name,
            kind=FieldKind.TEXT,
            required=True,
            placeholder_hint=_hint_for(name.lower()),
            position=_default_position(index),
            page=1,
            source=FieldSource.FALLBACK,
        )
        for index, name in enumerate(FALLBACK_FIELD_NAMES)
    ]


def extract_fields(
    pages: Sequence[str | PageContent],
    native_hints: Sequence[NativeFieldHint] | None = None,
) -> ExtractionOutcome:
    """Turn raw page content into a deduplicated, ordered field list.

    Never raises: internal faults yield the fallback fields and a warning.

    Args:
        pages (Sequence[str | PageContent]): Page text in document order.
        native_hints (Sequence[NativeFieldHint] | None): Optional native form-field metadata.

    Returns:
        ExtractionOutcome: Fields plus recoverable warnings.
    """
    try:
        fields = placeholder_fields(pages)
        if native_hints:
            fields = apply_native_hints(fields, native_hints)
    except Exception as exc:
        failure = exc
        if not isinstance(failure, ExtractionFailure):
            failure = ExtractionFailure(message=f"Extraction failed: {exc}")
        logger.warning("Field extraction failed, using fallback fields", extra={"error": str(failure)})
        return ExtractionOutcome(fields=fallback_fields(), warnings=[str(failure)], used_fallback=True)

    if not fields:
        logger.info("No fields found, using fallback fields", extra={"pages": len(pages)})
        return ExtractionOutcome(fields=fallback_fields(), used_fallback=True)

    logger.info("Fields extracted", extra={"fields": len(fields), "pages": len(pages)})
    return ExtractionOutcome(fields=fields)
