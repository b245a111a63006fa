"""Typed field value normalization helpers."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, assert_never

from docfill.typing.enums import FieldKind

if TYPE_CHECKING:
    from docfill.typing.models import FieldDescriptor

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%m/%d/%Y",
    "%d %B %Y",
    "%B %d, %Y",
)


def normalize_field_value(field: FieldDescriptor) -> str:
    """Normalize a field value according to its kind.

    Unparsable values are returned stripped but otherwise unchanged.

    Args:
        field (FieldDescriptor): Field holding a value.

    Returns:
        str: Normalized value, empty when the field has none.
    """
    stripped = (field.value or "").strip()
    if not stripped:
        return ""

    match field.kind:
        case FieldKind.TEXT:
            return stripped
        case FieldKind.NUMBER:
            return _normalize_decimal(stripped)
        case FieldKind.DATE:
            return _normalize_date(stripped)
        case FieldKind.SELECT:
            return _normalize_choice(stripped, field.options or [])
        case _:
            assert_never(field.kind)


def _normalize_decimal(value: str) -> str:
    compact = value.replace(" ", "").replace("\u00a0", "").replace(",", ".")
    try:
        number = Decimal(compact)
    except InvalidOperation:
        return value
    if not number.is_finite():
        return value
    normalized = format(number.normalize(), "f")
    if "." in normalized:
        normalized = normalized.rstrip("0").rstrip(".")
    return normalized


def _normalize_date(value: str) -> str:
    for date_format in _DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, date_format)  # noqa: DTZ007
        except ValueError:
            continue
        return parsed.date().isoformat()
    return value


def _normalize_choice(value: str, options: list[str]) -> str:
    """Map a case-insensitive match onto the canonical option spelling."""
    lowered = value.casefold()
    return next((option for option in options if option.casefold() == lowered), value)
