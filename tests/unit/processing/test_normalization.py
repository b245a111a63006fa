from __future__ import annotations

import pytest

from docfill.processing.normalization import normalize_field_value
from docfill.typing.enums import FieldKind
from docfill.typing.models import FieldDescriptor


@pytest.mark.parametrize(
    ("kind", "raw", "expected"),
    [
        (FieldKind.TEXT, "  Jane Doe ", "Jane Doe"),
        (FieldKind.NUMBER, "1 234,50", "1234.5"),
        (FieldKind.NUMBER, "12.000", "12"),
        (FieldKind.NUMBER, "twelve", "twelve"),
        (FieldKind.DATE, "2024-01-01", "2024-01-01"),
        (FieldKind.DATE, "31/12/2024", "2024-12-31"),
        (FieldKind.DATE, "March 5, 2024", "2024-03-05"),
        (FieldKind.DATE, "someday", "someday"),
    ],
)
def test_normalize_field_value(kind: FieldKind, raw: str, expected: str) -> None:
    assert normalize_field_value(FieldDescriptor(name="f", kind=kind, value=raw)) == expected


def test_select_value_uses_canonical_option_spelling() -> None:
    field = FieldDescriptor(name="plan", kind=FieldKind.SELECT, options=["Pro", "Basic"], value="basic")

    assert normalize_field_value(field) == "Basic"


def test_blank_value_normalizes_to_empty_string() -> None:
    assert normalize_field_value(FieldDescriptor(name="f", value="   ")) == ""
