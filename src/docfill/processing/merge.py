"""Name-keyed, first-occurrence-wins field merging."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from docfill.typing.models import FieldDescriptor


def dedupe_by_name(fields: Iterable[FieldDescriptor]) -> list[FieldDescriptor]:
    """Keep the first descriptor of each name, in encounter order.

    Args:
        fields (Iterable[FieldDescriptor]): Descriptors to deduplicate.

    Returns:
        list[FieldDescriptor]: New list; the descriptors themselves are not copied.
    """
    by_name: dict[str, FieldDescriptor] = {}
    for field in fields:
        by_name.setdefault(field.name, field)
    return list(by_name.values())


def merge_fields(
    template_fields: Sequence[FieldDescriptor],
    extracted_fields: Sequence[FieldDescriptor],
) -> list[FieldDescriptor]:
    """Combine template and extracted fields, template first and winning on name collisions.

    Both inputs are left untouched; the result holds deep copies.

    Args:
        template_fields (Sequence[FieldDescriptor]): Fields of the active template.
        extracted_fields (Sequence[FieldDescriptor]): Freshly extracted fields.

    Returns:
        list[FieldDescriptor]: Merged fields, unique by name.
    """
    merged = dedupe_by_name([*template_fields, *extracted_fields])
    return [field.model_copy(deep=True) for field in merged]


def append_field(fields: list[FieldDescriptor], field: FieldDescriptor) -> bool:
    """Append `field` unless a field with the same name is already present.

    Args:
        fields (list[FieldDescriptor]): Owned field list, mutated in place.
        field (FieldDescriptor): Candidate field.

    Returns:
        bool: True when the field was appended.
    """
    if any(existing.name == field.name for existing in fields):
        return False
    fields.append(field)
    return True
