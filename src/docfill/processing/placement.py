"""Manual field authoring from a click position."""

from __future__ import annotations

from docfill.typing.enums import FieldKind, FieldSource
from docfill.typing.models import FieldDescriptor, FieldPosition

MANUAL_FIELD_WIDTH = 200.0
MANUAL_FIELD_HEIGHT = 30.0


def place_at(x: float, y: float, page: int, name: str) -> FieldDescriptor:
    """Create an optional text field anchored at `(x, y)` on `page`.

    Name uniqueness is left to whoever appends the field to a list.
    """
    return FieldDescriptor(
        name=name,
        kind=FieldKind.TEXT,
        required=False,
        placeholder_hint=f"Enter {name.lower()}",
        position=FieldPosition(x=x, y=y, width=MANUAL_FIELD_WIDTH, height=MANUAL_FIELD_HEIGHT),
        page=page,
        source=FieldSource.MANUAL,
    )
