"""Field descriptor models."""

from __future__ import annotations

from typing import Self
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from docfill.typing.enums import FieldKind, FieldSource


def generate_field_id() -> str:
    """Return a fresh, never reused field identifier."""
    return f"field_{uuid4().hex}"


class FieldPosition(BaseModel):
    """Box in document coordinates (top-left origin)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)


class FieldDescriptor(BaseModel):
    """Single fillable slot of a document or template."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: str = Field(default_factory=generate_field_id)
    name: str
    kind: FieldKind = FieldKind.TEXT
    placeholder_hint: str = ""
    required: bool = True
    options: list[str] | None = None
    value: str | None = None
    position: FieldPosition | None = None
    page: int | None = Field(default=None, ge=1)
    source: FieldSource = FieldSource.PLACEHOLDER

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        """Reject blank field names.

        Args:
            value (str): Raw name.

        Raises:
            ValueError: If the name is blank.

        Returns:
            str: Validated name.
        """
        if not value.strip():
            raise ValueError("Field name must not be empty")  # noqa: TRY003
        return value

    @model_validator(mode="after")
    def _validate_options(self) -> Self:
        """Ensure `options` is present iff the field is a select.

        Raises:
            ValueError: If options and kind disagree.

        Returns:
            Self: Validated descriptor.
        """
        if self.kind == FieldKind.SELECT:
            if not self.options:
                raise ValueError(f"Select field '{self.name}' requires a non-empty options list")  # noqa: TRY003
        elif self.options is not None:
            raise ValueError(f"Options are only allowed on select fields, got kind '{self.kind}'")  # noqa: TRY003
        return self

    @property
    def has_value(self) -> bool:
        """Return whether a non-blank value was entered."""
        return bool(self.value and self.value.strip())


def new_field(
    name: str,
    kind: FieldKind = FieldKind.TEXT,
    required: bool = True,  # noqa: FBT001, FBT002
    hint: str = "",
    *,
    options: list[str] | None = None,
    source: FieldSource = FieldSource.TEMPLATE,
) -> FieldDescriptor:
    """Create a descriptor with a fresh id and no value, position or page.

    Args:
        name (str): Field label.
        kind (FieldKind): Input kind.
        required (bool): Whether a value is mandatory at fill time.
        hint (str): Input hint text.
        options (list[str] | None): Choices for select fields.
        source (FieldSource): Origin of the field.

    Returns:
        FieldDescriptor: New descriptor.
    """
    return FieldDescriptor(
        name=name,
        kind=kind,
        required=required,
        placeholder_hint=hint,
        options=options,
        source=source,
    )
