"""Document, template and content models."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from docfill.typing.enums import FieldKind, FieldSource
from docfill.typing.models.field import FieldDescriptor, FieldPosition


class DocumentReference(BaseModel):
    """Loaded document and the field list it owns."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=lambda: f"doc_{uuid4().hex}")
    name: str
    content_url: str
    template_id: str | None = None
    fields: list[FieldDescriptor] = Field(default_factory=list)

    def find_field(self, field_id: str) -> FieldDescriptor | None:
        """Return the field with `field_id`, if any."""
        return next((field for field in self.fields if field.id == field_id), None)


class Template(BaseModel):
    """Reusable position-free field schema."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=lambda: f"template_{uuid4().hex}")
    name: str
    description: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    fields: list[FieldDescriptor]

    @field_validator("fields")
    @classmethod
    def _validate_position_free(cls, value: list[FieldDescriptor]) -> list[FieldDescriptor]:
        """Reject template fields bound to a document location.

        Args:
            value (list[FieldDescriptor]): Template fields.

        Raises:
            ValueError: If a field carries a position or a page.

        Returns:
            list[FieldDescriptor]: Validated fields.
        """
        for field in value:
            if field.position is not None or field.page is not None:
                raise ValueError(f"Template field '{field.name}' must not carry a position or page")  # noqa: TRY003
        return value


class PageContent(BaseModel):
    """Raw text of one page plus known marker coordinates."""

    model_config = ConfigDict(extra="forbid")

    number: int = Field(ge=1)
    text: str
    anchors: dict[str, FieldPosition] = Field(default_factory=dict)


class NativeFieldHint(BaseModel):
    """Form-field metadata read from the document itself."""

    model_config = ConfigDict(extra="forbid")

    name: str
    kind: FieldKind = FieldKind.TEXT
    page: int | None = Field(default=None, ge=1)
    position: FieldPosition | None = None
    required: bool | None = None
    placeholder_hint: str | None = None
    options: list[str] | None = None


class DocumentContent(BaseModel):
    """Content produced by a document content provider."""

    model_config = ConfigDict(extra="forbid")

    pages: list[PageContent] = Field(default_factory=list)
    native_fields: list[NativeFieldHint] = Field(default_factory=list)


class ExtractionOutcome(BaseModel):
    """Extracted fields plus recoverable warnings."""

    model_config = ConfigDict(extra="forbid")

    fields: list[FieldDescriptor]
    warnings: list[str] = Field(default_factory=list)
    used_fallback: bool = False


class Substitution(BaseModel):
    """One normalized value handed to a document writer."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    value: str
    kind: FieldKind = FieldKind.TEXT
    source: FieldSource = FieldSource.PLACEHOLDER
    page: int | None = None
    position: FieldPosition | None = None


class FilledArtifact(BaseModel):
    """Reference to a filled output document."""

    model_config = ConfigDict(extra="forbid")

    document_id: str
    name: str
    content_url: str
    applied: list[str] = Field(default_factory=list)
