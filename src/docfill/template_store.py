"""Filesystem template storage and template authoring."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import TYPE_CHECKING, cast

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from docfill.exceptions import TemplateError
from docfill.logging import get_logger
from docfill.typing.enums import FieldSource
from docfill.typing.models import FieldDescriptor, Template

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)

_TEMPLATE_FILE_VERSION = 1
_TEMPLATE_SUFFIX = ".template.json"


class TemplateStore(BaseModel):
    """Directory of JSON template files."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    root: Path = Field(description="Template directory root.")

    def model_post_init(self, __context: object, /) -> None:
        """Ensure the template directory exists after model initialization.

        Args:
            __context (object): Pydantic model context.
        """
        self.root.mkdir(parents=True, exist_ok=True)

    def template_path(self, template: Template) -> Path:
        """Build the file path of a template.

        Args:
            template (Template): Template to locate.

        Returns:
            Path: Template file path.
        """
        safe_name = re.sub(r"[^a-z0-9._-]+", "-", template.name.lower()).strip("-") or "template"
        return self.root / f"{safe_name}-{template.id}{_TEMPLATE_SUFFIX}"

    @staticmethod
    def load(path: Path) -> Template:
        """Load a template file.

        Args:
            path (Path): Template file path.

        Raises:
            TemplateError: If the file is missing or not a template envelope.

        Returns:
            Template: Loaded template.
        """
        if not path.is_file() or not path.name.endswith(_TEMPLATE_SUFFIX):
            raise TemplateError(message=f"Not a template file: {path}")
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise TemplateError(message=f"Unreadable template file {path}: {exc}") from exc
        try:
            return Template.model_validate(_unwrap_envelope(payload))
        except PydanticValidationError as exc:
            raise TemplateError(message=f"Invalid template file {path}: {exc}") from exc

    def save(self, template: Template) -> Path:
        """Persist a template.

        Args:
            template (Template): Template to write.

        Returns:
            Path: Written file path.
        """
        path = self.template_path(template)
        envelope = {
            "template_file_version": _TEMPLATE_FILE_VERSION,
            "template": template.model_dump(mode="json", exclude={"fields": {"__all__": {"value"}}}),
        }
        path.write_text(json.dumps(envelope, indent=2, sort_keys=True), encoding="utf-8")
        logger.info("Template saved", extra={"template_path": str(path)})
        return path

    def list_paths(self) -> list[Path]:
        """List template files.

        Returns:
            list[Path]: Template files sorted by name.
        """
        return sorted(self.root.glob(f"*{_TEMPLATE_SUFFIX}"))

    def list_templates(self) -> list[Template]:
        """Load every stored template, oldest first.

        Returns:
            list[Template]: Templates ordered by creation time.
        """
        templates = [self.load(path) for path in self.list_paths()]
        return sorted(templates, key=lambda template: template.created_at)

    def get(self, template_id: str) -> Template:
        """Return the template with `template_id`.

        Args:
            template_id (str): Template identifier.

        Raises:
            TemplateError: If no stored template has this id.

        Returns:
            Template: Matching template.
        """
        for path in self.root.glob(f"*-{template_id}{_TEMPLATE_SUFFIX}"):
            template = self.load(path)
            if template.id == template_id:
                return template
        raise TemplateError(message=f"Template id not found: {template_id}")


def create_template(name: str, description: str, fields: Sequence[FieldDescriptor]) -> Template:
    """Author a new template from a list of fields.

    Positions, pages and values are dropped; the template is a position-free schema.

    Args:
        name (str): Template name.
        description (str): Free-text description.
        fields (Sequence[FieldDescriptor]): Field schema.

    Raises:
        TemplateError: If the name is blank or no field is given.

    Returns:
        Template: New template with a generated id and creation time.
    """
    if not name.strip():
        raise TemplateError(message="Template name is required")
    if not fields:
        raise TemplateError(message="A template needs at least one field")

    schema_fields = [
        FieldDescriptor(
            id=field.id,
            name=field.name,
            kind=field.kind,
            placeholder_hint=field.placeholder_hint,
            required=field.required,
            options=list(field.options) if field.options is not None else None,
            source=FieldSource.TEMPLATE,
        )
        for field in fields
    ]
    return Template(name=name.strip(), description=description, fields=schema_fields)


def _unwrap_envelope(payload: object) -> dict[str, object]:
    """Return the template object of a file payload.

    Args:
        payload (object): Raw JSON payload.

    Raises:
        TemplateError: If payload is not a JSON object.

    Returns:
        dict[str, object]: Template object payload.
    """
    if not isinstance(payload, dict):
        raise TemplateError(message="Template payload must be a JSON object")
    payload_obj = cast("dict[str, object]", payload)
    embedded = payload_obj.get("template")
    if isinstance(embedded, dict):
        return cast("dict[str, object]", embedded)
    return payload_obj
