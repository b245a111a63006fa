from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

import pytest

from docfill.exceptions import TemplateError
from docfill.template_store import TemplateStore, create_template
from docfill.typing.enums import FieldKind, FieldSource
from docfill.typing.models import FieldDescriptor, FieldPosition, Template, new_field


def test_create_template_strips_document_binding() -> None:
    positioned = FieldDescriptor(
        name="Signature",
        position=FieldPosition(x=1, y=2, width=3, height=4),
        page=2,
        value="Jane",
        source=FieldSource.MANUAL,
    )

    template = create_template("  Contract ", "NDA", [positioned])

    (field,) = template.fields
    assert template.name == "Contract"
    assert template.id.startswith("template_")
    assert field.id == positioned.id
    assert field.position is None
    assert field.page is None
    assert field.value is None
    assert field.source == FieldSource.TEMPLATE


@pytest.mark.parametrize(("name", "fields", "message"), [("  ", [new_field("a")], "name"), ("T", [], "at least one")])
def test_create_template_validation(name: str, fields: list, message: str) -> None:
    with pytest.raises(TemplateError, match=message):
        create_template(name, "", fields)


def test_save_load_and_get_template(tmp_path) -> None:
    store = TemplateStore(root=tmp_path)
    template = create_template("Onboarding", "", [new_field("Plan", FieldKind.SELECT, options=["Pro", "Basic"])])

    path = store.save(template)

    assert path.name.startswith("onboarding-template_")
    assert store.load(path) == template
    assert store.get(template.id) == template
    assert store.list_paths() == [path]


def test_save_uses_versioned_envelope_without_values(tmp_path) -> None:
    store = TemplateStore(root=tmp_path)
    field = new_field("Email")
    template = Template(name="T", fields=[field])
    template.fields[0].value = "leak@example.com"

    payload = json.loads(store.save(template).read_text(encoding="utf-8"))

    assert payload["template_file_version"] == 1
    assert "value" not in payload["template"]["fields"][0]


def test_list_templates_oldest_first(tmp_path) -> None:
    store = TemplateStore(root=tmp_path)
    now = datetime.now(UTC)
    newer = Template(name="a", created_at=now, fields=[new_field("x")])
    older = Template(name="b", created_at=now - timedelta(days=1), fields=[new_field("y")])
    store.save(newer)
    store.save(older)

    assert [template.name for template in store.list_templates()] == ["b", "a"]


def test_get_unknown_template_raises(tmp_path) -> None:
    with pytest.raises(TemplateError, match="not found"):
        TemplateStore(root=tmp_path).get("template_missing")


def test_load_rejects_invalid_files(tmp_path) -> None:
    store = TemplateStore(root=tmp_path)
    not_object = tmp_path / "list.template.json"
    not_object.write_text("[]", encoding="utf-8")
    invalid = tmp_path / "bad.template.json"
    invalid.write_text(json.dumps({"template": {"name": "x"}}), encoding="utf-8")

    with pytest.raises(TemplateError, match="JSON object"):
        store.load(not_object)
    with pytest.raises(TemplateError, match="Invalid template file"):
        store.load(invalid)
    with pytest.raises(TemplateError, match="Not a template file"):
        store.load(tmp_path / "other.json")


def test_load_accepts_bare_template_payload(tmp_path) -> None:
    path = tmp_path / "bare.template.json"
    path.write_text(json.dumps({"id": "template_1", "name": "Bare", "fields": [{"name": "a"}]}), encoding="utf-8")

    template = TemplateStore(root=tmp_path).load(path)

    assert template.id == "template_1"
    assert template.fields[0].name == "a"
