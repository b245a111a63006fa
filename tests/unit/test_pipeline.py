from __future__ import annotations

import asyncio

import pytest

from docfill.exceptions import BackendError, UnknownFieldError, ValidationError
from docfill.pipeline import (
    add_field_at,
    aextract_document,
    afill_document,
    apply_values,
    extract_document,
    fill,
    set_field_value,
)
from docfill.processing.extraction import FALLBACK_FIELD_NAMES
from docfill.typing.enums import FieldSource
from docfill.typing.models import (
    DocumentContent,
    DocumentReference,
    FilledArtifact,
    NativeFieldHint,
    PageContent,
    Template,
    new_field,
)


class _StaticProvider:
    def __init__(self, content: DocumentContent) -> None:
        self._content = content

    async def read(self, document):
        await asyncio.sleep(0)
        return self._content


class _BrokenProvider:
    def __init__(self, exc: Exception) -> None:
        self._exc = exc

    async def read(self, document):
        raise self._exc


class _EchoWriter:
    async def write(self, document, substitutions):
        return FilledArtifact(
            document_id=document.id,
            name="filled",
            content_url="memory://filled",
            applied=[item.name for item in substitutions],
        )


def _document() -> DocumentReference:
    return DocumentReference(name="form.txt", content_url="form.txt")


def _provider(*texts: str, native: list[NativeFieldHint] | None = None) -> _StaticProvider:
    pages = [PageContent(number=index, text=text) for index, text in enumerate(texts, start=1)]
    return _StaticProvider(DocumentContent(pages=pages, native_fields=native or []))


def test_extraction_replaces_document_fields() -> None:
    document = _document()

    outcome = extract_document(document, _provider("{{a}} {{b}}", "{{a}}"))

    assert [field.name for field in document.fields] == ["a", "b"]
    assert [field.name for field in outcome.fields] == ["a", "b"]
    assert document.template_id is None


def test_extraction_merges_active_template_first() -> None:
    template = Template(name="T", fields=[new_field("b", required=False), new_field("z")])
    document = _document()

    extract_document(document, _provider("{{a}} {{b}}"), template=template)

    assert [field.name for field in document.fields] == ["b", "z", "a"]
    assert document.fields[0].source == FieldSource.TEMPLATE
    assert document.fields[0].required is False
    assert document.template_id == template.id
    assert document.fields[0] is not template.fields[0]


def test_reextraction_against_template_rebuilds_from_fresh_scan() -> None:
    template = Template(name="T", fields=[new_field("a")])
    document = _document()
    extract_document(document, _provider("{{a}} {{b}}"), template=template)

    extract_document(document, _provider("{{c}}"), template=template)

    assert [field.name for field in document.fields] == ["a", "c"]


@pytest.mark.parametrize("exc", [BackendError(message="cannot parse"), RuntimeError("boom")])
def test_unreadable_content_falls_back_with_warning(exc: Exception) -> None:
    document = _document()

    outcome = asyncio.run(aextract_document(document, _BrokenProvider(exc)))

    assert outcome.used_fallback
    assert [field.name for field in document.fields] == list(FALLBACK_FIELD_NAMES)
    assert str(exc) in outcome.warnings[0]


def test_add_field_at_appends_unique_names_only() -> None:
    document = _document()
    extract_document(document, _provider("{{Signature}}"))

    assert add_field_at(document, x=150, y=220, page=2, name="Signature") is None
    added = add_field_at(document, x=150, y=220, page=2, name="Initials")

    assert added is not None
    assert document.fields[-1] is added
    assert added.page == 2


def test_set_field_value_and_unknown_field() -> None:
    document = _document()
    extract_document(document, _provider("{{a}}"))
    field_id = document.fields[0].id

    assert set_field_value(document, field_id, "v").value == "v"
    with pytest.raises(UnknownFieldError):
        set_field_value(document, "field_missing", "v")


def test_apply_values_reports_unknown_names() -> None:
    document = _document()
    extract_document(document, _provider("{{a}}"))

    assert apply_values(document, {"a": "1", "zzz": "2"}) == ["zzz"]
    assert document.fields[0].value == "1"


def test_fill_uses_document_fields() -> None:
    document = _document()
    extract_document(document, _provider("{{full_name}} {{date}}"))
    apply_values(document, {"full_name": "Jane Doe", "date": "2024-01-01"})

    artifact = fill(document, _EchoWriter())

    assert artifact.applied == ["full_name", "date"]


def test_fill_blocks_on_missing_required_values() -> None:
    document = _document()
    extract_document(document, _provider("{{a}}", "", ""))
    add_field_at(document, x=0, y=0, page=1, name="optional")

    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(afill_document(document, _EchoWriter()))
    assert exc_info.value.count == 1


def test_native_fields_flow_through_extraction() -> None:
    document = _document()

    extract_document(document, _provider("{{email}}", native=[NativeFieldHint(name="email", page=1)]))

    assert document.fields[0].source == FieldSource.NATIVE


def test_sync_fill_inside_running_loop_keeps_validation_error() -> None:
    document = _document()
    extract_document(document, _provider("{{a}}"))

    async def _fill_from_loop() -> None:
        fill(document, _EchoWriter())

    with pytest.raises(ValidationError):
        asyncio.run(_fill_from_loop())
