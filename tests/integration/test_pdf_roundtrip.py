from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from docfill.backends import select_backends
from docfill.documents import load_document
from docfill.pipeline import add_field_at, apply_values, extract_document, fill
from docfill.settings import Settings
from docfill.typing.enums import FieldKind, FieldSource
from docfill.typing.models import Template, new_field

if TYPE_CHECKING:
    from pathlib import Path

fitz = pytest.importorskip("fitz")


def _build_form(path: Path) -> None:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Name: {{full_name}}", fontsize=11)
    page.insert_text((72, 160), "Signed on {{date}}", fontsize=11)

    widget = fitz.Widget()
    widget.field_name = "email"
    widget.field_type = fitz.PDF_WIDGET_TYPE_TEXT
    widget.rect = fitz.Rect(72, 100, 272, 120)
    page.add_widget(widget)

    doc.save(str(path))
    doc.close()


def test_pdf_scan_and_fill_roundtrip(tmp_path: Path) -> None:
    source = tmp_path / "form.pdf"
    _build_form(source)
    settings = Settings(_env_file=None, OUTPUT_DIR=str(tmp_path / "out"))

    document = load_document(str(source))
    provider, writer = select_backends(document, settings)
    outcome = extract_document(document, provider)

    assert not outcome.used_fallback
    assert [field.name for field in document.fields] == ["full_name", "date", "email"]
    full_name = document.fields[0]
    assert full_name.page == 1
    assert full_name.position is not None
    assert full_name.position.x > 72
    assert full_name.position.y < 100
    assert document.fields[2].source == FieldSource.NATIVE

    document.fields[1].kind = FieldKind.DATE
    add_field_at(document, x=72, y=200, page=1, name="Initials")
    apply_values(
        document,
        {"full_name": "Jane Doe", "date": "31/12/2024", "email": "jane@example.com", "Initials": "JD"},
    )
    artifact = fill(document, writer)

    assert artifact.applied == ["full_name", "date", "email", "Initials"]
    with fitz.open(artifact.content_url) as filled:
        page = filled[0]
        text = page.get_text("text")
        values = {widget.field_name: widget.field_value for widget in page.widgets()}

    assert "Jane Doe" in text
    assert "2024-12-31" in text
    assert "JD" in text
    assert "{{full_name}}" not in text
    assert values["email"] == "jane@example.com"


def test_pdf_fill_leaves_source_untouched(tmp_path: Path) -> None:
    source = tmp_path / "form.pdf"
    _build_form(source)
    original = source.read_bytes()
    settings = Settings(_env_file=None, OUTPUT_DIR=str(tmp_path / "out"))

    document = load_document(str(source))
    provider, writer = select_backends(document, settings)
    extract_document(document, provider)
    apply_values(document, {"full_name": "A", "date": "2024-01-01"})
    fill(document, writer)

    assert source.read_bytes() == original
    assert (tmp_path / "out" / "form-filled.pdf").exists()


def test_template_field_fills_same_named_widget(tmp_path: Path) -> None:
    source = tmp_path / "form.pdf"
    _build_form(source)
    settings = Settings(_env_file=None, OUTPUT_DIR=str(tmp_path / "out"))
    template = Template(name="Contact", fields=[new_field("email")])

    document = load_document(str(source))
    provider, writer = select_backends(document, settings)
    extract_document(document, provider, template=template)

    assert [field.name for field in document.fields] == ["email", "full_name", "date"]
    assert document.fields[0].source == FieldSource.TEMPLATE
    apply_values(document, {"email": "jane@example.com", "full_name": "Jane Doe", "date": "2024-01-01"})
    artifact = fill(document, writer)

    assert artifact.applied == ["email", "full_name", "date"]
    with fitz.open(artifact.content_url) as filled:
        values = {widget.field_name: widget.field_value for widget in filled[0].widgets()}
    assert values["email"] == "jane@example.com"


def test_fallback_values_are_not_drawn_on_unmarked_pdf(tmp_path: Path) -> None:
    source = tmp_path / "plain.pdf"
    doc = fitz.open()
    doc.new_page().insert_text((72, 72), "Nothing to fill here", fontsize=11)
    doc.save(str(source))
    doc.close()
    settings = Settings(_env_file=None, OUTPUT_DIR=str(tmp_path / "out"))

    document = load_document(str(source))
    provider, writer = select_backends(document, settings)
    outcome = extract_document(document, provider)
    assert outcome.used_fallback

    apply_values(document, {"Full Name": "Jane Doe", "Email": "jane@example.com"})
    artifact = fill(document, writer)

    assert artifact.applied == []
    with fitz.open(artifact.content_url) as filled:
        text = filled[0].get_text("text")
    assert "Jane Doe" not in text
    assert "jane@example.com" not in text
