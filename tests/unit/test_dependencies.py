from __future__ import annotations

import pytest

from docfill.dependencies import ensure_pdf_dependencies, ensure_remote_dependencies
from docfill.exceptions import DependencyError


def test_ensure_pdf_dependencies_succeeds(monkeypatch) -> None:
    monkeypatch.setattr("docfill.dependencies._is_module_available", lambda module_name: True)
    ensure_pdf_dependencies()


def test_ensure_pdf_dependencies_raises(monkeypatch) -> None:
    monkeypatch.setattr("docfill.dependencies._is_module_available", lambda module_name: False)
    with pytest.raises(DependencyError, match="pymupdf"):
        ensure_pdf_dependencies()


def test_ensure_remote_dependencies_raises(monkeypatch) -> None:
    monkeypatch.setattr("docfill.dependencies._is_module_available", lambda module_name: module_name != "httpx")
    with pytest.raises(DependencyError, match="remote documents"):
        ensure_remote_dependencies()
