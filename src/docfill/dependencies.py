"""Runtime dependency checks for CLI commands."""

from __future__ import annotations

import importlib.util

from docfill.exceptions import DependencyError


def _is_module_available(module_name: str) -> bool:
    """Check whether a module can be imported.

    Args:
        module_name (str): Python module name.

    Returns:
        bool: True if import spec exists.
    """
    return importlib.util.find_spec(module_name) is not None


def _ensure_available(modules_by_package: dict[str, str], *, purpose: str) -> None:
    """Raise when any package of the mapping cannot be imported.

    Args:
        modules_by_package (dict[str, str]): Mapping of package name -> import module.
        purpose (str): What the packages are needed for.

    Raises:
        DependencyError: If one or more packages are missing.
    """
    missing = [package for package, module in modules_by_package.items() if not _is_module_available(module)]
    if missing:
        raise DependencyError(missing_package=missing, message=purpose)


def ensure_pdf_dependencies() -> None:
    """Validate dependencies needed to read and fill PDF documents."""
    _ensure_available({"pymupdf": "fitz"}, purpose="PDF documents")


def ensure_remote_dependencies() -> None:
    """Validate dependencies needed to download remote documents."""
    _ensure_available({"httpx": "httpx"}, purpose="remote documents")
