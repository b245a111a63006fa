"""Document loading and artifact persistence."""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

try:
    import httpx
except Exception:  # pragma: no cover - optional dependency at runtime
    httpx: Any
    httpx = None

from docfill.exceptions import BackendError
from docfill.logging import get_logger
from docfill.settings import Settings, build_httpx_client_kwargs
from docfill.typing.models import DocumentReference

logger = get_logger(__name__)

_REMOTE_SCHEMES = {"http", "https"}


def is_remote(content_url: str) -> bool:
    """Return whether the content handle points to an http(s) resource."""
    return urlparse(content_url).scheme.lower() in _REMOTE_SCHEMES


def local_path(content_url: str) -> Path:
    """Resolve a local content handle (plain path or `file://` URL) to a path."""
    parsed = urlparse(content_url)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(content_url)


def document_suffix(document: DocumentReference) -> str:
    """Return the lower-cased file suffix of the document name."""
    return Path(document.name).suffix.lower()


def load_document(source: str | Path, *, template_id: str | None = None) -> DocumentReference:
    """Create a document reference for a local file or a remote URL.

    Args:
        source (str | Path): File path or http(s) URL.
        template_id (str | None): Optional active template binding.

    Raises:
        BackendError: If a local source is not an existing file.

    Returns:
        DocumentReference: Fresh reference with an empty field list.
    """
    content_url = str(source)
    if is_remote(content_url):
        name = Path(unquote(urlparse(content_url).path)).name or "document"
    else:
        path = local_path(content_url)
        if not path.is_file():
            raise BackendError(message=f"Document not found: {path}")
        name = path.name
    return DocumentReference(name=name, content_url=content_url, template_id=template_id)


def _require_httpx(content_url: str) -> None:
    if httpx is None:
        raise BackendError(message=f"httpx is required to download remote documents: {content_url}")


def _build_async_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(**build_httpx_client_kwargs(settings))


async def read_document_bytes(document: DocumentReference, settings: Settings) -> bytes:
    """Read the raw bytes behind a document's content handle.

    Args:
        document (DocumentReference): Loaded document.
        settings (Settings): Runtime settings.

    Raises:
        BackendError: If the content cannot be fetched or read.

    Returns:
        bytes: Document content.
    """
    if is_remote(document.content_url):
        _require_httpx(document.content_url)
        try:
            async with _build_async_client(settings) as client:
                response = await client.get(document.content_url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise BackendError(message=f"Failed to download {document.content_url}: {exc}") from exc
        logger.debug("Document downloaded", extra={"url": document.content_url, "bytes": len(response.content)})
        return response.content

    path = local_path(document.content_url)
    try:
        return await asyncio.to_thread(path.read_bytes)
    except OSError as exc:
        raise BackendError(message=f"Failed to read {path}: {exc}") from exc


def artifact_path(document: DocumentReference, output_dir: str | Path) -> Path:
    """Return the output path of the filled copy of `document`."""
    source = Path(document.name)
    return Path(output_dir) / f"{source.stem}-filled{source.suffix}"


def write_bytes_atomic(path: Path, data: bytes) -> Path:
    """Write `data` to `path` through a temporary sibling file.

    The target either keeps its previous content or receives all of `data`.

    Args:
        path (Path): Target path.
        data (bytes): Content to write.

    Returns:
        Path: The written path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return path
