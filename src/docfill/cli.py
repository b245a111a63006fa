"""CLI entry point for docfill."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from docfill import __version__, logger
from docfill.backends import select_backends
from docfill.dependencies import ensure_pdf_dependencies, ensure_remote_dependencies
from docfill.documents import document_suffix, is_remote, load_document
from docfill.exceptions import InputFileError, PackageError, ValidationError
from docfill.logging import configure_logging
from docfill.pipeline import apply_values, extract_document, fill
from docfill.settings import Settings, get_settings
from docfill.template_store import TemplateStore, create_template
from docfill.typing.models import DocumentReference, FieldDescriptor

_FIELDS_ADAPTER = TypeAdapter(list[FieldDescriptor])
_VALUES_ADAPTER = TypeAdapter(dict[str, str])


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="docfill")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    scan_parser = subparsers.add_parser("scan", help="Discover fillable fields of a document")
    scan_parser.add_argument("--input", required=True, dest="input_ref", help="File path or http(s) URL")
    scan_parser.add_argument("--template-id", default=None, dest="template_id")
    scan_parser.add_argument("--output", type=Path, default=None, dest="output_path")

    fill_parser = subparsers.add_parser("fill", help="Fill a document with values from a JSON file")
    fill_parser.add_argument("--input", required=True, dest="input_ref", help="File path or http(s) URL")
    fill_parser.add_argument("--values", required=True, type=Path, dest="values_path")
    fill_parser.add_argument("--template-id", default=None, dest="template_id")
    fill_parser.add_argument("--output-dir", type=Path, default=None, dest="output_dir")

    templates_parser = subparsers.add_parser("templates", help="Manage stored templates")
    templates_sub = templates_parser.add_subparsers(dest="templates_command")
    templates_sub.add_parser("list", help="List stored templates")
    create_parser = templates_sub.add_parser("create", help="Create a template from a JSON field list")
    create_parser.add_argument("--name", required=True)
    create_parser.add_argument("--description", default="")
    create_parser.add_argument("--fields", required=True, type=Path, dest="fields_path")

    return parser


def _ensure_dependencies_for(input_ref: str) -> None:
    """Check optional runtime dependencies needed for the input.

    Args:
        input_ref (str): File path or URL.
    """
    if is_remote(input_ref):
        ensure_remote_dependencies()
    if input_ref.lower().endswith(".pdf"):
        ensure_pdf_dependencies()


def _scan(args: argparse.Namespace, settings: Settings, store: TemplateStore) -> DocumentReference:
    """Load and scan the input document.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.
        store (TemplateStore): Template store.

    Returns:
        DocumentReference: Document with resolved fields.
    """
    _ensure_dependencies_for(args.input_ref)
    template = store.get(args.template_id) if args.template_id else None
    document = load_document(args.input_ref)
    provider, _ = select_backends(document, settings)

    outcome = extract_document(document, provider, template=template)
    for warning in outcome.warnings:
        logger.warning("Extraction warning", extra={"warning": warning})
    return document


def _run_scan(args: argparse.Namespace, settings: Settings, store: TemplateStore) -> int:
    document = _scan(args, settings, store)
    payload = document.model_dump_json(indent=2, exclude_none=True)
    if args.output_path is None:
        sys.stdout.write(payload + "\n")
        return 0
    args.output_path.parent.mkdir(parents=True, exist_ok=True)
    args.output_path.write_text(payload, encoding="utf-8")
    logger.info("Fields written", extra={"output_path": str(args.output_path), "fields": len(document.fields)})
    return 0


def _read_values(path: Path) -> dict[str, str]:
    """Read a `{field name: value}` JSON file.

    Args:
        path (Path): Values file.

    Raises:
        InputFileError: If the file is unreadable or malformed.

    Returns:
        dict[str, str]: Values by field name.
    """
    try:
        return _VALUES_ADAPTER.validate_json(path.read_bytes())
    except (OSError, PydanticValidationError) as exc:
        raise InputFileError(path=str(path), reason=str(exc)) from exc


def _run_fill(args: argparse.Namespace, settings: Settings, store: TemplateStore) -> int:
    values = _read_values(args.values_path)
    if args.output_dir is not None:
        settings = settings.model_copy(update={"output_dir": str(args.output_dir)})

    document = _scan(args, settings, store)
    apply_values(document, values)
    _, writer = select_backends(document, settings)

    try:
        artifact = fill(document, writer)
    except ValidationError as exc:
        logger.error("Required fields missing", extra={"count": exc.count, "fields": list(exc.missing_fields)})
        return 1

    sys.stdout.write(artifact.model_dump_json(indent=2) + "\n")
    logger.info("Document filled", extra={"artifact": artifact.content_url, "type": document_suffix(document)})
    return 0


def _run_templates(args: argparse.Namespace, store: TemplateStore) -> int:
    if args.templates_command == "create":
        try:
            fields = _FIELDS_ADAPTER.validate_json(args.fields_path.read_bytes())
        except (OSError, PydanticValidationError) as exc:
            raise InputFileError(path=str(args.fields_path), reason=str(exc)) from exc
        template = create_template(args.name, args.description, fields)
        path = store.save(template)
        sys.stdout.write(f"{template.id}\t{path}\n")
        return 0

    for template in store.list_templates():
        listing = {
            "id": template.id,
            "name": template.name,
            "description": template.description,
            "created_at": template.created_at.isoformat(),
            "fields": len(template.fields),
        }
        sys.stdout.write(json.dumps(listing) + "\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv (list[str] | None): Arguments, defaults to `sys.argv[1:]`.

    Returns:
        int: Exit code (0 for success, 1 for error).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None or (args.command == "templates" and args.templates_command is None):
        parser.print_help()
        return 0

    store = TemplateStore(root=Path(settings.template_dir))
    try:
        if args.command == "scan":
            return _run_scan(args, settings, store)
        if args.command == "fill":
            return _run_fill(args, settings, store)
        return _run_templates(args, store)
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return 1
    except KeyboardInterrupt:
        logger.info("Command aborted by user")
        return 130
    except Exception:
        logger.exception("Unexpected error", extra={"command": args.command})
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
