"""Field discovery, merge, placement and fill processing."""

from docfill.processing.extraction import extract_fields, fallback_fields
from docfill.processing.fill import build_substitutions, fill_document, missing_required_fields
from docfill.processing.merge import append_field, dedupe_by_name, merge_fields
from docfill.processing.normalization import normalize_field_value
from docfill.processing.placeholders import find_placeholder_names, substitute_placeholders
from docfill.processing.placement import place_at

__all__ = [
    "append_field",
    "build_substitutions",
    "dedupe_by_name",
    "extract_fields",
    "fallback_fields",
    "fill_document",
    "find_placeholder_names",
    "merge_fields",
    "missing_required_fields",
    "normalize_field_value",
    "place_at",
    "substitute_placeholders",
]
