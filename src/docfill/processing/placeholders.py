"""`{{name}}` marker scanning and substitution."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

# Inner text excludes both braces so nested or unbalanced markers stay literal.
PLACEHOLDER_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")


def iter_placeholder_markers(text: str) -> Iterator[tuple[str, str]]:
    """Yield `(raw_marker, name)` pairs in scan order.

    Markers whose inner text is blank once trimmed are skipped.

    Args:
        text (str): Page text.

    Yields:
        tuple[str, str]: Raw marker as written and trimmed placeholder name.
    """
    for match in PLACEHOLDER_PATTERN.finditer(text):
        name = match.group(1).strip()
        if name:
            yield match.group(0), name


def find_placeholder_names(text: str) -> list[str]:
    """Return unique placeholder names of `text` in first-seen order."""
    return list(dict.fromkeys(name for _, name in iter_placeholder_markers(text)))


def substitute_placeholders(text: str, values: Mapping[str, str]) -> tuple[str, set[str]]:
    """Replace markers whose trimmed name has a value.

    Args:
        text (str): Source text.
        values (Mapping[str, str]): Values by placeholder name.

    Returns:
        tuple[str, set[str]]: Substituted text and the names that were replaced.
    """
    applied: set[str] = set()

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1).strip()
        if name not in values:
            return match.group(0)
        applied.add(name)
        return values[name]

    return PLACEHOLDER_PATTERN.sub(_replace, text), applied
