"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class FieldKind(_EnumMixin):
    """Input kind of a fillable field."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"


class FieldSource(_EnumMixin):
    """Origin of a field descriptor."""

    PLACEHOLDER = "placeholder"
    NATIVE = "native"
    TEMPLATE = "template"
    MANUAL = "manual"
    FALLBACK = "fallback"
