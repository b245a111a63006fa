"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class AsyncExecutionError(PackageError):
    """Raised when an async operation fails in compatibility runner."""

    result: BaseException
    message: str = "Async operation failed"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.result}"


@dataclass(frozen=True)
class DependencyError(PackageError):
    """Raised when optional runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(frozen=True)
class BackendError(PackageError):
    """Raised when a content provider or writer cannot do its job."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class ExtractionFailure(PackageError):
    """Recoverable extraction fault, reported as a warning next to fallback fields."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class ValidationError(PackageError):
    """Raised when required fields have no value at fill time."""

    missing_fields: tuple[str, ...]

    @property
    def count(self) -> int:
        """Return the number of unfilled required fields."""
        return len(self.missing_fields)

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.count} required field(s) missing a value: {', '.join(self.missing_fields)}"


@dataclass(frozen=True)
class ProcessingError(PackageError):
    """Raised when document content cannot be transformed into a filled artifact."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass
class TemplateError(PackageError):
    """Raised when template authoring or storage constraints are violated."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class UnknownFieldError(PackageError):
    """Raised when a field id does not belong to the document."""

    field_id: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Unknown field id: {self.field_id}"


@dataclass(frozen=True)
class InputFileError(PackageError):
    """Raised when a JSON input file of the CLI is unreadable or malformed."""

    path: str
    reason: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Invalid input file {self.path}: {self.reason}"
