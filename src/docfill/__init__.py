"""docfill package."""

from docfill.async_runner import run_async
from docfill.exceptions import (
    AsyncExecutionError,
    BackendError,
    DependencyError,
    ExtractionFailure,
    InputFileError,
    PackageError,
    ProcessingError,
    SettingsError,
    TemplateError,
    UnknownFieldError,
    ValidationError,
)
from docfill.logging import configure_logging, get_logger
from docfill.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("docfill")

__all__ = [
    "AsyncExecutionError",
    "BackendError",
    "DependencyError",
    "ExtractionFailure",
    "InputFileError",
    "PackageError",
    "ProcessingError",
    "Settings",
    "SettingsError",
    "TemplateError",
    "UnknownFieldError",
    "ValidationError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
    "run_async",
]
