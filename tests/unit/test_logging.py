from __future__ import annotations

from docfill import logger as package_logger
from docfill.logging import configure_logging, document_log_context, get_logger
from docfill.settings import Settings


def test_stdlib_logger_is_configured(capsys) -> None:
    configure_logging(settings=Settings(_env_file=None, LOG_JSON=False, LOG_LEVEL="INFO"), force=True)
    logger = get_logger("tests")
    logger.info("hello")

    captured = capsys.readouterr()
    assert "hello" in captured.err.lower()


def test_document_context_is_bound_to_log_lines(capsys) -> None:
    configure_logging(settings=Settings(_env_file=None, LOG_JSON=True, LOG_LEVEL="INFO"), force=True)
    logger = get_logger("tests.context")

    with document_log_context("doc_123"):
        logger.info("inside")
    logger.info("outside")

    lines = capsys.readouterr().err.strip().splitlines()
    assert '"document_id": "doc_123"' in lines[-2]
    assert "doc_123" not in lines[-1]


def test_package_logger_created_on_import() -> None:
    assert callable(getattr(package_logger, "info", None))
