"""Tests for the logging bootstrap."""

import json
import logging

import pytest

from clientaddr.configs.system import LoggingConfig
from clientaddr.infra.logging import build_handler, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def test_setup_logging_installs_single_handler(restore_root_logger):
    setup_logging(LoggingConfig(level="debug"))

    assert restore_root_logger.level == logging.DEBUG
    assert len(restore_root_logger.handlers) == 1


def test_json_output_includes_trace_fields():
    handler = build_handler(LoggingConfig(json_output=True))
    record = logging.LogRecord(
        "clientaddr.core.trust", logging.WARNING, __file__, 1,
        "Ignoring invalid trusted proxy entry: %r", ("bogus",), None,
    )
    handler.filter(record)

    payload = json.loads(handler.format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "clientaddr.core.trust"
    assert payload["message"] == "Ignoring invalid trusted proxy entry: 'bogus'"
    assert payload["trace_id"] == ""


def test_dev_output_uses_uvicorn_formatter():
    from uvicorn.logging import DefaultFormatter

    handler = build_handler(LoggingConfig(json_output=False))
    record = logging.LogRecord(
        "clientaddr.core.resolver", logging.DEBUG, __file__, 1,
        "Resolved client address %s", ("198.51.100.2",), None,
    )
    handler.filter(record)

    assert isinstance(handler.formatter, DefaultFormatter)
    assert "Resolved client address 198.51.100.2" in handler.format(record)
