"""Tests for happy_mcp/logging_config.py."""

import json
import logging
import logging.handlers

from happy_mcp.logging_config import JsonFormatter, setup_logging


def test_json_formatter_emits_one_object():
    record = logging.LogRecord("happy_mcp.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    data = json.loads(JsonFormatter().format(record))
    assert data["message"] == "hello world"
    assert data["level"] == "INFO"
    assert data["logger"] == "happy_mcp.test"
    assert "timestamp" in data


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad")
    except ValueError:
        import sys
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
    data = json.loads(JsonFormatter().format(record))
    assert "ValueError: bad" in data["exception"]


def test_console_only_without_logs_dir(restore_root_logger):
    setup_logging("DEBUG")
    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], logging.StreamHandler)


def test_file_handler_with_logs_dir(restore_root_logger, tmp_path):
    logs_dir = tmp_path / "logs"
    setup_logging("info", str(logs_dir))
    root = restore_root_logger
    file_handlers = [h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert logs_dir.is_dir()


def test_json_logs_use_json_formatter(restore_root_logger):
    setup_logging("INFO", json_logs=True)
    assert isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)


def test_third_party_loggers_quieted(restore_root_logger):
    setup_logging("DEBUG")
    assert logging.getLogger("uvicorn").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING
