"""Shared fixtures for happy_mcp tests."""

import logging
from unittest.mock import MagicMock

import pytest

from happy_mcp.config import Settings


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Prevent tests from picking up HAPPY_MCP_* variables from the shell."""
    import os
    for key in list(os.environ):
        if key.startswith("HAPPY_MCP_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings():
    """Settings with short timeouts so a broken server fails fast."""
    return Settings(startup_timeout=5.0, shutdown_timeout=1.0)


@pytest.fixture
def session_client():
    """Synchronous session client double that records outbound messages."""
    client = MagicMock()
    client.send_claude_session_message = MagicMock(return_value=None)
    return client


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging() changes to the root logger."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
