"""
Tests for happy_mcp/tools/registry.py.

Handlers are AsyncMocks; no network or session client is involved.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import BaseModel

from happy_mcp.bridge import ReminderQueueBridge
from happy_mcp.exceptions import (
    ConfigurationError,
    DuplicateToolError,
    RegistryFrozenError,
    ToolValidationError,
    UnknownToolError,
)
from happy_mcp.models import ToolResult
from happy_mcp.tools import Tool, ToolRegistry, build_registry
from happy_mcp.tools.schemas import ChangeTitleInput


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

class EchoInput(BaseModel):
    text: str


def make_tool(name: str = "echo", handler=None) -> Tool:
    return Tool(
        name=name,
        description="Echo the text back",
        input_model=EchoInput,
        handler=handler or AsyncMock(return_value=ToolResult.success("ok")),
    )


# --------------------------------------------------------------------------- #
# 1. Registration                                                              #
# --------------------------------------------------------------------------- #

def test_register_and_lookup():
    reg = ToolRegistry()
    tool = make_tool()
    reg.register(tool)
    assert "echo" in reg
    assert reg.get("echo") is tool
    assert reg.get("missing") is None
    assert len(reg) == 1


def test_duplicate_name_rejected():
    reg = ToolRegistry()
    reg.register(make_tool())
    with pytest.raises(DuplicateToolError) as exc:
        reg.register(make_tool())
    assert exc.value.name == "echo"
    assert isinstance(exc.value, ConfigurationError)


def test_frozen_registry_rejects_registration():
    reg = ToolRegistry()
    reg.register(make_tool("a"))
    reg.freeze()
    assert reg.frozen
    with pytest.raises(RegistryFrozenError):
        reg.register(make_tool("b"))


def test_names_keep_registration_order():
    reg = ToolRegistry()
    for name in ("zeta", "alpha", "mid"):
        reg.register(make_tool(name))
    assert reg.names == ["zeta", "alpha", "mid"]
    assert [t.name for t in reg] == ["zeta", "alpha", "mid"]


def test_input_schema_comes_from_model():
    schema = make_tool().input_schema
    assert schema["type"] == "object"
    assert "text" in schema["properties"]
    assert schema["required"] == ["text"]


# --------------------------------------------------------------------------- #
# 2. Dispatch                                                                  #
# --------------------------------------------------------------------------- #

@pytest.mark.asyncio
async def test_dispatch_validates_and_calls_handler():
    handler = AsyncMock(return_value=ToolResult.success("done"))
    reg = ToolRegistry()
    reg.register(make_tool(handler=handler))

    result = await reg.dispatch("echo", {"text": "hi"})

    assert result.text == "done"
    args = handler.await_args.args[0]
    assert isinstance(args, EchoInput)
    assert args.text == "hi"


@pytest.mark.asyncio
async def test_dispatch_unknown_tool():
    with pytest.raises(UnknownToolError) as exc:
        await ToolRegistry().dispatch("nope", {})
    assert "nope" in str(exc.value)


@pytest.mark.asyncio
async def test_dispatch_missing_field_names_the_field():
    handler = AsyncMock()
    reg = ToolRegistry()
    reg.register(make_tool(handler=handler))

    with pytest.raises(ToolValidationError) as exc:
        await reg.dispatch("echo", {})

    assert exc.value.field == "text"
    assert exc.value.tool == "echo"
    handler.assert_not_awaited()


@pytest.mark.asyncio
async def test_dispatch_wrong_type():
    reg = ToolRegistry()
    reg.register(make_tool())
    with pytest.raises(ToolValidationError) as exc:
        await reg.dispatch("echo", {"text": ["not", "a", "string"]})
    assert exc.value.field == "text"


@pytest.mark.asyncio
async def test_dispatch_inject_reminder_without_message_names_message():
    queue = MagicMock()
    reg = build_registry(MagicMock(), ReminderQueueBridge(lambda: queue))

    with pytest.raises(ToolValidationError) as exc:
        await reg.dispatch("inject_reminder", {})

    assert exc.value.field == "message"
    assert "message" in str(exc.value)
    queue.push.assert_not_called()


@pytest.mark.asyncio
async def test_dispatch_none_args_treated_as_empty():
    reg = ToolRegistry()
    reg.register(make_tool())
    with pytest.raises(ToolValidationError):
        await reg.dispatch("echo", None)


@pytest.mark.asyncio
async def test_extra_arguments_ignored():
    notifier = MagicMock()
    notifier.send_summary = AsyncMock()
    reg = build_registry(notifier)

    result = await reg.dispatch("change_title", {"title": "T", "colour": "red"})

    assert result.is_error is False
    notifier.send_summary.assert_awaited_once_with("T")


# --------------------------------------------------------------------------- #
# 3. build_registry                                                            #
# --------------------------------------------------------------------------- #

def test_build_without_bridge_has_only_change_title():
    reg = build_registry(MagicMock())
    assert reg.names == ["change_title"]
    assert "inject_reminder" not in reg
    assert reg.frozen


def test_build_with_bridge_adds_inject_reminder():
    reg = build_registry(MagicMock(), ReminderQueueBridge(lambda: None))
    assert reg.names == ["change_title", "inject_reminder"]


def test_built_tools_metadata():
    reg = build_registry(MagicMock(), ReminderQueueBridge(lambda: None))
    change_title = reg.get("change_title")
    assert change_title.title == "Change Chat Title"
    assert change_title.input_model is ChangeTitleInput
    assert change_title.description

    reminder_schema = reg.get("inject_reminder").input_schema
    assert set(reminder_schema["properties"]) == {"message", "task_id"}
