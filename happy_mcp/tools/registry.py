"""
Tool registry class and dispatch logic.

This module contains the Tool definition and the ToolRegistry that validates
arguments and dispatches tool calls arriving over MCP. build_registry() is
the builder: it decides which tools exist for a server instance and freezes
the result so the set cannot change once the server is serving.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterator

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import (
    DuplicateToolError,
    RegistryFrozenError,
    ToolValidationError,
    UnknownToolError,
)
from ..models import ToolResult
from .reminders import exec_inject_reminder
from .schemas import ChangeTitleInput, InjectReminderInput
from .session import exec_change_title

if TYPE_CHECKING:
    from ..bridge import ReminderQueueBridge
    from ..notifier import SessionNotifier

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Any], Awaitable[ToolResult]]


@dataclass(frozen=True)
class Tool:
    """A named, schema-validated action the server exposes."""

    name: str
    description: str
    input_model: type[BaseModel]
    handler: ToolHandler
    title: str | None = None

    @property
    def input_schema(self) -> dict:
        return self.input_model.model_json_schema()


class ToolRegistry:
    """
    Holds the tools of one server instance and dispatches calls to them.

    The registry itself has no side effects beyond bookkeeping and argument
    validation; everything observable happens inside handlers.
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}
        self._frozen = False

    def register(self, tool: Tool) -> None:
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register {tool.name}: registry is frozen")
        if tool.name in self._tools:
            raise DuplicateToolError(tool.name)
        self._tools[tool.name] = tool
        logger.debug("Registered tool %s", tool.name)

    def freeze(self) -> "ToolRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def names(self) -> list[str]:
        """Tool names in registration order."""
        return list(self._tools)

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(list(self._tools.values()))

    def __len__(self) -> int:
        return len(self._tools)

    async def dispatch(self, name: str, raw_args: dict | None) -> ToolResult:
        """
        Validate raw_args against the tool's input model and run its handler.

        Raises:
            UnknownToolError: no tool with that name.
            ToolValidationError: arguments failed validation; carries the
                first offending field.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)

        try:
            args = tool.input_model.model_validate(raw_args or {})
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or None
            raise ToolValidationError(name, field, first.get("msg", str(e))) from e

        result = await tool.handler(args)
        logger.debug("Tool %s returned is_error=%s", name, result.is_error)
        return result


def build_registry(
    notifier: SessionNotifier,
    bridge: ReminderQueueBridge | None = None,
) -> ToolRegistry:
    """
    Assemble the frozen tool set for one server instance.

    change_title is always present; inject_reminder only when a reminder
    queue bridge is supplied.
    """
    registry = ToolRegistry()
    registry.register(
        Tool(
            name="change_title",
            title="Change Chat Title",
            description="Change the title of the current chat session",
            input_model=ChangeTitleInput,
            handler=partial(exec_change_title, notifier),
        )
    )
    if bridge is not None:
        registry.register(
            Tool(
                name="inject_reminder",
                title="Inject Reminder",
                description=(
                    "Inject a reminder message into the conversation "
                    "(e.g., for timer notifications)"
                ),
                input_model=InjectReminderInput,
                handler=partial(exec_inject_reminder, bridge),
            )
        )
    return registry.freeze()
