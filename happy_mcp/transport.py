"""
MCP-over-HTTP transport in front of the tool registry.

Uses the MCP SDK's low-level Server with a stateless streamable-HTTP session
manager: no Mcp-Session-Id is issued, so every exchange stands on its own.
Returning a session id makes the Claude SDK fail its initialize handshake
with "Server already initialized".

The transport owns no business logic. It lists registry tools, hands calls
to ToolRegistry.dispatch, and turns the outcome into a CallToolResult.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.types import Message, Receive, Scope, Send

from .exceptions import ToolError
from .models import ToolResult

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager

    from .tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=segment.text) for segment in result.content],
        isError=result.is_error,
    )


class ProtocolTransport:
    """ASGI app adapting HTTP exchanges to registry calls."""

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        name: str = "Happy MCP",
        version: str = "1.0.0",
        json_response: bool = False,
    ) -> None:
        self._registry = registry
        self.server: Server = Server(name, version=version)
        self.server.list_tools()(self._list_tools)
        # The registry validates arguments itself
        self.server.call_tool(validate_input=False)(self._call_tool)
        self.session_manager = StreamableHTTPSessionManager(
            app=self.server,
            event_store=None,
            json_response=json_response,
            stateless=True,
        )

    def run(self) -> AbstractAsyncContextManager[None]:
        """Context that keeps the session manager's task group alive. Enter once."""
        return self.session_manager.run()

    async def _list_tools(self) -> list[types.Tool]:
        return [
            types.Tool(
                name=tool.name,
                title=tool.title,
                description=tool.description,
                inputSchema=tool.input_schema,
            )
            for tool in self._registry
        ]

    async def _call_tool(self, name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        try:
            result = await self._registry.dispatch(name, arguments)
        except ToolError as e:
            logger.debug("Rejected call to %s: %s", name, e)
            result = ToolResult.failure(str(e))
        logger.debug("Response for %s: %s", name, result.text)
        return to_call_tool_result(result)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        response_started = False

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.session_manager.handle_request(scope, receive, tracking_send)
        except Exception:
            logger.debug("Error handling request", exc_info=True)
            if not response_started:
                await send({"type": "http.response.start", "status": 500, "headers": []})
                await send({"type": "http.response.body", "body": b""})
