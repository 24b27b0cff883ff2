"""
Happy MCP server lifecycle.

start_happy_server() wires the pieces in order (notifier, reminder bridge,
tool registry, transport), binds an OS-assigned port on the loopback
interface, and returns a ServerHandle once the listener is up.

State machine:
    created -> binding -> listening -> stopped

The handle is returned only after the transition to listening. Stopping is
explicit and idempotent; there is no idle timeout.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import socket
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Iterator

import uvicorn

from .bridge import MessageQueueGetter, ModeT, ReminderQueueBridge
from .config import Settings, get_settings
from .exceptions import ConfigurationError, ServerStartError
from .notifier import SessionClient, SessionNotifier
from .tools.registry import ToolRegistry, build_registry
from .transport import ProtocolTransport

logger = logging.getLogger(__name__)

LOOPBACK_HOST = "127.0.0.1"
_STARTUP_POLL_INTERVAL = 0.01


class ServerState(str, Enum):
    """Lifecycle states of one server instance."""

    CREATED = "created"
    BINDING = "binding"
    LISTENING = "listening"
    STOPPED = "stopped"


@dataclass
class HappyServerOptions(Generic[ModeT]):
    """Optional wiring supplied by the owning process."""

    # Getter for the message queue; it may only exist after the server starts
    get_message_queue: MessageQueueGetter[ModeT] | None = None
    # Mode passed with every injected reminder
    default_mode: ModeT | None = None


class _EmbeddedUvicornServer(uvicorn.Server):
    """uvicorn server that leaves SIGINT/SIGTERM to the owning process."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


@dataclass
class ServerHandle:
    """What the owning process gets back from start_happy_server()."""

    url: str
    port: int
    tool_names: list[str]
    _server: "HappyServer" = field(repr=False)

    @property
    def state(self) -> ServerState:
        return self._server.state

    async def stop(self) -> None:
        await self._server.stop()

    def request_stop(self) -> asyncio.Future:
        """Non-blocking stop for synchronous callers on the event loop."""
        return self._server.request_stop()

    async def __aenter__(self) -> "ServerHandle":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()


class HappyServer(Generic[ModeT]):
    """One server instance serving one logical session."""

    def __init__(
        self,
        client: SessionClient,
        options: HappyServerOptions[ModeT] | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        options = options or HappyServerOptions()
        if options.get_message_queue is not None and not callable(options.get_message_queue):
            raise ConfigurationError("get_message_queue must be callable")

        self.settings = settings or get_settings()
        self.notifier = SessionNotifier(client)
        self.bridge: ReminderQueueBridge[ModeT] | None = None
        if options.get_message_queue is not None:
            self.bridge = ReminderQueueBridge(options.get_message_queue, options.default_mode)
        self.registry: ToolRegistry = build_registry(self.notifier, self.bridge)
        self.transport = ProtocolTransport(
            self.registry,
            name=self.settings.server_name,
            version=self.settings.server_version,
            json_response=self.settings.json_response,
        )

        self.state = ServerState.CREATED
        self._socket: socket.socket | None = None
        self._uvicorn: _EmbeddedUvicornServer | None = None
        self._serve_task: asyncio.Task | None = None
        self._stop_task: asyncio.Future | None = None

    async def start(self) -> ServerHandle:
        if self.state is not ServerState.CREATED:
            raise ConfigurationError(f"Server cannot be started from state {self.state.value}")
        self.state = ServerState.BINDING

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.bind((LOOPBACK_HOST, 0))
        except OSError as e:
            sock.close()
            self.state = ServerState.STOPPED
            raise ServerStartError(f"Could not bind {LOOPBACK_HOST}: {e}") from e
        self._socket = sock
        port = sock.getsockname()[1]

        config = uvicorn.Config(
            self.transport,
            lifespan="off",
            ws="none",
            log_config=None,
            access_log=False,
            timeout_graceful_shutdown=self.settings.shutdown_timeout,
        )
        self._uvicorn = _EmbeddedUvicornServer(config)
        self._serve_task = asyncio.create_task(self._serve(sock), name=f"happy-mcp:{port}")

        try:
            await asyncio.wait_for(self._wait_until_listening(), self.settings.startup_timeout)
        except asyncio.TimeoutError as e:
            await self.stop()
            raise ServerStartError(
                f"Listener on port {port} not ready after {self.settings.startup_timeout}s"
            ) from e
        except ServerStartError:
            await self.stop()
            raise

        self.state = ServerState.LISTENING
        url = f"http://{LOOPBACK_HOST}:{port}/"
        logger.debug("Happy MCP server listening on %s (tools: %s)", url, ", ".join(self.registry.names))
        return ServerHandle(url=url, port=port, tool_names=self.registry.names, _server=self)

    async def _serve(self, sock: socket.socket) -> None:
        # The session manager's task group is entered and exited in this task
        try:
            async with self.transport.run():
                await self._uvicorn.serve(sockets=[sock])
        finally:
            sock.close()

    async def _wait_until_listening(self) -> None:
        while not self._uvicorn.started:
            if self._serve_task.done():
                cause = None if self._serve_task.cancelled() else self._serve_task.exception()
                raise ServerStartError("HTTP listener exited during startup") from cause
            await asyncio.sleep(_STARTUP_POLL_INTERVAL)

    def request_stop(self) -> asyncio.Future:
        """Schedule teardown without waiting for it.

        Usable from synchronous code running on the event loop, such as a
        loop.add_signal_handler callback. Every call returns the same future.
        """
        if self._stop_task is None:
            self._stop_task = asyncio.ensure_future(self._shutdown())
        return self._stop_task

    async def stop(self) -> None:
        """Release the endpoint. Safe to call any number of times."""
        # A cancelled caller must not cancel the shared teardown
        await asyncio.shield(self.request_stop())

    async def _shutdown(self) -> None:
        logger.debug("Stopping server")
        try:
            if self._uvicorn is not None:
                self._uvicorn.should_exit = True
            if self._serve_task is not None:
                try:
                    await self._serve_task
                except asyncio.CancelledError:
                    if not self._serve_task.cancelled():
                        raise
                    logger.debug("Server task was cancelled")
                except Exception as e:
                    logger.warning("Server task ended with an error: %s", e)
        finally:
            if self._socket is not None:
                self._socket.close()
            self.state = ServerState.STOPPED


async def start_happy_server(
    client: SessionClient,
    options: HappyServerOptions[ModeT] | None = None,
    *,
    settings: Settings | None = None,
) -> ServerHandle:
    """Build a server for one session and start listening on loopback."""
    server = HappyServer(client, options, settings=settings)
    return await server.start()
