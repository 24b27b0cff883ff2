"""
happy_mcp - session-scoped MCP tools for an agent runtime.

An ephemeral MCP server on a loopback port that lets the agent rename its
chat session and inject reminder messages into its own conversation queue.

Re-exports:
    start_happy_server: Build and start a server for one session
    HappyServerOptions: Optional reminder-queue wiring
    ServerHandle: url, tool_names and stop() of a running server
"""

__version__ = "1.0.0"

from .server import HappyServer, HappyServerOptions, ServerHandle, ServerState, start_happy_server

__all__ = [
    "HappyServer",
    "HappyServerOptions",
    "ServerHandle",
    "ServerState",
    "start_happy_server",
    "__version__",
]
