"""
happy_mcp entry point.
Runs the server stand-alone for local development: summaries and reminders
are logged instead of reaching a real session.

Usage:
    happy-mcp                      # both tools, text logs
    happy-mcp --no-reminders       # change_title only
    happy-mcp --log-level DEBUG --json-logs
"""

import argparse
import asyncio
import contextlib
import json
import logging
import signal
import sys
from typing import Any

from .config import Settings, get_settings
from .logging_config import setup_logging
from .server import HappyServerOptions, start_happy_server

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


class LoggingSessionClient:
    """Session client stand-in that logs each outbound session message."""

    def __init__(self) -> None:
        self.sent: list[dict] = []

    def send_claude_session_message(self, message: dict) -> None:
        self.sent.append(message)
        logger.info("Session message: %s", json.dumps(message))


class InMemoryMessageQueue:
    """Reminder queue stand-in; keeps pushed (message, mode) pairs."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, Any]] = []

    def push(self, message: str, mode: Any) -> None:
        self.messages.append((message, mode))
        logger.info("Reminder queued: %s", message)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="happy_mcp: session title and reminder MCP server")
    p.add_argument("--log-level", choices=LOG_LEVELS, default=None, help="Override HAPPY_MCP_LOG_LEVEL")
    p.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    p.add_argument("--json-response", action="store_true", help="Reply with plain JSON instead of SSE")
    p.add_argument("--no-reminders", action="store_true", help="Do not register inject_reminder")
    return p.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with command-line overrides applied."""
    overrides: dict[str, Any] = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.json_logs:
        overrides["json_logs"] = True
    if args.json_response:
        overrides["json_response"] = True
    return get_settings().model_copy(update=overrides)


async def run(
    settings: Settings,
    reminders: bool = True,
    stop_event: asyncio.Event | None = None,
) -> None:
    queue = InMemoryMessageQueue()
    options: HappyServerOptions = HappyServerOptions()
    if reminders:
        options = HappyServerOptions(get_message_queue=lambda: queue)

    handle = await start_happy_server(LoggingSessionClient(), options, settings=settings)
    print(f"Happy MCP listening on {handle.url}", file=sys.stderr)
    print(f"Tools: {', '.join(handle.tool_names)}", file=sys.stderr)

    if stop_event is None:
        stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        # add_signal_handler is unavailable on Windows event loops
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop_event.set)
            installed.append(sig)

    try:
        await stop_event.wait()
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
        await handle.stop()
        logger.info("Happy MCP stopped")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = build_settings(args)
    setup_logging(settings.log_level, settings.logs_dir, settings.json_logs)
    asyncio.run(run(settings, reminders=not args.no_reminders))


if __name__ == "__main__":
    main()
