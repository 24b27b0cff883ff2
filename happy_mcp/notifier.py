"""Forwards title changes to the session client as summary messages."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .models import SummaryEvent
from .utils.aio import maybe_await

logger = logging.getLogger(__name__)


class SessionClient(Protocol):
    """The part of the session client this server needs."""

    def send_claude_session_message(self, message: dict) -> Any: ...


class SessionNotifier:
    """
    Turns a title into a summary event for the session client.

    Delivery is the client's job: send_summary only awaits the call when the
    client returns an awaitable, and lets its exceptions propagate to the
    tool handler.
    """

    def __init__(self, client: SessionClient) -> None:
        self._client = client

    async def send_summary(self, title: str) -> SummaryEvent:
        event = SummaryEvent(summary=title)
        logger.debug("Sending summary %s for title %r", event.leaf_uuid, title)
        await maybe_await(self._client.send_claude_session_message(event.to_message()))
        return event
