"""Reminder injection executor."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..models import ToolResult
from ..utils.aio import maybe_await

if TYPE_CHECKING:
    from ..bridge import ReminderQueueBridge
    from .schemas import InjectReminderInput

logger = logging.getLogger(__name__)

TIMER_EXPIRED_TEMPLATE = (
    "[Timer expired] Background task {task_id} may be complete. Check its status."
)

QUEUE_NOT_READY = "Message queue not available yet"


def resolve_reminder_text(inp: InjectReminderInput) -> str:
    """A task reference wins over the free-text message."""
    if inp.task_id:
        return TIMER_EXPIRED_TEMPLATE.format(task_id=inp.task_id)
    return inp.message or ""


async def exec_inject_reminder(
    bridge: ReminderQueueBridge, inp: InjectReminderInput
) -> ToolResult:
    """Push a reminder into the live conversation queue, if there is one yet."""
    logger.debug("Injecting reminder: message=%r task_id=%r", inp.message, inp.task_id)

    queue = bridge.resolve()
    if queue is None:
        return ToolResult.failure(QUEUE_NOT_READY)

    text = resolve_reminder_text(inp)
    try:
        await maybe_await(queue.push(text, bridge.mode))
    except Exception as e:
        logger.debug("Reminder push failed: %s", e)
        return ToolResult.failure(f"Failed to inject reminder: {e}")
    return ToolResult.success(f'Reminder injected: "{text}"')
