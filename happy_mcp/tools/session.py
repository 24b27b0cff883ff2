"""Session tool executors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..models import ToolResult

if TYPE_CHECKING:
    from ..notifier import SessionNotifier
    from .schemas import ChangeTitleInput

logger = logging.getLogger(__name__)


async def exec_change_title(notifier: SessionNotifier, inp: ChangeTitleInput) -> ToolResult:
    """Rename the chat by sending a summary message upstream."""
    logger.debug("Changing title to: %s", inp.title)
    try:
        await notifier.send_summary(inp.title)
    except Exception as e:
        logger.debug("Title change failed: %s", e)
        return ToolResult.failure(f"Failed to change chat title: {e}")
    return ToolResult.success(f'Successfully changed chat title to: "{inp.title}"')
