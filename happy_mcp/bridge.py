"""Late-bound access to the owning process's reminder queue.

The server usually starts before the conversation loop that owns the queue
exists, so the queue is looked up through an accessor on every call and
never cached here.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Optional, Protocol, TypeVar

logger = logging.getLogger(__name__)

ModeT = TypeVar("ModeT")
ModeT_contra = TypeVar("ModeT_contra", contravariant=True)


class MessageQueue(Protocol[ModeT_contra]):
    """Anything with push(message, mode). push may be sync or async."""

    def push(self, message: str, mode: ModeT_contra) -> Any: ...


MessageQueueGetter = Callable[[], Optional[MessageQueue[ModeT]]]


class ReminderQueueBridge(Generic[ModeT]):
    """Back-reference to an external queue; takes no ownership of it."""

    def __init__(
        self,
        get_message_queue: MessageQueueGetter[ModeT],
        default_mode: ModeT | None = None,
    ) -> None:
        self._get_message_queue = get_message_queue
        self._default_mode = default_mode

    def resolve(self) -> MessageQueue[ModeT] | None:
        """Return the live queue, or None if the owner has not built it yet."""
        queue = self._get_message_queue()
        if queue is None:
            logger.debug("Reminder queue requested before it was available")
        return queue

    @property
    def mode(self) -> ModeT | dict:
        """The configured default mode, or an empty mode when none was given."""
        if self._default_mode is None:
            return {}
        return self._default_mode
