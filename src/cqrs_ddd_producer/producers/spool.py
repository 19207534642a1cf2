"""SpoolProducer — buffer sends and flush them later, in order."""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Any

from ..ports.producer import IProducer

if TYPE_CHECKING:
    from ..ports.rpc import IPromise

logger = logging.getLogger("cqrs_ddd.producer")


class SpoolProducer(IProducer):
    """Defers events and reply-less commands until :meth:`flush`.

    Useful when messages should leave only after the surrounding work
    succeeded (e.g. after a database commit). Flushed messages go through
    the wrapped producer, so validation and every checkpoint run at flush
    time. Commands with ``need_reply=True`` are sent immediately because a
    promise cannot be deferred.

    Usage::

        spool = SpoolProducer(producer)
        await spool.send_event("order.created", {"id": 1})
        ...
        await spool.flush()
    """

    def __init__(self, producer: IProducer) -> None:
        self._producer = producer
        self._queue: deque[tuple[str, str, Any, Any]] = deque()

    def __len__(self) -> int:
        return len(self._queue)

    async def send_event(
        self, topic: str, message: Any, extension: Any | None = None
    ) -> None:
        self._queue.append(("event", topic, message, extension))

    async def send_command(
        self,
        processor_name: str,
        message: Any,
        need_reply: bool = False,
        extension: Any | None = None,
    ) -> IPromise | None:
        if need_reply:
            return await self._producer.send_command(
                processor_name, message, True, extension
            )
        self._queue.append(("command", processor_name, message, extension))
        return None

    async def flush(self) -> None:
        """Send everything spooled so far, oldest first.

        A failing send stays at the head of the spool and the error
        propagates; calling ``flush`` again retries from that message.
        """
        if self._queue:
            logger.debug("Flushing %d spooled message(s)", len(self._queue))
        while self._queue:
            kind, target, message, extension = self._queue[0]
            if kind == "event":
                await self._producer.send_event(target, message, extension)
            else:
                await self._producer.send_command(target, message, False, extension)
            self._queue.popleft()

    def clear(self) -> None:
        """Drop everything spooled without sending it."""
        self._queue.clear()
