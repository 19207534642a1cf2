"""LoggingExtension — logs every checkpoint of a send."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from .base import ProducerExtension

if TYPE_CHECKING:
    from .context import DriverPreSend, PostSend, PreSend

logger = logging.getLogger("cqrs_ddd.producer")


class LoggingExtension(ProducerExtension):
    """Logs send lifecycle: target, message id and duration.

    Holds no per-send state; the duration comes from the context's
    ``started_at``, so failed sends leave nothing behind.
    """

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    async def on_pre_send_event(self, context: PreSend) -> None:
        logger.log(
            self._level,
            "Sending event to topic %s (message_id=%s)",
            context.topic,
            context.message.message_id,
        )

    async def on_pre_send_command(self, context: PreSend) -> None:
        logger.log(
            self._level,
            "Sending command to processor %s (message_id=%s)",
            context.processor_name,
            context.message.message_id,
        )

    async def on_driver_pre_send(self, context: DriverPreSend) -> None:
        logger.debug(
            "Handing %s to %s (destination=%r)",
            context.message.message_id,
            type(context.driver).__name__,
            context.destination,
        )

    async def on_post_send(self, context: PostSend) -> None:
        message_id = context.message.message_id
        start = context.started_at
        target = context.topic if context.is_event else context.processor_name
        if start is None:
            logger.log(self._level, "Sent %s to %s", message_id, target)
            return
        elapsed = (time.perf_counter() - start) * 1000
        logger.log(
            self._level, "Sent %s to %s in %.2fms", message_id, target, elapsed
        )
