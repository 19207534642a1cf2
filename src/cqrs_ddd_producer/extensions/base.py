"""ProducerExtension — no-op base for extensions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..ports.extension import IProducerExtension

if TYPE_CHECKING:
    from .context import DriverPreSend, PostSend, PreSend


class ProducerExtension(IProducerExtension):
    """Base class with no-op hooks; override only the checkpoints you need."""

    async def on_pre_send_event(self, context: PreSend) -> None:
        return None

    async def on_pre_send_command(self, context: PreSend) -> None:
        return None

    async def on_driver_pre_send(self, context: DriverPreSend) -> None:
        return None

    async def on_post_send(self, context: PostSend) -> None:
        return None
