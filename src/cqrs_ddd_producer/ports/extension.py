"""IProducerExtension — checkpoint observers around a send."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..extensions.context import DriverPreSend, PostSend, PreSend


@runtime_checkable
class IProducerExtension(Protocol):
    """Protocol for producer extensions.

    An extension observes or mutates a message at fixed checkpoints:

    1. ``on_pre_send_event`` / ``on_pre_send_command`` — application-visible,
       before the message is handed over for routing.
    2. ``on_driver_pre_send`` — routing is decided, the driver is next.
    3. ``on_post_send`` — the driver (or RPC client) accepted the message.

    Implementing a subset is fine: the chain skips hooks an extension does
    not define. Subclass
    :class:`~cqrs_ddd_producer.extensions.base.ProducerExtension` to get
    no-op defaults.
    """

    async def on_pre_send_event(self, context: PreSend) -> None: ...

    async def on_pre_send_command(self, context: PreSend) -> None: ...

    async def on_driver_pre_send(self, context: DriverPreSend) -> None: ...

    async def on_post_send(self, context: PostSend) -> None: ...
