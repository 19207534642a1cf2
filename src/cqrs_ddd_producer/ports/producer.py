from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .rpc import IPromise


@runtime_checkable
class IProducer(Protocol):
    """
    Port for sending events and commands.

    Implemented by :class:`~cqrs_ddd_producer.producers.producer.Producer`
    and the wrappers around it (spooling, tracing).
    """

    async def send_event(
        self, topic: str, message: Any, extension: Any | None = None
    ) -> None:
        """
        Broadcast *message* to every subscriber of *topic*.

        Args:
            topic: Topic name; overwrites any topic property on the message.
            message: A ``Message`` or any payload to wrap into one.
            extension: Optional extension applied to this send only.
        """
        ...

    async def send_command(
        self,
        processor_name: str,
        message: Any,
        need_reply: bool = False,
        extension: Any | None = None,
    ) -> IPromise | None:
        """
        Address *message* to one named processor.

        Returns a promise for the reply when *need_reply* is true.
        """
        ...
