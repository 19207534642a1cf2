from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..config import ClientConfig
    from ..message import Message


@runtime_checkable
class IDriver(Protocol):
    """
    Port for the transport that places messages on a broker (AMQP, SQS, Redis, …).

    Infrastructure packages provide concrete adapters. Delivery guarantees,
    retries and connection management live behind this port; whatever a
    send primitive raises reaches the producer's caller unchanged.
    """

    def get_config(self) -> ClientConfig:
        """Return the naming/routing configuration this driver was built with."""
        ...

    async def send_to_router(self, message: Message) -> Any:
        """
        Publish *message* to the shared router topic.

        The topic-name property tells the router which subscribers to fan
        out to.
        """
        ...

    async def send_to_processor(self, message: Message) -> Any:
        """
        Publish *message* straight to a processor queue.

        A missing processor-name property means "the router's own
        processor".
        """
        ...
