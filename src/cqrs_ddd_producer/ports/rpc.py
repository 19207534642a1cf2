from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..message import Message


@runtime_checkable
class IPromise(Protocol):
    """Handle for awaiting the reply correlated with a sent command."""

    @property
    def correlation_id(self) -> str: ...

    @property
    def reply_to(self) -> str: ...

    async def receive(self, timeout: float | None = None) -> Message:
        """Wait for the reply; raise ``RpcTimeoutError`` after *timeout* seconds."""
        ...

    def receive_no_wait(self) -> Message | None:
        """Return the reply if it already arrived, else ``None``."""
        ...


@runtime_checkable
class IRpcClient(Protocol):
    """
    Port for request/reply exchanges.

    The producer calls :meth:`prepare` before the first checkpoint so
    extensions observe ``reply_to`` and ``correlation_id``, then hands the
    fully-prepared message to :meth:`send` instead of the driver.
    """

    def prepare(self, message: Message) -> None:
        """Assign ``reply_to`` and ``correlation_id`` when they are unset."""
        ...

    async def send(self, message: Message) -> IPromise:
        """Transmit *message* and return a promise for its reply."""
        ...
