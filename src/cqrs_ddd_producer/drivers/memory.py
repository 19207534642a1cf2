"""InMemoryDriver — IDriver that records sends for tests and local wiring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..config import ClientConfig
from ..message import PROCESSOR_NAME_PROPERTY
from ..ports.driver import IDriver

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from ..message import Message


@dataclass(frozen=True)
class SentMessage:
    """One message accepted by the driver."""

    destination: str  # "router" or "processor"
    queue_name: str
    message: Message


class InMemoryDriver(IDriver):
    """Driver that keeps sent messages in a list instead of a broker.

    Queue names follow the same conventions a broker driver would use:
    router sends go to the transport router topic, processor sends to the
    default processor queue, or to the router queue when no processor name
    is set (app-scoped events).

    Listeners registered with :meth:`add_listener` are awaited after each
    send, which lets a test play the consumer (e.g. answer an RPC).
    """

    def __init__(self, config: ClientConfig | None = None) -> None:
        self._config = config or ClientConfig()
        self._sent: list[SentMessage] = []
        self._listeners: list[Callable[[SentMessage], Coroutine[Any, Any, None]]] = []

    def get_config(self) -> ClientConfig:
        return self._config

    async def send_to_router(self, message: Message) -> None:
        await self._record(
            SentMessage("router", self._config.transport_router_topic_name, message)
        )

    async def send_to_processor(self, message: Message) -> None:
        if message.get_property(PROCESSOR_NAME_PROPERTY):
            queue = self._config.create_transport_queue_name(
                self._config.default_processor_queue_name
            )
        else:
            queue = self._config.transport_router_queue_name
        await self._record(SentMessage("processor", queue, message))

    def add_listener(
        self, listener: Callable[[SentMessage], Coroutine[Any, Any, None]]
    ) -> None:
        """Register an async callback invoked with every sent message."""
        self._listeners.append(listener)

    def get_sent(self) -> list[SentMessage]:
        """Return everything sent so far, in order."""
        return list(self._sent)

    def get_router_messages(self) -> list[Message]:
        return [s.message for s in self._sent if s.destination == "router"]

    def get_processor_messages(self) -> list[Message]:
        return [s.message for s in self._sent if s.destination == "processor"]

    def clear(self) -> None:
        """Forget sent messages and listeners (for test teardown)."""
        self._sent.clear()
        self._listeners.clear()

    async def _record(self, sent: SentMessage) -> None:
        self._sent.append(sent)
        for listener in self._listeners:
            await listener(sent)
