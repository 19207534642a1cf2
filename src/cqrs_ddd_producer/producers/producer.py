"""Producer — normalizes, routes and hands messages to a driver."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from ..extensions.chain import ExtensionChain
from ..extensions.context import DriverPreSend, PostSend, PreSend
from ..extensions.prepare_body import PrepareBodyExtension
from ..extensions.registry import ExtensionRegistry
from ..instrumentation import get_hook_registry
from ..message import (
    PROCESSOR_NAME_PROPERTY,
    TOPIC_NAME_PROPERTY,
    Message,
    MessageScope,
)
from ..ports.producer import IProducer
from ..primitives.exceptions import (
    InvalidDestinationError,
    InvalidMessageError,
    ProducerError,
    UnsupportedScopeError,
)
from ..primitives.id_generator import UUID4Generator
from .destination import Destination, ProcessorDestination, RouterDestination

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ..ports.driver import IDriver
    from ..ports.rpc import IPromise, IRpcClient
    from ..primitives.id_generator import IIDGenerator

logger = logging.getLogger("cqrs_ddd.producer")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Producer(IProducer):
    """Sends events to the router and commands to named processors.

    Every send runs the same lifecycle:

    1. wrap a bare payload into a :class:`~cqrs_ddd_producer.message.Message`
    2. write the reserved topic/processor property, fill in ``message_id``
       and ``timestamp`` when unset
    3. validate and resolve the destination (nothing has been sent if this
       raises)
    4. ``on_pre_send_event`` / ``on_pre_send_command``
    5. ``on_driver_pre_send``, after which the body must be ``str``/``bytes``
    6. driver transmission, or the RPC client for commands awaiting a reply
    7. ``on_post_send``

    Extensions run in order: the registered ones, then the per-call
    extension, then :class:`PrepareBodyExtension` as the last-resort body
    serializer. The extension list, driver and RPC client are fixed at
    construction, so one producer can serve concurrent sends as long as
    the messages passed in are not shared between them.

    Parameters
    ----------
    driver:
        Transport adapter implementing
        :class:`~cqrs_ddd_producer.ports.driver.IDriver`.
    rpc_client:
        Optional :class:`~cqrs_ddd_producer.ports.rpc.IRpcClient`; required
        only for ``send_command(..., need_reply=True)``.
    extensions:
        Iterable of extensions or an
        :class:`~cqrs_ddd_producer.extensions.registry.ExtensionRegistry`.
    id_generator:
        Source of message ids; defaults to UUIDv4.
    clock:
        Callable returning the timestamp for messages without one.
    """

    def __init__(
        self,
        driver: IDriver,
        rpc_client: IRpcClient | None = None,
        *,
        extensions: Iterable[Any] | ExtensionRegistry | None = None,
        id_generator: IIDGenerator | None = None,
        clock: Callable[[], Any] | None = None,
    ) -> None:
        self._driver = driver
        self._rpc_client = rpc_client
        if isinstance(extensions, ExtensionRegistry):
            extensions = extensions.get_ordered_extensions()
        self._extensions = ExtensionChain(extensions or ())
        self._default_extension = PrepareBodyExtension()
        self._id_generator = id_generator or UUID4Generator()
        self._clock = clock or _utcnow

    @property
    def driver(self) -> IDriver:
        return self._driver

    @property
    def rpc_client(self) -> IRpcClient | None:
        return self._rpc_client

    @property
    def extensions(self) -> ExtensionChain:
        return self._extensions

    # ── Public API ───────────────────────────────────────────────

    async def send_event(
        self, topic: str, message: Any, extension: Any | None = None
    ) -> None:
        """Broadcast *message* under *topic*.

        Raises
        ------
        InvalidDestinationError
            The processor-name property is already set on the message.
        UnsupportedScopeError
            ``message.scope`` is neither ``message_bus`` nor ``app``.
        """
        if not topic:
            raise ValueError("topic must be a non-empty string")

        started_at = time.perf_counter()
        message = self._normalize(message)
        message.set_property(TOPIC_NAME_PROPERTY, topic)
        self._apply_defaults(message)
        destination = self._resolve_event_destination(message)
        processor_name = (
            destination.processor_name
            if isinstance(destination, ProcessorDestination)
            else None
        )

        chain = self._chain_for(extension)
        context = PreSend(
            message,
            self,
            self._driver,
            is_event=True,
            topic=topic,
            processor_name=processor_name,
            started_at=started_at,
        )
        await chain.on_pre_send_event(context)

        await self._do_send(
            chain,
            context.message,
            destination,
            operation=f"producer.send_event.{topic}",
            topic=topic,
            processor_name=processor_name,
            started_at=started_at,
        )

    async def send_command(
        self,
        processor_name: str,
        message: Any,
        need_reply: bool = False,
        extension: Any | None = None,
    ) -> IPromise | None:
        """Address *message* to *processor_name*.

        With ``need_reply=True`` the RPC client assigns ``reply_to`` and
        ``correlation_id`` before the first checkpoint, transmits the
        message, and the returned promise resolves to the reply.
        """
        if not processor_name:
            raise ValueError("processor_name must be a non-empty string")
        if need_reply and self._rpc_client is None:
            raise ProducerError(
                "An RPC client is required to send a command with a reply."
            )

        started_at = time.perf_counter()
        message = self._normalize(message)
        message.set_property(PROCESSOR_NAME_PROPERTY, processor_name)
        message.scope = MessageScope.APP.value
        self._apply_defaults(message)
        if need_reply:
            self._rpc_client.prepare(message)  # type: ignore[union-attr]

        chain = self._chain_for(extension)
        context = PreSend(
            message,
            self,
            self._driver,
            is_event=False,
            processor_name=processor_name,
            started_at=started_at,
        )
        await chain.on_pre_send_command(context)

        result = await self._do_send(
            chain,
            context.message,
            ProcessorDestination(processor_name),
            operation=f"producer.send_command.{processor_name}",
            processor_name=processor_name,
            need_reply=need_reply,
            started_at=started_at,
        )
        return result if need_reply else None

    # ── Internals ────────────────────────────────────────────────

    @staticmethod
    def _normalize(message: Any) -> Message:
        if isinstance(message, Message):
            return message
        return Message(body=message)

    def _apply_defaults(self, message: Message) -> None:
        if message.message_id is None:
            message.message_id = str(self._id_generator.next_id())
        if message.timestamp is None:
            message.timestamp = self._clock()

    def _resolve_event_destination(self, message: Message) -> Destination:
        if PROCESSOR_NAME_PROPERTY in message.properties:
            raise InvalidDestinationError(PROCESSOR_NAME_PROPERTY)
        try:
            scope = MessageScope(message.scope)
        except ValueError:
            raise UnsupportedScopeError(message.scope) from None

        if scope is MessageScope.MESSAGE_BUS:
            return RouterDestination()
        config = self._driver.get_config()
        return ProcessorDestination(config.router_processor_name, router_processor=True)

    def _chain_for(self, extension: Any | None) -> ExtensionChain:
        return self._extensions.extend(extension, self._default_extension)

    async def _do_send(
        self,
        chain: ExtensionChain,
        message: Message,
        destination: Destination,
        *,
        operation: str,
        topic: str | None = None,
        processor_name: str | None = None,
        need_reply: bool = False,
        started_at: float | None = None,
    ) -> Any:
        is_event = topic is not None
        context = DriverPreSend(
            message,
            self,
            self._driver,
            is_event=is_event,
            topic=topic,
            processor_name=processor_name,
            destination=destination,
            started_at=started_at,
        )
        await chain.on_driver_pre_send(context)
        message = context.message
        if not isinstance(message.body, (str, bytes)):
            raise InvalidMessageError(
                "The message's body must be str or bytes before it reaches "
                f"the driver, got {type(message.body).__name__}"
            )

        attributes = {
            "destination": "rpc" if need_reply else destination.kind,
            "message_id": message.message_id,
            "is_event": is_event,
            "topic": topic,
            "processor_name": processor_name,
        }

        async def _transmit() -> Any:
            if need_reply:
                return await self._rpc_client.send(message)  # type: ignore[union-attr]
            if isinstance(destination, RouterDestination):
                return await self._driver.send_to_router(message)
            return await self._driver.send_to_processor(message)

        logger.debug(
            "Transmitting %s via %s (%s)",
            message.message_id,
            attributes["destination"],
            operation,
        )
        result = await get_hook_registry().execute_all(operation, attributes, _transmit)

        await chain.on_post_send(
            PostSend(
                message,
                self,
                self._driver,
                is_event=is_event,
                topic=topic,
                processor_name=processor_name,
                destination=destination,
                started_at=started_at,
                result=result,
            )
        )
        return result
