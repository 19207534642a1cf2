"""Checkpoint contexts handed to producer extensions.

Every checkpoint builds a fresh context. Its routing facts (producer,
driver, topic, processor name, ``is_event``) are read-only; the message is
held in a single mutable slot so an extension can swap the instance that
later extensions and the driver receive.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..message import Message
    from ..ports.driver import IDriver
    from ..producers.destination import Destination


class _SendContext:
    __slots__ = (
        "_destination",
        "_driver",
        "_is_event",
        "_message",
        "_processor_name",
        "_producer",
        "_started_at",
        "_topic",
    )

    def __init__(
        self,
        message: Message,
        producer: Any,
        driver: IDriver,
        *,
        is_event: bool,
        topic: str | None = None,
        processor_name: str | None = None,
        destination: Destination | None = None,
        started_at: float | None = None,
    ) -> None:
        self._message = message
        self._producer = producer
        self._driver = driver
        self._is_event = is_event
        self._topic = topic
        self._processor_name = processor_name
        self._destination = destination
        self._started_at = started_at

    @property
    def message(self) -> Message:
        return self._message

    @property
    def producer(self) -> Any:
        return self._producer

    @property
    def driver(self) -> IDriver:
        return self._driver

    @property
    def topic(self) -> str | None:
        """Topic of an event send; ``None`` for commands."""
        return self._topic

    @property
    def processor_name(self) -> str | None:
        """Processor the message is addressed to, if any.

        For commands this is the caller's processor name. For app-scoped
        events it is the router's own processor (known from the driver
        config), even though the message property itself stays unset.
        """
        return self._processor_name

    @property
    def destination(self) -> Destination | None:
        return self._destination

    @property
    def is_event(self) -> bool:
        return self._is_event

    @property
    def started_at(self) -> float | None:
        """``time.perf_counter()`` reading taken when the send began."""
        return self._started_at

    def __repr__(self) -> str:
        target = self._topic if self._is_event else self._processor_name
        return (
            f"{type(self).__name__}(is_event={self._is_event}, target={target!r}, "
            f"message_id={self._message.message_id!r})"
        )


class PreSend(_SendContext):
    """Context for ``on_pre_send_event`` / ``on_pre_send_command``.

    ``original_message`` is a detached snapshot of the message as it stood
    when the checkpoint started; it is value-equal to ``message`` until an
    extension mutates the live one.
    """

    __slots__ = ("_original_message",)

    def __init__(
        self,
        message: Message,
        producer: Any,
        driver: IDriver,
        *,
        is_event: bool,
        topic: str | None = None,
        processor_name: str | None = None,
        started_at: float | None = None,
    ) -> None:
        super().__init__(
            message,
            producer,
            driver,
            is_event=is_event,
            topic=topic,
            processor_name=processor_name,
            started_at=started_at,
        )
        self._original_message = message.snapshot()

    @property
    def original_message(self) -> Message:
        return self._original_message

    def change_message(self, message: Message) -> None:
        """Replace the message seen by later extensions and the driver."""
        self._message = message


class DriverPreSend(_SendContext):
    """Context for ``on_driver_pre_send``: routing is decided, driver is next."""

    __slots__ = ()

    def change_message(self, message: Message) -> None:
        """Replace the message the driver will transmit."""
        self._message = message


class PostSend(_SendContext):
    """Context for ``on_post_send``.

    ``result`` is whatever the driver returned, or the reply promise for
    commands sent with ``need_reply=True``.
    """

    __slots__ = ("_result",)

    def __init__(
        self,
        message: Message,
        producer: Any,
        driver: IDriver,
        *,
        is_event: bool,
        topic: str | None = None,
        processor_name: str | None = None,
        destination: Destination | None = None,
        started_at: float | None = None,
        result: Any = None,
    ) -> None:
        super().__init__(
            message,
            producer,
            driver,
            is_event=is_event,
            topic=topic,
            processor_name=processor_name,
            destination=destination,
            started_at=started_at,
        )
        self._result = result

    @property
    def result(self) -> Any:
        return self._result
