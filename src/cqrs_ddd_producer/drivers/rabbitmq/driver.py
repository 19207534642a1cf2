"""RabbitMQDriver — IDriver over AMQP 0-9-1 with aio-pika."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

import aio_pika

from ...config import ClientConfig
from ...message import PROCESSOR_NAME_PROPERTY, TOPIC_NAME_PROPERTY, MessagePriority
from ...ports.driver import IDriver

if TYPE_CHECKING:
    from ...message import Message
    from .connection import RabbitMQConnectionManager

#: AMQP priorities; queues must be declared with ``x-max-priority >= 4``.
PRIORITY_MAP: dict[MessagePriority, int] = {
    MessagePriority.VERY_LOW: 0,
    MessagePriority.LOW: 1,
    MessagePriority.NORMAL: 2,
    MessagePriority.HIGH: 3,
    MessagePriority.VERY_HIGH: 4,
}


def to_amqp_message(message: Message) -> aio_pika.Message:
    """Map a prepared envelope onto an AMQP message.

    Application properties travel as AMQP headers next to the message
    headers, so consumers can read the reserved topic/processor keys.
    """
    body = message.body
    if isinstance(body, str):
        body = body.encode("utf-8")
    timestamp = message.timestamp
    if not isinstance(timestamp, (datetime, int, float)):
        timestamp = None
    return aio_pika.Message(
        body=body,
        content_type=message.content_type,
        headers={**message.headers, **message.properties},
        message_id=message.message_id,
        timestamp=timestamp,
        priority=PRIORITY_MAP.get(message.priority) if message.priority else None,
        reply_to=message.reply_to,
        correlation_id=message.correlation_id,
        expiration=message.expire,
        delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
    )


class RabbitMQDriver(IDriver):
    """RabbitMQ adapter implementing IDriver.

    - router sends: published to the router topic exchange, routing key =
      the message's topic property
    - processor sends: published through the default exchange straight to
      the processor queue (the default processor queue when a processor
      name is set, the router queue otherwise)

    Publisher confirms come from the connection's channel; failures
    propagate unchanged.
    """

    def __init__(
        self,
        connection: RabbitMQConnectionManager,
        config: ClientConfig | None = None,
    ) -> None:
        self._connection = connection
        self._config = config or ClientConfig()

    def get_config(self) -> ClientConfig:
        return self._config

    async def setup_broker(self) -> None:
        """Declare the router exchange, router queue and processor queue."""
        await self._connection.connect()
        channel = self._connection.channel
        exchange = await self._connection.topic_exchange(
            self._config.transport_router_topic_name
        )
        router_queue = await channel.declare_queue(
            self._config.transport_router_queue_name,
            durable=True,
            arguments={"x-max-priority": 4},
        )
        await router_queue.bind(exchange, routing_key="#")
        await channel.declare_queue(
            self._processor_queue_name(),
            durable=True,
            arguments={"x-max-priority": 4},
        )

    async def send_to_router(self, message: Message) -> None:
        await self._connection.connect()
        exchange = await self._connection.topic_exchange(
            self._config.transport_router_topic_name
        )
        await exchange.publish(
            to_amqp_message(message),
            routing_key=message.get_property(TOPIC_NAME_PROPERTY) or "",
        )

    async def send_to_processor(self, message: Message) -> None:
        await self._connection.connect()
        if message.get_property(PROCESSOR_NAME_PROPERTY):
            queue_name = self._processor_queue_name()
        else:
            queue_name = self._config.transport_router_queue_name
        await self._connection.channel.default_exchange.publish(
            to_amqp_message(message),
            routing_key=queue_name,
        )

    async def health_check(self) -> bool:
        """Return True if the connection is healthy."""
        return await self._connection.health_check()

    def _processor_queue_name(self) -> str:
        return self._config.create_transport_queue_name(
            self._config.default_processor_queue_name
        )
