"""RabbitMQ driver (requires the ``rabbitmq`` extra)."""

from __future__ import annotations

from .connection import RabbitMQConnectionManager
from .driver import PRIORITY_MAP, RabbitMQDriver, to_amqp_message

__all__ = [
    "PRIORITY_MAP",
    "RabbitMQConnectionManager",
    "RabbitMQDriver",
    "to_amqp_message",
]
