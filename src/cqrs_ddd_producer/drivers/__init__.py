"""Driver adapters. The RabbitMQ driver lives in ``drivers.rabbitmq``."""

from __future__ import annotations

from .memory import InMemoryDriver, SentMessage

__all__ = [
    "InMemoryDriver",
    "SentMessage",
]
