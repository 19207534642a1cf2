"""Message — canonical mutable envelope handed to extensions and drivers."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

#: Reserved property keys shared with drivers and extensions. Never use them
#: for application data.
TOPIC_NAME_PROPERTY = "cqrs_ddd.topic_name"
PROCESSOR_NAME_PROPERTY = "cqrs_ddd.processor_name"


class MessageScope(str, enum.Enum):
    """Routing mode of an event."""

    MESSAGE_BUS = "message_bus"
    APP = "app"


class MessagePriority(str, enum.Enum):
    VERY_LOW = "very_low"
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    VERY_HIGH = "very_high"


class Message(BaseModel):
    """Mutable envelope for an event or command on its way to a driver.

    The producer fills in ``message_id`` and ``timestamp`` when they are
    unset, overwrites the reserved topic/processor properties, and the
    extension pipeline may mutate anything else before transmission.
    ``priority`` stays ``None`` unless set, leaving the broker default in
    place.

    ``scope`` is kept as a plain string so unknown values survive until the
    producer rejects them with a precise error.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    body: Any = None
    content_type: str | None = None
    message_id: str | None = None
    timestamp: datetime | int | str | None = None
    priority: MessagePriority | None = None
    expire: int | None = Field(default=None, ge=0, description="TTL in seconds")
    scope: str = MessageScope.MESSAGE_BUS.value
    reply_to: str | None = None
    correlation_id: str | None = None
    headers: dict[str, Any] = Field(default_factory=dict)
    properties: dict[str, str] = Field(default_factory=dict)

    def get_property(self, name: str, default: str | None = None) -> str | None:
        return self.properties.get(name, default)

    def set_property(self, name: str, value: str) -> None:
        self.properties[name] = value

    def get_header(self, name: str, default: Any = None) -> Any:
        return self.headers.get(name, default)

    def set_header(self, name: str, value: Any) -> None:
        self.headers[name] = value

    def snapshot(self) -> Message:
        """Return a deep, detached copy (value-equal, never the same object)."""
        return self.model_copy(deep=True)
