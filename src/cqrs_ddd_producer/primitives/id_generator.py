import uuid
from typing import Protocol


class IIDGenerator(Protocol):
    """Source of ``Message.message_id`` values for messages sent without one.

    Swap it for sortable or broker-native ids (UUIDv7, Snowflake).
    """

    def next_id(self) -> str: ...


class UUID4Generator(IIDGenerator):
    def next_id(self) -> str:
        return str(uuid.uuid4())
