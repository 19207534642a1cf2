"""PrepareBodyExtension — default, last-resort body serializer."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from ..primitives.exceptions import MessagingSerializationError
from .base import ProducerExtension

if TYPE_CHECKING:
    from ..message import Message
    from .context import PreSend

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain"


def _json_default(obj: Any) -> Any:
    """Serialize datetime and other non-JSON types."""
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def encode_json(value: Any) -> str:
    """Compact JSON, e.g. ``{"foo":"fooVal"}``."""
    try:
        return json.dumps(value, separators=(",", ":"), default=_json_default)
    except (TypeError, ValueError) as e:
        raise MessagingSerializationError(str(e)) from e


class PrepareBodyExtension(ProducerExtension):
    """Turn an arbitrary payload into a transport-ready body.

    The producer always places this extension last, so any earlier
    extension that already produced a ``str``/``bytes`` body wins and this
    one leaves it untouched.

    - ``str`` / ``bytes``: unchanged (``text/plain`` assumed for ``str``)
    - ``None``: empty string
    - ``bool`` / ``int`` / ``float``: ``str(value)``
    - ``dict`` / ``list`` / ``tuple`` / pydantic models: compact JSON,
      content type ``application/json``
    """

    async def on_pre_send_event(self, context: PreSend) -> None:
        self.prepare(context.message)

    async def on_pre_send_command(self, context: PreSend) -> None:
        self.prepare(context.message)

    def prepare(self, message: Message) -> None:
        body = message.body
        if isinstance(body, bytes):
            return
        if isinstance(body, str):
            message.content_type = message.content_type or TEXT_CONTENT_TYPE
            return
        if body is None or isinstance(body, (bool, int, float)):
            message.body = "" if body is None else str(body)
            message.content_type = message.content_type or TEXT_CONTENT_TYPE
            return

        if hasattr(body, "model_dump"):
            body = body.model_dump(mode="json")
        if not isinstance(body, (dict, list, tuple)):
            raise MessagingSerializationError(
                "The message's body must be either None, str, bytes, a scalar, "
                f"a dict/list or a pydantic model. Got: {type(body).__name__}"
            )
        if message.content_type and message.content_type != JSON_CONTENT_TYPE:
            raise MessagingSerializationError(
                f'Content type "{JSON_CONTENT_TYPE}" only allowed when body '
                f'is structured, got "{message.content_type}"'
            )
        message.body = encode_json(body)
        message.content_type = JSON_CONTENT_TYPE
