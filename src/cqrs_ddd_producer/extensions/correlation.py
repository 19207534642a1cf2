"""CorrelationIdExtension — stamp the ambient correlation id on outgoing messages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..correlation import generate_correlation_id, get_correlation_id
from .base import ProducerExtension

if TYPE_CHECKING:
    from .context import PreSend


class CorrelationIdExtension(ProducerExtension):
    """Copies the context's correlation id into a message header.

    A header already present on the message is left alone. With
    ``generate=True`` a fresh id is minted when the context has none.
    This header is distinct from ``Message.correlation_id``, which belongs
    to the RPC exchange.
    """

    def __init__(
        self, header_name: str = "correlation_id", *, generate: bool = False
    ) -> None:
        self._header = header_name
        self._generate = generate

    async def on_pre_send_event(self, context: PreSend) -> None:
        self._stamp(context)

    async def on_pre_send_command(self, context: PreSend) -> None:
        self._stamp(context)

    def _stamp(self, context: PreSend) -> None:
        message = context.message
        if message.get_header(self._header):
            return
        correlation_id = get_correlation_id()
        if correlation_id is None and self._generate:
            correlation_id = generate_correlation_id()
        if correlation_id is not None:
            message.set_header(self._header, correlation_id)
