"""InMemoryRpcClient — IRpcClient that resolves promises in-process."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import TYPE_CHECKING

from ..ports.rpc import IRpcClient
from ..primitives.exceptions import RpcError
from .promise import DEFAULT_TIMEOUT, Promise

if TYPE_CHECKING:
    from ..message import Message
    from ..ports.driver import IDriver

logger = logging.getLogger("cqrs_ddd.rpc")


class InMemoryRpcClient(IRpcClient):
    """RPC client that transmits through a driver and matches replies in memory.

    Whatever consumes the command answers by calling :meth:`reply` with a
    message carrying the request's ``correlation_id``. Suitable for tests
    and single-process wiring; broker-backed reply queues belong in a
    driver-specific client.

    An exchange ends when its reply arrives, when the transmission fails or
    when the promise times out; temporary ``reply_to`` names are released
    with it.
    """

    def __init__(
        self,
        driver: IDriver,
        *,
        reply_prefix: str = "reply",
        default_timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._driver = driver
        self._reply_prefix = reply_prefix
        self._default_timeout = default_timeout
        self._pending: dict[str, tuple[asyncio.Future[Message], str]] = {}
        self._temporary_reply_to: set[str] = set()

    @property
    def pending(self) -> list[str]:
        """Correlation ids still waiting for a reply."""
        return list(self._pending)

    def prepare(self, message: Message) -> None:
        if not message.reply_to:
            message.reply_to = f"{self._reply_prefix}.{uuid.uuid4().hex}"
            self._temporary_reply_to.add(message.reply_to)
        if not message.correlation_id:
            message.correlation_id = str(uuid.uuid4())

    async def send(self, message: Message) -> Promise:
        correlation_id = message.correlation_id
        reply_to = message.reply_to
        if not correlation_id or not reply_to:
            raise RpcError(
                "Message must be prepared (reply_to, correlation_id) before sending",
                correlation_id=correlation_id,
            )
        if correlation_id in self._pending:
            raise RpcError(
                f"A request with correlation_id={correlation_id!r} is already "
                "pending",
                correlation_id=correlation_id,
            )

        future: asyncio.Future[Message] = asyncio.get_running_loop().create_future()
        self._pending[correlation_id] = (future, reply_to)
        temporary = reply_to in self._temporary_reply_to
        try:
            await self._driver.send_to_processor(message)
        except BaseException:
            self._forget(correlation_id)
            raise

        logger.debug(
            "Awaiting reply on %s (correlation_id=%s)", reply_to, correlation_id
        )
        return Promise(
            correlation_id,
            reply_to,
            future,
            default_timeout=self._default_timeout,
            delete_reply_queue=temporary,
            on_expire=self._expire,
        )

    def reply(self, message: Message) -> None:
        """Resolve the promise whose correlation id matches *message*."""
        correlation_id = message.correlation_id
        entry = self._forget(correlation_id or "")
        if entry is None:
            raise RpcError(
                f"No pending request for correlation_id={correlation_id!r}",
                correlation_id=correlation_id,
            )
        future, _ = entry
        if not future.done():
            future.set_result(message)

    def _expire(self, correlation_id: str) -> None:
        if self._forget(correlation_id) is not None:
            logger.warning(
                "No reply received for correlation_id=%s; giving up",
                correlation_id,
            )

    def _forget(
        self, correlation_id: str
    ) -> tuple[asyncio.Future[Message], str] | None:
        entry = self._pending.pop(correlation_id, None)
        if entry is not None:
            self._temporary_reply_to.discard(entry[1])
        return entry
