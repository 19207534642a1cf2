"""Promise — awaitable handle for a correlated reply."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from ..ports.rpc import IPromise
from ..primitives.exceptions import RpcTimeoutError

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..message import Message

DEFAULT_TIMEOUT = 60.0


class Promise(IPromise):
    """Resolves to the reply message once the RPC client receives it.

    ``receive()`` waits up to *timeout* seconds (the promise default when
    omitted) and raises :class:`RpcTimeoutError` afterwards. A timeout ends
    the exchange: *on_expire* is called with the correlation id so the client
    can drop its bookkeeping, and a reply arriving later is not delivered.
    """

    def __init__(
        self,
        correlation_id: str,
        reply_to: str,
        future: asyncio.Future[Message],
        *,
        default_timeout: float = DEFAULT_TIMEOUT,
        delete_reply_queue: bool = False,
        on_expire: Callable[[str], None] | None = None,
    ) -> None:
        self._correlation_id = correlation_id
        self._reply_to = reply_to
        self._future = future
        self._default_timeout = default_timeout
        self._delete_reply_queue = delete_reply_queue
        self._on_expire = on_expire

    @property
    def correlation_id(self) -> str:
        return self._correlation_id

    @property
    def reply_to(self) -> str:
        return self._reply_to

    @property
    def is_delete_reply_queue(self) -> bool:
        """True when ``reply_to`` is a temporary destination owned by this call."""
        return self._delete_reply_queue

    async def receive(self, timeout: float | None = None) -> Message:
        wait = self._default_timeout if timeout is None else timeout
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), wait)
        except asyncio.TimeoutError:
            if self._on_expire is not None:
                self._on_expire(self._correlation_id)
            raise RpcTimeoutError(self._correlation_id, wait) from None

    def receive_no_wait(self) -> Message | None:
        if self._future.done():
            return self._future.result()
        return None
