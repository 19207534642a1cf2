"""ExtensionChain — run one checkpoint across an ordered set of extensions."""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .context import DriverPreSend, PostSend, PreSend

logger = logging.getLogger("cqrs_ddd.extensions")


class ExtensionChain:
    """Ordered, immutable sequence of extensions.

    Each checkpoint calls the matching hook on every extension in order.
    Extensions that do not define a hook are skipped, and hooks may be
    plain functions or coroutines. Exceptions propagate unchanged and stop
    the send.
    """

    def __init__(self, extensions: Iterable[Any] = ()) -> None:
        self._extensions: tuple[Any, ...] = tuple(extensions)

    @property
    def extensions(self) -> tuple[Any, ...]:
        return self._extensions

    def __len__(self) -> int:
        return len(self._extensions)

    def extend(self, *extensions: Any) -> ExtensionChain:
        """Return a new chain with *extensions* appended (``None`` is skipped)."""
        extra = [ext for ext in extensions if ext is not None]
        if not extra:
            return self
        return ExtensionChain((*self._extensions, *extra))

    async def on_pre_send_event(self, context: PreSend) -> None:
        await self._run("on_pre_send_event", context)

    async def on_pre_send_command(self, context: PreSend) -> None:
        await self._run("on_pre_send_command", context)

    async def on_driver_pre_send(self, context: DriverPreSend) -> None:
        await self._run("on_driver_pre_send", context)

    async def on_post_send(self, context: PostSend) -> None:
        await self._run("on_post_send", context)

    async def _run(self, hook_name: str, context: Any) -> None:
        for extension in self._extensions:
            hook = getattr(extension, hook_name, None)
            if hook is None or not callable(hook):
                continue
            result = hook(context)
            if inspect.isawaitable(result):
                await result
            logger.debug("%s.%s done", type(extension).__name__, hook_name)
