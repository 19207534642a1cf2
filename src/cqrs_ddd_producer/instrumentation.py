"""Instrumentation hooks around message transmission (tracing, metrics).

The producer calls :meth:`HookRegistry.execute_all` once per send, with the
driver (or RPC) handoff as the innermost handler. Operations are named
``producer.send_event.<topic>`` and ``producer.send_command.<processor>``.
The attribute mapping carries:

- ``destination``: ``"router"``, ``"processor"`` or ``"rpc"``
- ``message_id``, ``is_event``, ``topic``, ``processor_name``
"""

from __future__ import annotations

import fnmatch
import functools
import logging
import re
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

logger = logging.getLogger("cqrs_ddd.instrumentation")


@runtime_checkable
class InstrumentationHook(Protocol):
    """Async callable that wraps one transmission and must await *next_handler*."""

    async def __call__(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: Callable[[], Awaitable[Any]],
    ) -> Any: ...


def _compile_operations(patterns: Iterable[str]) -> re.Pattern[str] | None:
    translated = [fnmatch.translate(pattern) for pattern in patterns]
    if not translated:
        return None
    return re.compile("|".join(f"(?:{t})" for t in translated))


@dataclass
class HookRegistration:
    """A hook plus the sends it applies to.

    Empty ``operations`` or ``destinations`` match everything. ``enabled``
    may be flipped at runtime to mute a hook without unregistering it.
    """

    hook: InstrumentationHook
    priority: int = 0
    predicate: Callable[[str, dict[str, Any]], bool] | None = None
    operations: tuple[str, ...] = ()
    destinations: frozenset[str] = frozenset()
    enabled: bool = True
    _operation_re: re.Pattern[str] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self._operation_re = _compile_operations(self.operations)

    def matches(self, operation: str, attributes: dict[str, Any]) -> bool:
        if not self.enabled:
            return False
        destination = attributes.get("destination")
        if self.destinations and destination not in self.destinations:
            return False
        if self._operation_re and not self._operation_re.match(operation):
            return False
        return self.predicate is None or self.predicate(operation, attributes)


class HookRegistry:
    """Ordered set of instrumentation hooks.

    Lower ``priority`` wraps further out; equal priorities keep registration
    order.
    """

    def __init__(self) -> None:
        self._registrations: list[HookRegistration] = []

    def __len__(self) -> int:
        return len(self._registrations)

    def register(
        self,
        hook: InstrumentationHook,
        *,
        priority: int = 0,
        predicate: Callable[[str, dict[str, Any]], bool] | None = None,
        operations: Iterable[str] | None = None,
        destinations: Iterable[str] | None = None,
        enabled: bool = True,
    ) -> HookRegistration:
        registration = HookRegistration(
            hook,
            priority=priority,
            predicate=predicate,
            operations=tuple(operations or ()),
            destinations=frozenset(destinations or ()),
            enabled=enabled,
        )
        self._registrations.append(registration)
        self._registrations.sort(key=lambda r: r.priority)
        logger.debug(
            "Registered instrumentation hook %s (priority=%d)",
            type(hook).__name__,
            priority,
        )
        return registration

    def unregister(self, registration: HookRegistration) -> None:
        self._registrations.remove(registration)

    async def execute_all(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Run *next_handler* inside every matching hook, outermost first."""
        handler = next_handler
        for registration in reversed(self._registrations):
            if registration.matches(operation, attributes):
                handler = functools.partial(
                    registration.hook, operation, attributes, handler
                )
        return await handler()

    def clear(self) -> None:
        self._registrations.clear()


_hook_registry_var: ContextVar[HookRegistry | None] = ContextVar(
    "producer_hook_registry", default=None
)


def get_hook_registry() -> HookRegistry:
    """Return the registry of the current context, creating it on first use.

    Each context (test, task tree) gets its own registry, so hooks do not
    leak between them.
    """
    registry = _hook_registry_var.get()
    if registry is None:
        registry = HookRegistry()
        _hook_registry_var.set(registry)
    return registry


def set_hook_registry(registry: HookRegistry) -> None:
    _hook_registry_var.set(registry)
