"""ExtensionRegistry — ordered, lazily-built set of producer extensions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .definition import ExtensionDefinition

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("cqrs_ddd.extensions")


class ExtensionRegistry:
    """Declarative list of extensions for a producer.

    Pass the registry as ``Producer(driver, extensions=registry)``. The
    producer builds the instances once, in ascending ``priority``; ties run
    in registration order::

        registry = ExtensionRegistry()
        registry.register(CorrelationIdExtension, generate=True)
        registry.register(LoggingExtension, priority=-100, level=logging.DEBUG)

        @registry.add(priority=10)
        class AuditExtension(ProducerExtension): ...
    """

    def __init__(self) -> None:
        self._definitions: list[ExtensionDefinition] = []
        self._built: list[Any] | None = None

    def __len__(self) -> int:
        return len(self._definitions)

    def register(
        self,
        extension_cls: type[Any],
        *,
        priority: int = 0,
        factory: Callable[..., Any] | None = None,
        **kwargs: object,
    ) -> ExtensionDefinition:
        """Add *extension_cls*; ``factory(**kwargs)`` replaces the constructor."""
        definition = ExtensionDefinition(
            extension_cls, priority=priority, factory=factory, kwargs=kwargs
        )
        self._definitions.append(definition)
        self._built = None
        logger.debug(
            "Registered extension %s (priority=%d)", extension_cls.__name__, priority
        )
        return definition

    def add(
        self,
        extension_cls: type[Any] | None = None,
        *,
        priority: int = 0,
        factory: Callable[..., Any] | None = None,
        **kwargs: object,
    ) -> Any:
        """Class decorator form of :meth:`register`, with or without arguments."""

        def decorate(cls: type[Any]) -> type[Any]:
            self.register(cls, priority=priority, factory=factory, **kwargs)
            return cls

        return decorate if extension_cls is None else decorate(extension_cls)

    def get_ordered_extensions(self) -> list[Any]:
        """Instances in execution order; built on first call after a change."""
        if self._built is None:
            ordered = sorted(self._definitions, key=lambda d: d.priority)
            self._built = [definition.build() for definition in ordered]
        return list(self._built)

    def clear(self) -> None:
        self._definitions.clear()
        self._built = None
