"""ExtensionDefinition — how to build one registered extension."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class ExtensionDefinition:
    """Class, priority and constructor arguments of a registered extension.

    Nothing is instantiated until :meth:`build`, so a registry can be
    declared at import time and materialized when the producer is wired.
    """

    extension_cls: type[Any]
    priority: int = 0
    factory: Callable[..., Any] | None = None
    kwargs: dict[str, object] = field(default_factory=dict)

    def build(self) -> Any:
        constructor = self.factory or self.extension_cls
        return constructor(**self.kwargs)
