"""Destination — where a prepared message is handed to the driver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union


@dataclass(frozen=True)
class RouterDestination:
    """The shared router topic; the driver fans out by topic property."""

    kind: ClassVar[str] = "router"


@dataclass(frozen=True)
class ProcessorDestination:
    """A processor queue.

    ``router_processor`` marks an app-scoped event: the message goes to the
    router's own processor, and no processor-name property is written on
    the message so the driver applies its routing default.
    """

    processor_name: str
    router_processor: bool = False

    kind: ClassVar[str] = "processor"


Destination = Union[RouterDestination, ProcessorDestination]
