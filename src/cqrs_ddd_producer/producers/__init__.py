"""Producers — the send path and the wrappers around it."""

from .destination import Destination, ProcessorDestination, RouterDestination
from .producer import Producer
from .spool import SpoolProducer
from .traceable import SendTrace, TraceableProducer

__all__ = [
    "Destination",
    "ProcessorDestination",
    "Producer",
    "RouterDestination",
    "SendTrace",
    "SpoolProducer",
    "TraceableProducer",
]
