"""Ports — boundaries the producer consumes (driver, RPC) and exposes (extensions)."""

from .driver import IDriver
from .extension import IProducerExtension
from .producer import IProducer
from .rpc import IPromise, IRpcClient

__all__ = [
    "IDriver",
    "IProducer",
    "IProducerExtension",
    "IPromise",
    "IRpcClient",
]
