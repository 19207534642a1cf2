"""Primitives — exceptions and id generation shared by every layer."""

from .exceptions import (
    CQRSDDDError,
    InfrastructureError,
    InvalidDestinationError,
    InvalidMessageError,
    MessagingConnectionError,
    MessagingError,
    MessagingSerializationError,
    ProducerError,
    RpcError,
    RpcTimeoutError,
    UnsupportedScopeError,
)
from .id_generator import IIDGenerator, UUID4Generator

__all__ = [
    "CQRSDDDError",
    "IIDGenerator",
    "InfrastructureError",
    "InvalidDestinationError",
    "InvalidMessageError",
    "MessagingConnectionError",
    "MessagingError",
    "MessagingSerializationError",
    "ProducerError",
    "RpcError",
    "RpcTimeoutError",
    "UUID4Generator",
    "UnsupportedScopeError",
]
