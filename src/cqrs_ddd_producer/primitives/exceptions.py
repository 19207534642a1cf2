"""Producer and infrastructure exceptions for cqrs-ddd-producer."""

from __future__ import annotations


class CQRSDDDError(Exception):
    """Root exception for the entire cqrs-ddd toolkit."""


class ProducerError(CQRSDDDError):
    """Base class for caller errors detected on the send path.

    Raised before the driver is called, so nothing has been sent when
    one of these surfaces.
    """


class InvalidDestinationError(ProducerError):
    """Raised when an event send carries a caller-set processor name."""

    def __init__(self, property_name: str) -> None:
        self.property_name = property_name
        super().__init__(f"The {property_name} property must not be set.")


class UnsupportedScopeError(ProducerError):
    """Raised when a message scope is neither message-bus nor app."""

    def __init__(self, scope: object) -> None:
        self.scope = scope
        super().__init__(f'The message scope "{scope}" is not supported.')


class InvalidMessageError(ProducerError):
    """Raised when a message cannot be handed to a driver as-is."""


class InfrastructureError(CQRSDDDError):
    """Base class for all infrastructure-related errors."""


class MessagingError(InfrastructureError):
    """Base class for all messaging-related infrastructure errors."""


class MessagingConnectionError(MessagingError):
    """Raised when connectivity to the message broker fails."""


class MessagingSerializationError(MessagingError):
    """Raised when a message body cannot be serialized for transport."""


class RpcError(MessagingError):
    """Raised by the RPC boundary when a correlated exchange fails."""

    def __init__(self, message: str, correlation_id: str | None = None) -> None:
        self.correlation_id = correlation_id
        super().__init__(message)


class RpcTimeoutError(RpcError):
    """Raised when no reply arrives within the requested timeout."""

    def __init__(self, correlation_id: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            f"No reply received for correlation_id={correlation_id!r} "
            f"within {timeout}s",
            correlation_id=correlation_id,
        )
