"""cqrs-ddd-producer — transport-agnostic send path for events and commands.

Normalizes payloads into a :class:`Message`, routes events to the shared
router or the application's own processor and commands to named
processors, runs the extension checkpoints, and hands the message to a
pluggable driver (optionally through an RPC client awaiting a reply).
"""

from __future__ import annotations

# ── Messages & config ────────────────────────────────────────────
from .config import ClientConfig
from .correlation import (
    correlation_context,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)

# ── Drivers ──────────────────────────────────────────────────────
from .drivers import InMemoryDriver, SentMessage

# ── Extensions ───────────────────────────────────────────────────
from .extensions import (
    CorrelationIdExtension,
    DriverPreSend,
    ExtensionChain,
    ExtensionDefinition,
    ExtensionRegistry,
    LoggingExtension,
    PostSend,
    PrepareBodyExtension,
    PreSend,
    ProducerExtension,
)
from .instrumentation import (
    HookRegistration,
    HookRegistry,
    InstrumentationHook,
    get_hook_registry,
    set_hook_registry,
)
from .message import (
    PROCESSOR_NAME_PROPERTY,
    TOPIC_NAME_PROPERTY,
    Message,
    MessagePriority,
    MessageScope,
)

# ── Ports ────────────────────────────────────────────────────────
from .ports import IDriver, IProducer, IProducerExtension, IPromise, IRpcClient

# ── Primitives ───────────────────────────────────────────────────
from .primitives import (
    CQRSDDDError,
    IIDGenerator,
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
    UUID4Generator,
)

# ── Producers ────────────────────────────────────────────────────
from .producers import (
    Destination,
    ProcessorDestination,
    Producer,
    RouterDestination,
    SendTrace,
    SpoolProducer,
    TraceableProducer,
)

# ── RPC ──────────────────────────────────────────────────────────
from .rpc import InMemoryRpcClient, Promise

__all__ = [
    "PROCESSOR_NAME_PROPERTY",
    "TOPIC_NAME_PROPERTY",
    "CQRSDDDError",
    "ClientConfig",
    "CorrelationIdExtension",
    "Destination",
    "DriverPreSend",
    "ExtensionChain",
    "ExtensionDefinition",
    "ExtensionRegistry",
    "HookRegistration",
    "HookRegistry",
    "IDriver",
    "IIDGenerator",
    "IProducer",
    "IProducerExtension",
    "IPromise",
    "IRpcClient",
    "InMemoryDriver",
    "InMemoryRpcClient",
    "InfrastructureError",
    "InstrumentationHook",
    "InvalidDestinationError",
    "InvalidMessageError",
    "LoggingExtension",
    "Message",
    "MessagePriority",
    "MessageScope",
    "MessagingConnectionError",
    "MessagingError",
    "MessagingSerializationError",
    "PostSend",
    "PreSend",
    "PrepareBodyExtension",
    "ProcessorDestination",
    "Producer",
    "ProducerError",
    "ProducerExtension",
    "Promise",
    "RouterDestination",
    "RpcError",
    "RpcTimeoutError",
    "SendTrace",
    "SentMessage",
    "SpoolProducer",
    "TraceableProducer",
    "UUID4Generator",
    "UnsupportedScopeError",
    "correlation_context",
    "generate_correlation_id",
    "get_correlation_id",
    "get_hook_registry",
    "set_correlation_id",
    "set_hook_registry",
]

__version__ = "0.1.0"
