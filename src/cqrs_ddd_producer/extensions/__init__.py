"""Producer extensions — checkpoint contexts, chain, registry and built-ins."""

from .base import ProducerExtension
from .chain import ExtensionChain
from .context import DriverPreSend, PostSend, PreSend
from .correlation import CorrelationIdExtension
from .definition import ExtensionDefinition
from .logging import LoggingExtension
from .prepare_body import PrepareBodyExtension
from .registry import ExtensionRegistry

__all__ = [
    "CorrelationIdExtension",
    "DriverPreSend",
    "ExtensionChain",
    "ExtensionDefinition",
    "ExtensionRegistry",
    "LoggingExtension",
    "PostSend",
    "PreSend",
    "PrepareBodyExtension",
    "ProducerExtension",
]
