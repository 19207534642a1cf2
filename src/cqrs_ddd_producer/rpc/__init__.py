"""RPC boundary — promises and the in-memory reference client."""

from .memory import InMemoryRpcClient
from .promise import DEFAULT_TIMEOUT, Promise

__all__ = [
    "DEFAULT_TIMEOUT",
    "InMemoryRpcClient",
    "Promise",
]
