"""Shared fixtures for producer tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from cqrs_ddd_producer.config import ClientConfig
from cqrs_ddd_producer.instrumentation import HookRegistry, set_hook_registry
from cqrs_ddd_producer.ports.driver import IDriver


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(
        prefix="a_prefix",
        app_name="an_app",
        router_topic_name="a_router_topic",
        router_queue_name="a_router_queue",
        default_processor_queue_name="a_default_processor_queue",
        router_processor_name="a_router_processor_name",
    )


@pytest.fixture
def driver(client_config: ClientConfig) -> MagicMock:
    """Driver double: config is real, both send primitives are AsyncMocks."""
    stub = MagicMock(spec=IDriver)
    stub.get_config.return_value = client_config
    stub.send_to_router = AsyncMock(return_value=None)
    stub.send_to_processor = AsyncMock(return_value=None)
    return stub


@pytest.fixture(autouse=True)
def _isolated_hook_registry() -> None:
    """Give every test an empty instrumentation registry."""
    set_hook_registry(HookRegistry())
