"""Tests for ExtensionChain and ExtensionRegistry."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from cqrs_ddd_producer.extensions import (
    ExtensionChain,
    ExtensionDefinition,
    ExtensionRegistry,
    PreSend,
    ProducerExtension,
)
from cqrs_ddd_producer.message import Message
from cqrs_ddd_producer.ports.extension import IProducerExtension


def make_context() -> PreSend:
    return PreSend(Message(), MagicMock(), MagicMock(), is_event=True, topic="t")


class OnlyPostSend:
    """Duck-typed extension implementing a single hook."""

    def __init__(self) -> None:
        self.calls = 0

    async def on_post_send(self, _context: Any) -> None:
        self.calls += 1


class SyncHook:
    def __init__(self) -> None:
        self.seen: list[Any] = []

    def on_pre_send_event(self, context: Any) -> None:
        self.seen.append(context)


class Named(ProducerExtension):
    def __init__(self, name: str = "", log: list[str] | None = None) -> None:
        self.name = name
        self.log = log if log is not None else []

    async def on_pre_send_event(self, context: PreSend) -> None:
        self.log.append(self.name)


# ============================================================================
# Tests: ExtensionChain
# ============================================================================


class TestExtensionChain:
    @pytest.mark.asyncio()
    async def test_skips_missing_hooks(self) -> None:
        partial = OnlyPostSend()
        chain = ExtensionChain([partial])

        await chain.on_pre_send_event(make_context())

        assert partial.calls == 0

    @pytest.mark.asyncio()
    async def test_supports_sync_hooks(self) -> None:
        sync = SyncHook()
        context = make_context()

        await ExtensionChain([sync]).on_pre_send_event(context)

        assert sync.seen == [context]

    @pytest.mark.asyncio()
    async def test_runs_in_order(self) -> None:
        log: list[str] = []
        chain = ExtensionChain([Named("a", log), Named("b", log), Named("c", log)])

        await chain.on_pre_send_event(make_context())

        assert log == ["a", "b", "c"]

    @pytest.mark.asyncio()
    async def test_exception_stops_chain(self) -> None:
        log: list[str] = []

        class Boom(ProducerExtension):
            async def on_pre_send_event(self, context: PreSend) -> None:
                raise RuntimeError("boom")

        chain = ExtensionChain([Boom(), Named("after", log)])

        with pytest.raises(RuntimeError, match="boom"):
            await chain.on_pre_send_event(make_context())
        assert log == []

    def test_extend_returns_new_chain(self) -> None:
        base = ExtensionChain([Named("a")])
        extra = Named("b")

        extended = base.extend(None, extra)

        assert len(base) == 1
        assert extended.extensions[-1] is extra
        assert base.extend(None) is base

    def test_base_extension_satisfies_protocol(self) -> None:
        assert isinstance(ProducerExtension(), IProducerExtension)


# ============================================================================
# Tests: ExtensionRegistry
# ============================================================================


class TestExtensionRegistry:
    def test_orders_by_priority_then_registration(self) -> None:
        registry = ExtensionRegistry()
        registry.register(Named, name="second", priority=0)
        registry.register(Named, name="third", priority=0)
        registry.register(Named, name="first", priority=-5)

        names = [ext.name for ext in registry.get_ordered_extensions()]

        assert names == ["first", "second", "third"]

    def test_decorator_registration(self) -> None:
        registry = ExtensionRegistry()

        @registry.add
        class Plain(ProducerExtension):
            pass

        @registry.add(priority=-1)
        class Early(ProducerExtension):
            pass

        ordered = registry.get_ordered_extensions()
        assert [type(e) for e in ordered] == [Early, Plain]

    def test_factory_and_cache(self) -> None:
        built: list[Named] = []

        def factory(**kwargs: Any) -> Named:
            ext = Named(**kwargs)
            built.append(ext)
            return ext

        registry = ExtensionRegistry()
        registry.register(Named, factory=factory, name="f")

        first = registry.get_ordered_extensions()
        second = registry.get_ordered_extensions()

        assert first == second
        assert len(built) == 1
        assert first[0].name == "f"

    def test_clear(self) -> None:
        registry = ExtensionRegistry()
        registry.register(Named)
        registry.clear()
        assert registry.get_ordered_extensions() == []

    def test_definition_build(self) -> None:
        defn = ExtensionDefinition(extension_cls=Named, kwargs={"name": "x"})
        assert defn.build().name == "x"
