"""Tests for Producer.send_event — routing, defaults, validation, checkpoints."""

from __future__ import annotations

import re
from typing import Any
from unittest.mock import MagicMock

import pytest

from cqrs_ddd_producer.extensions.base import ProducerExtension
from cqrs_ddd_producer.extensions.context import DriverPreSend, PostSend, PreSend
from cqrs_ddd_producer.extensions.registry import ExtensionRegistry
from cqrs_ddd_producer.message import (
    PROCESSOR_NAME_PROPERTY,
    TOPIC_NAME_PROPERTY,
    Message,
    MessagePriority,
    MessageScope,
)
from cqrs_ddd_producer.primitives.exceptions import (
    InvalidDestinationError,
    InvalidMessageError,
    MessagingConnectionError,
    UnsupportedScopeError,
)
from cqrs_ddd_producer.producers import (
    ProcessorDestination,
    Producer,
    RouterDestination,
)

# ============================================================================
# Test Extensions
# ============================================================================


class RecordingExtension(ProducerExtension):
    """Keeps every context it sees, keyed by hook name."""

    def __init__(self, calls: list[str] | None = None, name: str = "rec") -> None:
        self.calls = calls if calls is not None else []
        self.name = name
        self.contexts: dict[str, list[Any]] = {}
        self.snapshot_checks: list[tuple[bool, bool]] = []

    def _record(self, hook: str, context: Any) -> None:
        self.calls.append(f"{self.name}:{hook}")
        self.contexts.setdefault(hook, []).append(context)

    async def on_pre_send_event(self, context: PreSend) -> None:
        self._record("pre_send_event", context)
        # Compared at call time; later extensions keep mutating the message.
        self.snapshot_checks.append(
            (
                context.original_message == context.message,
                context.original_message is context.message,
            )
        )

    async def on_pre_send_command(self, context: PreSend) -> None:
        self._record("pre_send_command", context)

    async def on_driver_pre_send(self, context: DriverPreSend) -> None:
        self._record("driver_pre_send", context)

    async def on_post_send(self, context: PostSend) -> None:
        self._record("post_send", context)


class CustomPrepareBodyExtension(ProducerExtension):
    async def on_pre_send_event(self, context: PreSend) -> None:
        context.message.body = "theEventBodySerializedByCustomExtension"


PROCESSOR_ERROR = re.escape(f"The {PROCESSOR_NAME_PROPERTY} property must not be set.")


def sent_message(mock_method: Any) -> Message:
    return mock_method.await_args.args[0]


# ============================================================================
# Tests: routing & defaults
# ============================================================================


class TestSendEventRouting:
    @pytest.mark.asyncio()
    async def test_sends_event_to_router(self, driver: MagicMock) -> None:
        message = Message()
        producer = Producer(driver)

        await producer.send_event("topic", message)

        driver.send_to_router.assert_awaited_once()
        assert sent_message(driver.send_to_router) is message
        driver.send_to_processor.assert_not_awaited()
        assert message.properties == {TOPIC_NAME_PROPERTY: "topic"}

    @pytest.mark.asyncio()
    async def test_overwrites_topic_property(self, driver: MagicMock) -> None:
        message = Message()
        message.set_property(TOPIC_NAME_PROPERTY, "topicShouldBeOverwritten")

        await Producer(driver).send_event("expectedTopic", message)

        assert message.properties == {TOPIC_NAME_PROPERTY: "expectedTopic"}

    @pytest.mark.asyncio()
    async def test_sends_event_to_application_router(self, driver: MagicMock) -> None:
        message = Message(body="aBody", scope=MessageScope.APP.value)

        await Producer(driver).send_event("topic", message)

        driver.send_to_router.assert_not_awaited()
        driver.send_to_processor.assert_awaited_once()
        delivered = sent_message(driver.send_to_processor)
        assert delivered.body == "aBody"
        # Unset means "the router's own processor" to the driver.
        assert delivered.get_property(PROCESSOR_NAME_PROPERTY) is None

    @pytest.mark.asyncio()
    async def test_wraps_plain_payload(self, driver: MagicMock) -> None:
        await Producer(driver).send_event("topic", {})

        delivered = sent_message(driver.send_to_router)
        assert isinstance(delivered, Message)
        assert delivered.get_property(TOPIC_NAME_PROPERTY) == "topic"
        assert delivered.message_id
        assert delivered.timestamp
        assert delivered.priority is None

    @pytest.mark.asyncio()
    async def test_empty_topic_rejected(self, driver: MagicMock) -> None:
        with pytest.raises(ValueError, match="topic"):
            await Producer(driver).send_event("", Message())
        driver.send_to_router.assert_not_awaited()


class TestSendEventDefaults:
    @pytest.mark.asyncio()
    async def test_no_priority_by_default(self, driver: MagicMock) -> None:
        message = Message()
        await Producer(driver).send_event("topic", message)
        assert message.priority is None

    @pytest.mark.asyncio()
    async def test_keeps_custom_priority(self, driver: MagicMock) -> None:
        message = Message(priority=MessagePriority.HIGH)
        await Producer(driver).send_event("topic", message)
        assert message.priority is MessagePriority.HIGH

    @pytest.mark.asyncio()
    async def test_generates_message_id(self, driver: MagicMock) -> None:
        message = Message()
        await Producer(driver).send_event("topic", message)
        assert message.message_id

    @pytest.mark.asyncio()
    async def test_keeps_custom_message_id(self, driver: MagicMock) -> None:
        message = Message(message_id="theCustomMessageId")
        await Producer(driver).send_event("topic", message)
        assert message.message_id == "theCustomMessageId"

    @pytest.mark.asyncio()
    async def test_generates_timestamp(self, driver: MagicMock) -> None:
        message = Message()
        await Producer(driver).send_event("topic", message)
        assert message.timestamp

    @pytest.mark.asyncio()
    async def test_keeps_custom_timestamp(self, driver: MagicMock) -> None:
        message = Message(timestamp="theCustomTimestamp")
        await Producer(driver).send_event("topic", message)
        assert message.timestamp == "theCustomTimestamp"

    @pytest.mark.asyncio()
    async def test_keeps_falsy_timestamp_and_message_id(
        self, driver: MagicMock
    ) -> None:
        message = Message(message_id="", timestamp=0)
        await Producer(driver).send_event("topic", message)

        sent = sent_message(driver.send_to_router)
        assert sent.timestamp == 0
        assert sent.message_id == ""

    @pytest.mark.asyncio()
    async def test_uses_injected_id_generator_and_clock(
        self, driver: MagicMock
    ) -> None:
        id_generator = MagicMock()
        id_generator.next_id.return_value = "id-1"
        producer = Producer(driver, id_generator=id_generator, clock=lambda: 1700000000)
        message = Message()

        await producer.send_event("topic", message)

        assert message.message_id == "id-1"
        assert message.timestamp == 1700000000

    @pytest.mark.asyncio()
    async def test_extensions_see_same_id_and_timestamp_as_driver(
        self, driver: MagicMock
    ) -> None:
        ext = RecordingExtension()
        await Producer(driver, extensions=[ext]).send_event("topic", Message())

        seen = ext.contexts["pre_send_event"][0].message
        delivered = sent_message(driver.send_to_router)
        assert seen.message_id == delivered.message_id
        assert seen.timestamp == delivered.timestamp


# ============================================================================
# Tests: body serialization
# ============================================================================


class TestSendEventSerialization:
    @pytest.mark.asyncio()
    async def test_serializes_message_to_json_by_default(
        self, driver: MagicMock
    ) -> None:
        await Producer(driver).send_event("topic", {"foo": "fooVal"})

        delivered = sent_message(driver.send_to_router)
        assert delivered.body == '{"foo":"fooVal"}'
        assert delivered.content_type == "application/json"

    @pytest.mark.asyncio()
    async def test_serializes_message_by_custom_extension(
        self, driver: MagicMock
    ) -> None:
        producer = Producer(driver, extensions=[CustomPrepareBodyExtension()])

        await producer.send_event("topic", {"foo": "fooVal"})

        delivered = sent_message(driver.send_to_router)
        assert delivered.body == "theEventBodySerializedByCustomExtension"

    @pytest.mark.asyncio()
    async def test_per_call_extension_can_serialize(self, driver: MagicMock) -> None:
        await Producer(driver).send_event(
            "topic", {"foo": "fooVal"}, CustomPrepareBodyExtension()
        )

        delivered = sent_message(driver.send_to_router)
        assert delivered.body == "theEventBodySerializedByCustomExtension"


# ============================================================================
# Tests: validation
# ============================================================================


class TestSendEventValidation:
    @pytest.mark.asyncio()
    async def test_throws_if_processor_name_set_for_message_bus(
        self, driver: MagicMock
    ) -> None:
        message = Message(body="")
        message.set_property(PROCESSOR_NAME_PROPERTY, "aProcessor")

        with pytest.raises(InvalidDestinationError, match=PROCESSOR_ERROR):
            await Producer(driver).send_event("topic", message)

        driver.send_to_router.assert_not_awaited()
        driver.send_to_processor.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_throws_if_processor_name_set_for_application_router(
        self, driver: MagicMock
    ) -> None:
        message = Message(body="aBody", scope=MessageScope.APP.value)
        message.set_property(PROCESSOR_NAME_PROPERTY, "aCustomProcessor")

        with pytest.raises(InvalidDestinationError, match=PROCESSOR_ERROR):
            await Producer(driver).send_event("topic", message)

        driver.send_to_router.assert_not_awaited()
        driver.send_to_processor.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_throws_if_unsupported_scope(self, driver: MagicMock) -> None:
        message = Message(scope="iDontKnowScope")

        with pytest.raises(UnsupportedScopeError) as exc_info:
            await Producer(driver).send_event("topic", message)

        assert str(exc_info.value) == (
            'The message scope "iDontKnowScope" is not supported.'
        )
        assert exc_info.value.scope == "iDontKnowScope"
        driver.send_to_router.assert_not_awaited()
        driver.send_to_processor.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_validation_fails_before_any_checkpoint(
        self, driver: MagicMock
    ) -> None:
        ext = RecordingExtension()
        message = Message(scope="iDontKnowScope")

        with pytest.raises(UnsupportedScopeError):
            await Producer(driver, extensions=[ext]).send_event("topic", message)

        assert ext.calls == []

    @pytest.mark.asyncio()
    async def test_driver_error_propagates_unchanged(self, driver: MagicMock) -> None:
        error = MessagingConnectionError("broker down")
        driver.send_to_router.side_effect = error
        ext = RecordingExtension()

        with pytest.raises(MessagingConnectionError) as exc_info:
            await Producer(driver, extensions=[ext]).send_event("topic", Message())

        assert exc_info.value is error
        assert "rec:post_send" not in ext.calls

    @pytest.mark.asyncio()
    async def test_body_replaced_at_driver_pre_send_is_still_checked(
        self, driver: MagicMock
    ) -> None:
        class StructuredBody(ProducerExtension):
            async def on_driver_pre_send(self, context: DriverPreSend) -> None:
                context.change_message(Message(body={"a": 1}))

        ext = RecordingExtension()
        producer = Producer(driver, extensions=[ext])

        with pytest.raises(InvalidMessageError):
            await producer.send_event("topic", Message(), StructuredBody())

        driver.send_to_router.assert_not_awaited()
        driver.send_to_processor.assert_not_awaited()
        assert "rec:post_send" not in ext.calls


# ============================================================================
# Tests: extension checkpoints
# ============================================================================


class TestSendEventCheckpoints:
    @pytest.mark.asyncio()
    @pytest.mark.parametrize("scope", [MessageScope.MESSAGE_BUS, MessageScope.APP])
    async def test_pre_send_event_context(
        self, driver: MagicMock, scope: MessageScope
    ) -> None:
        message = Message(body="aBody", scope=scope.value)
        ext = RecordingExtension()
        producer = Producer(driver, extensions=[ext])

        await producer.send_event("topic", message)

        [context] = ext.contexts["pre_send_event"]
        assert context.message is message
        assert context.producer is producer
        assert context.driver is driver
        assert context.topic == "topic"
        assert context.is_event is True
        assert ext.snapshot_checks == [(True, False)]
        assert "pre_send_command" not in ext.contexts

    @pytest.mark.asyncio()
    @pytest.mark.parametrize("scope", [MessageScope.MESSAGE_BUS, MessageScope.APP])
    async def test_driver_pre_send_and_post_send_context(
        self, driver: MagicMock, scope: MessageScope
    ) -> None:
        message = Message(body="aBody", scope=scope.value)
        ext = RecordingExtension()
        producer = Producer(driver, extensions=[ext])

        await producer.send_event("topic", message)

        for hook in ("driver_pre_send", "post_send"):
            [context] = ext.contexts[hook]
            assert context.message is message
            assert context.producer is producer
            assert context.driver is driver
            assert context.topic == "topic"
            assert context.is_event is True

    @pytest.mark.asyncio()
    async def test_app_scope_reports_router_processor(self, driver: MagicMock) -> None:
        ext = RecordingExtension()
        message = Message(body="aBody", scope=MessageScope.APP.value)

        await Producer(driver, extensions=[ext]).send_event("topic", message)

        context = ext.contexts["driver_pre_send"][0]
        assert context.processor_name == "a_router_processor_name"
        assert context.destination == ProcessorDestination(
            "a_router_processor_name", router_processor=True
        )
        assert ext.contexts["pre_send_event"][0].processor_name == (
            "a_router_processor_name"
        )

    @pytest.mark.asyncio()
    async def test_message_bus_reports_router_destination(
        self, driver: MagicMock
    ) -> None:
        ext = RecordingExtension()

        await Producer(driver, extensions=[ext]).send_event("topic", Message())

        context = ext.contexts["driver_pre_send"][0]
        assert context.destination == RouterDestination()
        assert context.processor_name is None

    @pytest.mark.asyncio()
    async def test_checkpoint_order(self, driver: MagicMock) -> None:
        calls: list[str] = []

        async def _send(_message: Message) -> None:
            calls.append("driver:send_to_router")

        driver.send_to_router.side_effect = _send
        ext = RecordingExtension(calls)

        await Producer(driver, extensions=[ext]).send_event("topic", Message())

        assert calls == [
            "rec:pre_send_event",
            "rec:driver_pre_send",
            "driver:send_to_router",
            "rec:post_send",
        ]

    @pytest.mark.asyncio()
    async def test_global_extensions_run_before_per_call_extension(
        self, driver: MagicMock
    ) -> None:
        calls: list[str] = []
        first = RecordingExtension(calls, "first")
        second = RecordingExtension(calls, "second")
        per_call = RecordingExtension(calls, "call")

        await Producer(driver, extensions=[first, second]).send_event(
            "topic", Message(), per_call
        )

        assert calls[:3] == [
            "first:pre_send_event",
            "second:pre_send_event",
            "call:pre_send_event",
        ]

    @pytest.mark.asyncio()
    async def test_default_serializer_runs_after_per_call_extension(
        self, driver: MagicMock
    ) -> None:
        bodies: list[Any] = []

        class BodyRecorder(ProducerExtension):
            async def on_pre_send_event(self, context: PreSend) -> None:
                bodies.append(context.message.body)

        await Producer(driver).send_event("topic", {"a": 1}, BodyRecorder())

        assert bodies == [{"a": 1}]
        assert sent_message(driver.send_to_router).body == '{"a":1}'

    @pytest.mark.asyncio()
    async def test_extension_can_replace_message(self, driver: MagicMock) -> None:
        replacement = Message(body="replaced")

        class Replacer(ProducerExtension):
            async def on_driver_pre_send(self, context: DriverPreSend) -> None:
                context.change_message(replacement)

        late = RecordingExtension()
        await Producer(driver, extensions=[Replacer(), late]).send_event(
            "topic", Message(body="original")
        )

        assert sent_message(driver.send_to_router) is replacement
        assert late.contexts["driver_pre_send"][0].message is replacement
        assert late.contexts["post_send"][0].message is replacement

    @pytest.mark.asyncio()
    async def test_original_message_is_detached_snapshot(
        self, driver: MagicMock
    ) -> None:
        snapshots: list[Message] = []

        class Mutator(ProducerExtension):
            async def on_pre_send_event(self, context: PreSend) -> None:
                context.message.set_header("x-mutated", True)
                snapshots.append(context.original_message)

        await Producer(driver, extensions=[Mutator()]).send_event("topic", Message())

        assert snapshots[0].headers == {}
        assert sent_message(driver.send_to_router).headers == {"x-mutated": True}

    @pytest.mark.asyncio()
    async def test_accepts_extension_registry(self, driver: MagicMock) -> None:
        calls: list[str] = []
        registry = ExtensionRegistry()
        registry.register(RecordingExtension, calls=calls, name="late", priority=10)
        registry.register(RecordingExtension, calls=calls, name="early", priority=-10)

        await Producer(driver, extensions=registry).send_event("topic", Message())

        assert calls[:2] == ["early:pre_send_event", "late:pre_send_event"]
