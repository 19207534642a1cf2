"""TraceableProducer — records what was sent, with assertion helpers for tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from ..extensions.chain import ExtensionChain
from ..message import Message, MessagePriority
from ..ports.producer import IProducer

if TYPE_CHECKING:
    from ..extensions.context import DriverPreSend, PostSend, PreSend
    from ..ports.rpc import IPromise


@dataclass(frozen=True)
class SendTrace:
    """Snapshot of one successful send, as the driver received it."""

    topic: str | None
    processor_name: str | None
    body: Any
    content_type: str | None
    message_id: str | None
    timestamp: Any
    priority: MessagePriority | None
    expire: int | None
    headers: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    sent_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class _SentMessageRecorder:
    """Per-call extension that remembers the message handed to the driver.

    Wraps the caller's own extension so it keeps its place in the chain.
    """

    def __init__(self, extension: Any | None) -> None:
        self._chain = ExtensionChain([extension] if extension is not None else [])
        self.sent: Message | None = None

    async def on_pre_send_event(self, context: PreSend) -> None:
        await self._chain.on_pre_send_event(context)

    async def on_pre_send_command(self, context: PreSend) -> None:
        await self._chain.on_pre_send_command(context)

    async def on_driver_pre_send(self, context: DriverPreSend) -> None:
        await self._chain.on_driver_pre_send(context)

    async def on_post_send(self, context: PostSend) -> None:
        await self._chain.on_post_send(context)
        self.sent = context.message


class TraceableProducer(IProducer):
    """Wraps a producer and keeps a trace of every event and command sent.

    Traces are taken from the message the driver received, so replacements
    made by extensions show up. Failed sends leave no trace.
    """

    def __init__(self, producer: IProducer) -> None:
        self._producer = producer
        self._traces: list[SendTrace] = []

    async def send_event(
        self, topic: str, message: Any, extension: Any | None = None
    ) -> None:
        message = _as_message(message)
        recorder = _SentMessageRecorder(extension)
        await self._producer.send_event(topic, message, recorder)
        self._collect(recorder.sent or message, topic=topic)

    async def send_command(
        self,
        processor_name: str,
        message: Any,
        need_reply: bool = False,
        extension: Any | None = None,
    ) -> IPromise | None:
        message = _as_message(message)
        recorder = _SentMessageRecorder(extension)
        promise = await self._producer.send_command(
            processor_name, message, need_reply, recorder
        )
        self._collect(recorder.sent or message, processor_name=processor_name)
        return promise

    def get_traces(self) -> list[SendTrace]:
        return list(self._traces)

    def get_topic_traces(self, topic: str) -> list[SendTrace]:
        return [t for t in self._traces if t.topic == topic]

    def get_command_traces(self, processor_name: str) -> list[SendTrace]:
        return [t for t in self._traces if t.processor_name == processor_name]

    def clear_traces(self) -> None:
        self._traces.clear()

    def assert_sent(
        self,
        *,
        topic: str | None = None,
        processor_name: str | None = None,
        count: int = 1,
    ) -> None:
        """Assert that exactly *count* sends matched the topic/processor filter."""
        traces = self._traces
        if topic is not None:
            traces = [t for t in traces if t.topic == topic]
        if processor_name is not None:
            traces = [t for t in traces if t.processor_name == processor_name]
        assert len(traces) == count, (
            f"Expected {count} send(s) (topic={topic!r}, "
            f"processor_name={processor_name!r}), got {len(traces)}. "
            f"Sent: {[(t.topic or t.processor_name) for t in self._traces]}"
        )

    def _collect(
        self,
        message: Message,
        *,
        topic: str | None = None,
        processor_name: str | None = None,
    ) -> None:
        self._traces.append(
            SendTrace(
                topic=topic,
                processor_name=processor_name,
                body=message.body,
                content_type=message.content_type,
                message_id=message.message_id,
                timestamp=message.timestamp,
                priority=message.priority,
                expire=message.expire,
                headers=dict(message.headers),
                properties=dict(message.properties),
            )
        )


def _as_message(message: Any) -> Message:
    return message if isinstance(message, Message) else Message(body=message)
