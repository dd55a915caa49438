"""Presentation broadcast channel over a managed pub/sub transport.

One presenter publishes to a topic named after the session id; any number of
audience members subscribe. Delivery is best effort in transport order. The
channel does not retry, buffer or acknowledge: a lost connection only shows
up as missing presence updates and missing messages.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError

from sermon_studio.domain.presentation import (
    PRESENTATION_UPDATE_ADAPTER,
    SERMON_MESSAGE_ADAPTER,
    PresenceRole,
    PresentationUpdate,
    SermonMessage,
)

_logger = logging.getLogger(__name__)

NOTES_TOPIC_PREFIX = "notes-presentation-"
SERMON_TOPIC_PREFIX = "presentation-"
NOTES_EVENT = "spotlight-update"
SERMON_EVENT = "presentation-update"

MessageT = TypeVar("MessageT")


class RealtimeTopic(Protocol):
    """One participant's connection to a broadcast topic."""

    def on_broadcast(
        self, event: str, callback: Callable[[dict[str, object]], None]
    ) -> None:
        """Register a callback for broadcast messages of an event."""

    def on_presence_sync(self, callback: Callable[[], None]) -> None:
        """Register a callback fired whenever the presence roster changes."""

    async def subscribe(self) -> None:
        """Join the topic."""

    async def track(self, payload: dict[str, object]) -> None:
        """Publish this participant's presence record."""

    async def untrack(self) -> None:
        """Withdraw this participant's presence record."""

    async def send_broadcast(self, event: str, payload: dict[str, object]) -> None:
        """Broadcast a payload to every participant."""

    def presence_state(self) -> dict[str, list[dict[str, object]]]:
        """Return presence records keyed by participant."""

    async def unsubscribe(self) -> None:
        """Leave the topic."""


class RealtimeTransport(Protocol):
    """Factory for topic connections."""

    async def join(self, topic: str) -> RealtimeTopic:
        """Return a new participant connection for a topic."""

    async def close(self) -> None:
        """Release transport resources."""


class Subscription:
    """Cancellation token returned by ``PresentationChannel.subscribe``."""

    def __init__(self, listeners: list[Callable], callback: Callable) -> None:
        self._listeners = listeners
        self._callback = callback

    @property
    def active(self) -> bool:
        return any(listener is self._callback for listener in self._listeners)

    def cancel(self) -> None:
        """Stop delivering messages to the callback. Safe to call twice."""
        for index, listener in enumerate(self._listeners):
            if listener is self._callback:
                del self._listeners[index]
                return


class PresentationChannel(Generic[MessageT]):
    """Typed broadcast channel bound to one session."""

    def __init__(
        self,
        session_id: str,
        topic_name: str,
        event: str,
        topic: RealtimeTopic,
        adapter: TypeAdapter[MessageT],
    ) -> None:
        self.session_id = session_id
        self.topic_name = topic_name
        self._event = event
        self._topic = topic
        self._adapter = adapter
        self._listeners: list[Callable[[MessageT], None]] = []
        self._presence_listeners: list[Callable[[int], None]] = []
        self._joined = False
        self._tracked = False
        self._closed = False
        topic.on_broadcast(event, self._dispatch)
        topic.on_presence_sync(self._presence_synced)

    @property
    def closed(self) -> bool:
        return self._closed

    async def subscribe(self, callback: Callable[[MessageT], None]) -> Subscription:
        """Deliver every message broadcast from now on to the callback."""
        self._listeners.append(callback)
        await self._join()
        return Subscription(self._listeners, callback)

    def on_presence(self, callback: Callable[[int], None]) -> Subscription:
        """Report the audience count each time presence changes."""
        self._presence_listeners.append(callback)
        return Subscription(self._presence_listeners, callback)

    async def track(self, role: PresenceRole) -> None:
        """Announce this participant in the presence roster."""
        if self._closed:
            return
        await self._join()
        await self._topic.track({"role": role})
        self._tracked = True

    async def send(self, message: MessageT) -> None:
        """Broadcast a message. Does nothing once the channel is closed."""
        if self._closed:
            _logger.debug("Dropping send on closed channel %s", self.topic_name)
            return
        await self._join()
        payload = self._adapter.dump_python(
            message, mode="json", by_alias=True, exclude_none=True
        )
        await self._topic.send_broadcast(self._event, payload)

    def audience_count(self) -> int:
        """Return the number of present participants that are not presenters."""
        roster = self._topic.presence_state()
        return sum(
            1
            for metas in roster.values()
            if metas and not any(meta.get("role") == "presenter" for meta in metas)
        )

    async def unsubscribe(self) -> None:
        """Release presence, drop listeners and leave the topic. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._listeners.clear()
        self._presence_listeners.clear()
        if self._tracked:
            await self._topic.untrack()
            self._tracked = False
        if self._joined:
            await self._topic.unsubscribe()
            self._joined = False
        _logger.info("Left presentation topic %s", self.topic_name)

    async def _join(self) -> None:
        if self._joined or self._closed:
            return
        self._joined = True
        await self._topic.subscribe()
        _logger.info("Joined presentation topic %s", self.topic_name)

    def _dispatch(self, message: dict[str, object]) -> None:
        if self._closed:
            return
        payload = _unwrap_broadcast(message)
        try:
            decoded = self._adapter.validate_python(payload)
        except ValidationError as exc:
            _logger.warning(
                "Dropping malformed message on %s: %s", self.topic_name, exc
            )
            return
        for listener in list(self._listeners):
            listener(decoded)

    def _presence_synced(self) -> None:
        if self._closed or not self._presence_listeners:
            return
        count = self.audience_count()
        for listener in list(self._presence_listeners):
            listener(count)


@dataclass
class ChannelFactory:
    """Creates session-bound channels on a transport."""

    transport: RealtimeTransport

    async def notes_channel(
        self, session_id: str
    ) -> PresentationChannel[PresentationUpdate]:
        """Attach to the notes presentation topic of a session."""
        return await self._create(
            session_id, NOTES_TOPIC_PREFIX, NOTES_EVENT, PRESENTATION_UPDATE_ADAPTER
        )

    async def sermon_channel(self, session_id: str) -> PresentationChannel[SermonMessage]:
        """Attach to the sermon presentation topic of a session."""
        return await self._create(
            session_id, SERMON_TOPIC_PREFIX, SERMON_EVENT, SERMON_MESSAGE_ADAPTER
        )

    async def _create(
        self,
        session_id: str,
        prefix: str,
        event: str,
        adapter: TypeAdapter[MessageT],
    ) -> PresentationChannel[MessageT]:
        if not isinstance(session_id, str) or not session_id.strip():
            raise ValueError("Session id must be a non-empty string")
        topic_name = f"{prefix}{session_id}"
        topic = await self.transport.join(topic_name)
        return PresentationChannel(
            session_id=session_id,
            topic_name=topic_name,
            event=event,
            topic=topic,
            adapter=adapter,
        )


def _unwrap_broadcast(message: dict[str, object]) -> object:
    """Strip the transport envelope if the message still carries one."""
    if message.get("type") == "broadcast" and "event" in message:
        return message.get("payload", {})
    return message
