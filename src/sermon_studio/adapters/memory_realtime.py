"""In-process broadcast hub for single-process deployments and tests."""

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import uuid4

from sermon_studio.services.channel import RealtimeTopic, RealtimeTransport

_logger = logging.getLogger(__name__)


@dataclass
class _TopicState:
    name: str
    members: list["InMemoryTopicMember"] = field(default_factory=list)


class InMemoryTopicMember(RealtimeTopic):
    """A participant attached to an in-process topic.

    Broadcasts reach every joined member, the sender included, synchronously
    and in send order.
    """

    def __init__(self, hub: "InMemoryRealtimeHub", state: _TopicState) -> None:
        self.key = uuid4().hex
        self._hub = hub
        self._state = state
        self._broadcast_handlers: dict[str, list[Callable[[dict[str, object]], None]]] = {}
        self._presence_handlers: list[Callable[[], None]] = []
        self._presence: list[dict[str, object]] = []
        self._joined = False

    def on_broadcast(
        self, event: str, callback: Callable[[dict[str, object]], None]
    ) -> None:
        self._broadcast_handlers.setdefault(event, []).append(callback)

    def on_presence_sync(self, callback: Callable[[], None]) -> None:
        self._presence_handlers.append(callback)

    async def subscribe(self) -> None:
        if self._joined:
            return
        self._joined = True
        self._state.members.append(self)
        self._notify_presence()

    async def track(self, payload: dict[str, object]) -> None:
        if not self._joined:
            _logger.warning("Track before subscribe on topic %s", self._state.name)
            return
        self._presence = [dict(payload)]
        self._notify_presence()

    async def untrack(self) -> None:
        if not self._presence:
            return
        self._presence = []
        self._notify_presence()

    async def send_broadcast(self, event: str, payload: dict[str, object]) -> None:
        if not self._joined:
            return
        envelope = {"type": "broadcast", "event": event, "payload": payload}
        for member in list(self._state.members):
            member._deliver(event, copy.deepcopy(envelope))

    def presence_state(self) -> dict[str, list[dict[str, object]]]:
        return {
            member.key: [dict(meta) for meta in member._presence]
            for member in self._state.members
            if member._presence
        }

    async def unsubscribe(self) -> None:
        if not self._joined:
            return
        self._joined = False
        self._presence = []
        self._state.members.remove(self)
        self._notify_presence()
        self._hub._discard_if_empty(self._state)

    def _deliver(self, event: str, envelope: dict[str, object]) -> None:
        for handler in list(self._broadcast_handlers.get(event, [])):
            try:
                handler(envelope)
            except Exception:
                _logger.exception("Broadcast handler failed on %s", self._state.name)

    def _notify_presence(self) -> None:
        for member in list(self._state.members):
            for handler in list(member._presence_handlers):
                try:
                    handler()
                except Exception:
                    _logger.exception(
                        "Presence handler failed on %s", self._state.name
                    )


class InMemoryRealtimeHub(RealtimeTransport):
    """Process-local registry of broadcast topics."""

    member_type: type[InMemoryTopicMember] = InMemoryTopicMember

    def __init__(self) -> None:
        self._topics: dict[str, _TopicState] = {}

    async def join(self, topic: str) -> InMemoryTopicMember:
        """Return a new member connection; the same name shares one topic."""
        state = self._topics.setdefault(topic, _TopicState(name=topic))
        return self.member_type(self, state)

    def topic_names(self) -> list[str]:
        return sorted(self._topics)

    async def close(self) -> None:
        self._topics.clear()

    def _discard_if_empty(self, state: _TopicState) -> None:
        if not state.members and self._topics.get(state.name) is state:
            del self._topics[state.name]
