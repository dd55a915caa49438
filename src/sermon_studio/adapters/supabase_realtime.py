"""Supabase Realtime implementation of the broadcast transport."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from supabase import AsyncClient, acreate_client

from sermon_studio.services.channel import RealtimeTopic, RealtimeTransport


@dataclass
class SupabaseRealtimeTopic(RealtimeTopic):
    """Wraps a Supabase Realtime channel."""

    channel: Any

    def on_broadcast(
        self, event: str, callback: Callable[[dict[str, object]], None]
    ) -> None:
        self.channel.on_broadcast(event, callback)

    def on_presence_sync(self, callback: Callable[[], None]) -> None:
        self.channel.on_presence_sync(callback)

    async def subscribe(self) -> None:
        await self.channel.subscribe()

    async def track(self, payload: dict[str, object]) -> None:
        await self.channel.track(payload)

    async def untrack(self) -> None:
        await self.channel.untrack()

    async def send_broadcast(self, event: str, payload: dict[str, object]) -> None:
        await self.channel.send_broadcast(event, payload)

    def presence_state(self) -> dict[str, list[dict[str, object]]]:
        return {
            key: [dict(presence) for presence in presences]
            for key, presences in self.channel.presence_state().items()
        }

    async def unsubscribe(self) -> None:
        await self.channel.unsubscribe()


@dataclass
class SupabaseRealtimeTransport(RealtimeTransport):
    """Opens Realtime channels on a lazily created async Supabase client."""

    supabase_url: str
    supabase_key: str
    client: AsyncClient | None = None

    async def join(self, topic: str) -> SupabaseRealtimeTopic:
        """Create a channel with self-broadcast and a unique presence key."""
        client = await self._client()
        channel = client.channel(
            topic,
            {
                "config": {
                    "broadcast": {"self": True, "ack": False},
                    "presence": {"key": uuid4().hex},
                }
            },
        )
        return SupabaseRealtimeTopic(channel=channel)

    async def close(self) -> None:
        """Remove every channel opened through this transport."""
        if self.client is not None:
            await self.client.remove_all_channels()

    async def _client(self) -> AsyncClient:
        if self.client is None:
            self.client = await acreate_client(self.supabase_url, self.supabase_key)
        return self.client
