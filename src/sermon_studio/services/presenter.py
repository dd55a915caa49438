"""Presenter side of live presentations."""

import asyncio
import logging
from collections.abc import Callable

from sermon_studio.domain.presentation import (
    BlockMessage,
    ClearMessage,
    InitUpdate,
    LineMessage,
    PresentationSettings,
    PresentationState,
    PresentationUpdate,
    SermonMessage,
    SettingsMessage,
)
from sermon_studio.services.channel import ChannelFactory, PresentationChannel
from sermon_studio.services.display_settings import DisplaySettingsService
from sermon_studio.services.live_sessions import (
    NOTES_PREFIX,
    SERMON_PREFIX,
    LiveUrlBuilder,
    SermonSessionUrls,
    generate_session_id,
)
from sermon_studio.services.notifications import Notifier

_logger = logging.getLogger(__name__)


class NotesPresenter:
    """Shares one note's spotlight state with a live audience.

    Every change to the state is followed by a full ``init`` broadcast so a
    viewer that joins late or misses a message catches up on the next change.
    Changes made within one event-loop tick are sent as a single message.
    """

    def __init__(
        self,
        channels: ChannelFactory,
        urls: LiveUrlBuilder,
        notifier: Notifier | None = None,
    ) -> None:
        self._channels = channels
        self._urls = urls
        self._notifier = notifier
        self._channel: PresentationChannel[PresentationUpdate] | None = None
        self._pending: asyncio.Task[None] | None = None
        self._dirty = False
        self.state: PresentationState | None = None
        self.session_id: str | None = None
        self.audience_url: str | None = None
        self.audience_count = 0
        self.on_audience_change: Callable[[int], None] | None = None

    @property
    def is_live(self) -> bool:
        return self._channel is not None

    async def start(self, note_id: str, note_title: str = "", **initial: object) -> str:
        """Open a session for a note and return its audience URL."""
        if self._channel is not None and self.audience_url is not None:
            return self.audience_url
        self.state = _merge(
            PresentationState(note_id=note_id, note_title=note_title), initial
        )
        session_id = generate_session_id(NOTES_PREFIX)
        channel = await self._channels.notes_channel(session_id)
        channel.on_presence(self._presence_changed)
        await channel.subscribe(_ignore)
        await channel.track("presenter")
        self._channel = channel
        self.session_id = session_id
        self.audience_url = self._urls.notes_audience_url(session_id)
        await self.flush()
        _logger.info("Notes presentation %s started for note %s", session_id, note_id)
        if self._notifier is not None:
            self._notifier.success("Presenter Mode Active")
        return self.audience_url

    def update(self, **changes: object) -> PresentationState:
        """Change the shared state; live sessions broadcast it on the next tick."""
        if self.state is None:
            raise RuntimeError("No note is being presented")
        self.state = _merge(self.state, changes)
        self._dirty = True
        if self._channel is not None and (
            self._pending is None or self._pending.done()
        ):
            self._pending = asyncio.get_running_loop().create_task(self._flush_soon())
        return self.state

    async def flush(self) -> None:
        """Broadcast the current state now."""
        if self._channel is None or self.state is None:
            return
        self._dirty = False
        await self._channel.send(InitUpdate(payload=self.state))

    async def drain(self) -> None:
        """Wait for a scheduled broadcast to go out."""
        if self._pending is not None:
            await self._pending

    async def stop(self) -> None:
        """End the session. Safe to call when not live."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self._dirty = False
        channel, self._channel = self._channel, None
        if channel is None:
            return
        await channel.unsubscribe()
        _logger.info("Notes presentation %s stopped", self.session_id)
        self.session_id = None
        self.audience_url = None
        self.audience_count = 0
        if self._notifier is not None:
            self._notifier.success("Presenter Mode Ended")

    async def _flush_soon(self) -> None:
        await asyncio.sleep(0)
        # Changes made while a send is in flight go out in the next pass.
        while self._dirty and self._channel is not None:
            await self.flush()

    def _presence_changed(self, count: int) -> None:
        self.audience_count = count
        if self.on_audience_change is not None:
            self.on_audience_change(count)


class SermonPresenter:
    """Drives the sermon audience view block by block or line by line."""

    def __init__(
        self,
        channels: ChannelFactory,
        urls: LiveUrlBuilder,
        display_settings: DisplaySettingsService | None = None,
    ) -> None:
        self._channels = channels
        self._urls = urls
        self._display_settings = display_settings
        self._channel: PresentationChannel[SermonMessage] | None = None
        self.urls: SermonSessionUrls | None = None
        self.audience_count = 0

    @property
    def is_live(self) -> bool:
        return self._channel is not None

    async def start(self) -> SermonSessionUrls:
        """Open a sermon session and push the stored display settings."""
        if self._channel is not None and self.urls is not None:
            return self.urls
        session_id = generate_session_id(SERMON_PREFIX)
        channel = await self._channels.sermon_channel(session_id)
        channel.on_presence(self._presence_changed)
        await channel.subscribe(_ignore)
        await channel.track("presenter")
        self._channel = channel
        self.urls = self._urls.sermon_urls(session_id)
        if self._display_settings is not None:
            await channel.send(SettingsMessage(settings=self._display_settings.load()))
        _logger.info("Sermon presentation %s started", session_id)
        return self.urls

    async def show_block(self, block_id: str, display_mode: str | None = None) -> None:
        await self._send(
            BlockMessage.model_validate(
                {"block_id": block_id, "display_mode": display_mode}
            )
        )

    async def show_line(self, block_id: str, line_index: int) -> None:
        await self._send(LineMessage(block_id=block_id, line_index=line_index))

    async def clear(self) -> None:
        await self._send(ClearMessage())

    async def push_settings(self, settings: PresentationSettings) -> None:
        """Persist settings locally and send them to the audience."""
        if self._display_settings is not None:
            self._display_settings.save(settings)
        await self._send(SettingsMessage(settings=settings))

    async def stop(self) -> None:
        channel, self._channel = self._channel, None
        if channel is None:
            return
        await channel.unsubscribe()
        self.urls = None
        self.audience_count = 0

    async def _send(self, message: SermonMessage) -> None:
        if self._channel is None:
            _logger.debug("Sermon presenter is not live; dropping %s", message.type)
            return
        await self._channel.send(message)

    def _presence_changed(self, count: int) -> None:
        self.audience_count = count


def _merge(state: PresentationState, changes: dict[str, object]) -> PresentationState:
    unknown = set(changes) - set(PresentationState.model_fields)
    if unknown:
        raise ValueError(f"Unknown presentation fields: {', '.join(sorted(unknown))}")
    return PresentationState.model_validate({**dict(state), **changes})


def _ignore(_message: object) -> None:
    return None
