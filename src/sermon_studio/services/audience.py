"""Audience side of live presentations."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import assert_never

from sermon_studio.domain.blocks import SermonBlock
from sermon_studio.domain.presentation import (
    BlockMessage,
    ClearMessage,
    ClearUpdate,
    EmphasisUpdate,
    InitUpdate,
    LineMessage,
    PageUpdate,
    PresentationState,
    PresentationUpdate,
    SermonDisplayState,
    SermonMessage,
    SettingsMessage,
    SettingsUpdate,
    SpotlightUpdate,
)
from sermon_studio.services.channel import (
    ChannelFactory,
    PresentationChannel,
    Subscription,
)
from sermon_studio.services.display_settings import DisplaySettingsService
from sermon_studio.services.slides import sermon_lines

_logger = logging.getLogger(__name__)


def apply_update(
    state: PresentationState | None, update: PresentationUpdate
) -> PresentationState | None:
    """Return the audience state after one message.

    ``init`` replaces the state wholesale. Every other kind patches the
    current state and is ignored until a first ``init`` has arrived.
    """
    if isinstance(update, InitUpdate):
        return update.payload
    if state is None:
        return None
    match update:
        case SpotlightUpdate(payload=payload):
            changes = payload.model_dump(exclude_none=True)
        case EmphasisUpdate(payload=payload):
            changes = {"emphasis_list": payload.emphasis_list}
        case PageUpdate(payload=payload):
            changes = payload.model_dump(exclude_none=True)
        case SettingsUpdate(payload=payload):
            changes = {
                name: value
                for name, value in (
                    ("spotlight_settings", payload.spotlight_settings),
                    ("settings", payload.settings),
                )
                if value is not None
            }
        case ClearUpdate():
            changes = {"spotlight_open": False, "spotlight_text": "", "emphasis_list": ()}
        case _:
            assert_never(update)
    return state.model_copy(update=changes)


def apply_sermon_message(
    display: SermonDisplayState, message: SermonMessage
) -> SermonDisplayState:
    """Return the sermon display after one message."""
    match message:
        case BlockMessage():
            changes: dict[str, object] = {
                "current_block_id": message.block_id,
                "current_line_index": None,
            }
            if message.display_mode is not None:
                changes["display_mode"] = message.display_mode
        case LineMessage():
            changes = {
                "current_block_id": message.block_id,
                "current_line_index": message.line_index,
            }
        case ClearMessage():
            changes = {"current_block_id": None, "current_line_index": None}
        case SettingsMessage():
            changes = {"settings": message.settings}
        case _:
            assert_never(message)
    return display.model_copy(update=changes)


@dataclass
class NotesAudience:
    """Follows a notes presentation and keeps the latest received state."""

    channels: ChannelFactory
    on_change: Callable[[PresentationState | None], None] | None = None
    state: PresentationState | None = field(default=None, init=False)
    connected: bool = field(default=False, init=False)
    _channel: PresentationChannel[PresentationUpdate] | None = field(
        default=None, init=False
    )
    _subscription: Subscription | None = field(default=None, init=False)

    async def join(self, session_id: str) -> None:
        """Subscribe to a session and announce this viewer in presence."""
        channel = await self.channels.notes_channel(session_id)
        self._channel = channel
        self.connected = True
        self._subscription = await channel.subscribe(self._receive)
        await channel.track("audience")
        _logger.info("Audience connected to notes presentation %s", session_id)

    async def leave(self) -> None:
        """Stop following; later messages are ignored."""
        self.connected = False
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        if self._channel is not None:
            await self._channel.unsubscribe()
            self._channel = None

    def _receive(self, update: PresentationUpdate) -> None:
        if not self.connected:
            return
        self.state = apply_update(self.state, update)
        if self.on_change is not None:
            self.on_change(self.state)


@dataclass
class SermonAudience:
    """Follows a sermon presentation and resolves the lines on screen."""

    channels: ChannelFactory
    display_settings: DisplaySettingsService | None = None
    blocks: list[SermonBlock] = field(default_factory=list)
    display: SermonDisplayState = field(init=False)
    connected: bool = field(default=False, init=False)
    _channel: PresentationChannel[SermonMessage] | None = field(
        default=None, init=False
    )

    def __post_init__(self) -> None:
        settings = (
            self.display_settings.load() if self.display_settings is not None else None
        )
        self.display = (
            SermonDisplayState(settings=settings)
            if settings is not None
            else SermonDisplayState()
        )

    async def join(self, session_id: str) -> None:
        """Subscribe to a sermon session."""
        channel = await self.channels.sermon_channel(session_id)
        self._channel = channel
        self.connected = True
        await channel.subscribe(self._receive)
        await channel.track("audience")

    async def leave(self) -> None:
        self.connected = False
        if self._channel is not None:
            await self._channel.unsubscribe()
            self._channel = None

    def current_lines(self) -> list[str]:
        """Return the text currently on screen."""
        block_id = self.display.current_block_id
        if block_id is None:
            return []
        lines = sermon_lines(self.blocks).get(block_id, [])
        index = self.display.current_line_index
        if index is None:
            return lines
        if 0 <= index < len(lines):
            return [lines[index]]
        return []

    def _receive(self, message: SermonMessage) -> None:
        if not self.connected:
            return
        self.display = apply_sermon_message(self.display, message)
        if isinstance(message, SettingsMessage) and self.display_settings is not None:
            self.display_settings.save(message.settings)
