"""Tests for the live presenter and audience controllers."""

import asyncio

import pytest

from sermon_studio.adapters.memory_realtime import InMemoryRealtimeHub, InMemoryTopicMember
from sermon_studio.domain.blocks import BibleBlock, PointBlock
from sermon_studio.domain.presentation import (
    BlockMessage,
    ClearMessage,
    ClearUpdate,
    EmphasisPayload,
    EmphasisRange,
    EmphasisUpdate,
    InitUpdate,
    LineMessage,
    PagePayload,
    PageUpdate,
    PresentationSettings,
    PresentationState,
    SermonDisplayState,
    SettingsMessage,
    SettingsPayload,
    SettingsUpdate,
    SpotlightPayload,
    SpotlightUpdate,
)
from sermon_studio.services.audience import (
    NotesAudience,
    SermonAudience,
    apply_sermon_message,
    apply_update,
)
from sermon_studio.services.channel import ChannelFactory
from sermon_studio.services.live_sessions import LiveUrlBuilder
from sermon_studio.services.notifications import ToastFeed
from sermon_studio.services.presenter import NotesPresenter, SermonPresenter

URLS = LiveUrlBuilder("https://sermons.example.org")


class SlowTopicMember(InMemoryTopicMember):
    """Topic member whose broadcasts take a while to go out."""

    async def send_broadcast(self, event: str, payload: dict[str, object]) -> None:
        await asyncio.sleep(0.01)
        await super().send_broadcast(event, payload)


class SlowRealtimeHub(InMemoryRealtimeHub):
    member_type = SlowTopicMember


def _snapshot() -> PresentationState:
    return PresentationState(
        note_id="n1",
        note_title="Sunday notes",
        spotlight_text="John 3:16",
        spotlight_open=True,
        current_page=1,
        total_pages=5,
    )


def test_init_then_page_changes_only_the_page() -> None:
    snapshot = _snapshot()

    state = apply_update(None, InitUpdate(payload=snapshot))
    state = apply_update(state, PageUpdate(payload=PagePayload(current_page=3)))

    assert state == snapshot.model_copy(update={"current_page": 3})


def test_deltas_before_init_are_ignored() -> None:
    state = apply_update(None, PageUpdate(payload=PagePayload(current_page=3)))

    assert state is None


def test_spotlight_emphasis_settings_and_clear() -> None:
    emphasis = (EmphasisRange(start=0, end=4, text="John", color_id="gold"),)
    state = apply_update(None, InitUpdate(payload=_snapshot()))

    state = apply_update(
        state, SpotlightUpdate(payload=SpotlightPayload(spotlight_text="Romans 8"))
    )
    assert state is not None
    assert state.spotlight_text == "Romans 8"
    assert state.spotlight_open is True

    state = apply_update(state, EmphasisUpdate(payload=EmphasisPayload(emphasis_list=emphasis)))
    assert state is not None
    assert state.emphasis_list == emphasis

    state = apply_update(
        state,
        SettingsUpdate(payload=SettingsPayload(settings=PresentationSettings(uppercase=True))),
    )
    assert state is not None
    assert state.settings.uppercase is True

    state = apply_update(state, ClearUpdate())
    assert state is not None
    assert state.spotlight_open is False
    assert state.spotlight_text == ""
    assert state.emphasis_list == ()
    assert state.total_pages == 5


def test_apply_sermon_messages() -> None:
    display = SermonDisplayState()

    display = apply_sermon_message(display, BlockMessage(block_id="b1", display_mode="title"))
    assert (display.current_block_id, display.current_line_index) == ("b1", None)
    assert display.display_mode == "title"

    display = apply_sermon_message(display, LineMessage(block_id="b1", line_index=2))
    assert display.current_line_index == 2

    display = apply_sermon_message(
        display, SettingsMessage(settings=PresentationSettings(bg_color="#000000"))
    )
    assert display.settings.bg_color == "#000000"

    display = apply_sermon_message(display, ClearMessage())
    assert display.current_block_id is None
    assert display.display_mode == "title"


def test_notes_presenter_and_audience_end_to_end(channels) -> None:
    changes: list[PresentationState | None] = []

    async def scenario() -> tuple[str, NotesPresenter, NotesAudience]:
        presenter = NotesPresenter(channels, URLS)
        audience_url = await presenter.start("n1", "Sunday notes", total_pages=4)
        session_id = audience_url.rsplit("/", 1)[-1]
        audience = NotesAudience(channels, on_change=changes.append)
        await audience.join(session_id)

        presenter.update(current_page=2)
        await presenter.drain()
        presenter.update(spotlight_text="Psalm 23", spotlight_open=True)
        await presenter.drain()
        return audience_url, presenter, audience

    audience_url, presenter, audience = asyncio.run(scenario())

    assert audience_url.startswith("https://sermons.example.org/notes/live/notes-")
    assert presenter.audience_count == 1
    assert audience.state is not None
    assert audience.state.current_page == 2
    assert audience.state.total_pages == 4
    assert audience.state.spotlight_text == "Psalm 23"
    assert len(changes) == 2


def test_updates_within_one_tick_are_coalesced(channels) -> None:
    received: list[object] = []

    async def scenario() -> None:
        presenter = NotesPresenter(channels, URLS)
        audience_url = await presenter.start("n1")
        listener = await channels.notes_channel(audience_url.rsplit("/", 1)[-1])
        await listener.subscribe(received.append)

        presenter.update(current_page=2)
        presenter.update(current_page=3)
        presenter.update(spotlight_open=True)
        await presenter.drain()

    asyncio.run(scenario())

    assert len(received) == 1
    message = received[0]
    assert isinstance(message, InitUpdate)
    assert message.payload.current_page == 3
    assert message.payload.spotlight_open is True


def test_audience_ignores_messages_after_leaving(channels) -> None:
    async def scenario() -> NotesAudience:
        presenter = NotesPresenter(channels, URLS)
        audience_url = await presenter.start("n1")
        audience = NotesAudience(channels)
        await audience.join(audience_url.rsplit("/", 1)[-1])
        presenter.update(current_page=2)
        await presenter.drain()
        await audience.leave()
        presenter.update(current_page=5)
        await presenter.drain()
        await presenter.stop()
        await presenter.stop()
        return audience

    audience = asyncio.run(scenario())

    assert audience.state is not None
    assert audience.state.current_page == 2
    assert not audience.connected


def test_presenter_update_rejects_unknown_fields(channels) -> None:
    async def scenario() -> None:
        presenter = NotesPresenter(channels, URLS)
        await presenter.start("n1")
        with pytest.raises(ValueError, match="volume"):
            presenter.update(volume=11)
        await presenter.stop()

    asyncio.run(scenario())


def test_update_without_presentation_raises(channels) -> None:
    presenter = NotesPresenter(channels, URLS)

    with pytest.raises(RuntimeError):
        presenter.update(current_page=2)


def test_sermon_presenter_drives_audience(channels, display_settings) -> None:
    blocks = [
        PointBlock(id="p1", order=0, title="Grace", body="Saved by grace\n\nThrough faith"),
        BibleBlock(id="b1", order=1, reference="Ephesians 2:8", text="For by grace"),
    ]
    custom = PresentationSettings(text_color="black", size_scale=1.5)

    async def scenario() -> tuple[SermonPresenter, SermonAudience, list[str], list[str]]:
        presenter = SermonPresenter(channels, URLS)
        urls = await presenter.start()
        audience = SermonAudience(channels, display_settings=display_settings, blocks=blocks)
        await audience.join(urls.session_id)

        await presenter.show_block("p1")
        whole_block = audience.current_lines()
        await presenter.show_line("p1", 1)
        single_line = audience.current_lines()
        await presenter.push_settings(custom)
        return presenter, audience, whole_block, single_line

    presenter, audience, whole_block, single_line = asyncio.run(scenario())

    assert presenter.urls is not None
    assert presenter.urls.presenter_url.endswith(f"/presenter/{presenter.urls.session_id}")
    assert presenter.audience_count == 1
    assert whole_block == ["Grace", "Saved by grace", "Through faith"]
    assert single_line == ["Saved by grace"]
    assert audience.display.settings == custom
    assert display_settings.load() == custom


def test_sermon_presenter_sends_nothing_when_not_live(channels) -> None:
    presenter = SermonPresenter(channels, URLS)

    asyncio.run(presenter.show_block("p1"))
    asyncio.run(presenter.stop())

    assert not presenter.is_live


def test_change_during_slow_send_is_broadcast_afterwards() -> None:
    received: list[object] = []
    channels = ChannelFactory(SlowRealtimeHub())

    async def scenario() -> None:
        presenter = NotesPresenter(channels, URLS)
        audience_url = await presenter.start("n1")
        listener = await channels.notes_channel(audience_url.rsplit("/", 1)[-1])
        await listener.subscribe(received.append)

        presenter.update(current_page=2)
        await asyncio.sleep(0.001)
        presenter.update(current_page=3)
        await presenter.drain()

    asyncio.run(scenario())

    assert received
    assert all(isinstance(message, InitUpdate) for message in received)
    assert received[-1].payload.current_page == 3


def test_presenter_announces_start_and_end(channels) -> None:
    toasts = ToastFeed()

    async def scenario() -> None:
        presenter = NotesPresenter(channels, URLS, notifier=toasts)
        await presenter.start("n1")
        await presenter.stop()
        await presenter.stop()

    asyncio.run(scenario())

    assert [toast.message for toast in toasts.drain()] == [
        "Presenter Mode Active",
        "Presenter Mode Ended",
    ]
