"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from uuid import UUID

from supabase import create_client

from sermon_studio.adapters.esv_client import HttpxEsvClient
from sermon_studio.adapters.json_file_store import JsonFileKeyValueStore
from sermon_studio.adapters.memory_realtime import InMemoryRealtimeHub
from sermon_studio.adapters.supabase_auth import SupabaseAuthProvider
from sermon_studio.adapters.supabase_bible_repository import (
    SupabaseBibleHighlightRepository,
    SupabaseBibleNoteRepository,
)
from sermon_studio.adapters.supabase_commentary_repository import (
    SupabaseCommentaryRepository,
)
from sermon_studio.adapters.supabase_note_repository import SupabaseNoteRepository
from sermon_studio.adapters.supabase_realtime import SupabaseRealtimeTransport
from sermon_studio.adapters.supabase_sermon_repository import SupabaseSermonRepository
from sermon_studio.config import Settings
from sermon_studio.services.auth import PrincipalProvider, StaticPrincipal
from sermon_studio.services.bible import BibleStore
from sermon_studio.services.cache import InMemoryCache
from sermon_studio.services.channel import ChannelFactory, RealtimeTransport
from sermon_studio.services.commentaries import CommentaryStore
from sermon_studio.services.display_settings import DisplaySettingsService
from sermon_studio.services.live_sessions import LiveUrlBuilder
from sermon_studio.services.notes import NotesStore
from sermon_studio.services.notifications import ToastFeed
from sermon_studio.services.passages import PassageService
from sermon_studio.services.sermons import SermonStore
from sermon_studio.services.workspace import Workspace


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    workspace: Workspace
    channels: ChannelFactory
    live_urls: LiveUrlBuilder
    display_settings: DisplaySettingsService
    passage_service: PassageService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_key
    )
    principal: PrincipalProvider = (
        StaticPrincipal(UUID(resolved_settings.owner_user_id))
        if resolved_settings.owner_user_id
        else SupabaseAuthProvider(supabase_client)
    )
    toasts = ToastFeed()
    workspace = Workspace(
        notes=NotesStore.create(
            SupabaseNoteRepository(supabase_client), principal, toasts
        ),
        bible=BibleStore.create(
            SupabaseBibleHighlightRepository(supabase_client),
            SupabaseBibleNoteRepository(supabase_client),
            principal,
            toasts,
        ),
        commentaries=CommentaryStore.create(
            SupabaseCommentaryRepository(supabase_client), principal, toasts
        ),
        sermons=SermonStore.create(
            SupabaseSermonRepository(supabase_client), principal, toasts
        ),
        toasts=toasts,
    )
    transport = _build_transport(resolved_settings)
    esv_client = (
        HttpxEsvClient.create(
            api_key=resolved_settings.esv_api_key,
            base_url=resolved_settings.esv_base_url,
        )
        if resolved_settings.esv_api_key
        else None
    )
    passage_service = PassageService(
        esv_client=esv_client,
        cache=InMemoryCache(),
        ttl_seconds=resolved_settings.passage_cache_ttl_seconds,
    )
    display_settings = DisplaySettingsService(
        JsonFileKeyValueStore(Path(resolved_settings.settings_file))
    )

    async def close_resources() -> None:
        workspace.dispose()
        await transport.close()
        if esv_client is not None:
            await esv_client.close()

    return AppContainer(
        settings=resolved_settings,
        workspace=workspace,
        channels=ChannelFactory(transport),
        live_urls=LiveUrlBuilder(resolved_settings.public_base_url),
        display_settings=display_settings,
        passage_service=passage_service,
        close_resources=close_resources,
    )


def _build_transport(settings: Settings) -> RealtimeTransport:
    if settings.realtime_backend == "supabase":
        return SupabaseRealtimeTransport(
            supabase_url=settings.supabase_url,
            supabase_key=settings.supabase_key,
        )
    if settings.realtime_backend != "memory":
        raise ValueError(f"Unknown realtime backend: {settings.realtime_backend}")
    return InMemoryRealtimeHub()
