"""Tests for container wiring."""

import asyncio

import pytest

from sermon_studio.adapters.memory_realtime import InMemoryRealtimeHub
from sermon_studio.adapters.supabase_auth import SupabaseAuthProvider
from sermon_studio.adapters.supabase_realtime import SupabaseRealtimeTransport
from sermon_studio.containers import build_container
from sermon_studio.services.auth import StaticPrincipal
from tests.conftest import OWNER_ID


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.workspace.notes is not None
    assert isinstance(container.channels.transport, InMemoryRealtimeHub)
    assert container.passage_service.esv_client is not None
    principal = container.workspace.notes.store.principal
    assert isinstance(principal, StaticPrincipal)
    assert principal.user_id == OWNER_ID
    assert container.live_urls.notes_audience_url("abc") == (
        "https://sermons.example.org/notes/live/abc"
    )
    asyncio.run(container.close_resources())


def test_build_container_without_owner_uses_supabase_auth(settings) -> None:
    settings = settings.model_copy(
        update={"owner_user_id": None, "esv_api_key": None}
    )
    container = build_container(settings)

    assert isinstance(container.workspace.notes.store.principal, SupabaseAuthProvider)
    assert container.passage_service.esv_client is None
    asyncio.run(container.close_resources())


def test_build_container_supabase_realtime(settings) -> None:
    settings = settings.model_copy(update={"realtime_backend": "supabase"})
    container = build_container(settings)

    assert isinstance(container.channels.transport, SupabaseRealtimeTransport)
    asyncio.run(container.close_resources())


def test_build_container_rejects_unknown_backend(settings) -> None:
    settings = settings.model_copy(update={"realtime_backend": "carrier-pigeon"})

    with pytest.raises(ValueError, match="carrier-pigeon"):
        build_container(settings)
