"""Tests for the passage lookup service."""

import asyncio

import httpx
import pytest

from sermon_studio.domain.passages import PassageQuery
from sermon_studio.services.cache import InMemoryCache
from sermon_studio.services.passages import PassageFetchError, PassageService
from tests.conftest import FakeEsvClient


def test_fetch_maps_payload_and_caches(esv_client: FakeEsvClient) -> None:
    service = PassageService(esv_client=esv_client, cache=InMemoryCache())

    first = asyncio.run(service.fetch(PassageQuery(passage="John 3:16")))
    second = asyncio.run(service.fetch(PassageQuery(passage="john 3:16 ")))

    assert first.as_dict() == {
        "query": "John 3:16",
        "canonical": "John 3:16",
        "passages": ["John 3:16\n\n  [16] For God so loved the world..."],
        "passage_meta": [{"canonical": "John 3:16", "chapter_start": [43003001]}],
    }
    assert second is first
    assert len(esv_client.queries) == 1


def test_formatting_flags_are_part_of_the_cache_key(esv_client: FakeEsvClient) -> None:
    service = PassageService(esv_client=esv_client, cache=InMemoryCache())

    asyncio.run(service.fetch(PassageQuery(passage="John 3:16")))
    asyncio.run(service.fetch(PassageQuery(passage="John 3:16", include_headings=True)))

    assert [query.include_headings for query in esv_client.queries] == [False, True]


def test_missing_passage_is_rejected(esv_client: FakeEsvClient) -> None:
    service = PassageService(esv_client=esv_client, cache=InMemoryCache())

    with pytest.raises(PassageFetchError) as excinfo:
        asyncio.run(service.fetch(PassageQuery(passage="  ")))

    assert excinfo.value.status_code == 400
    assert excinfo.value.as_body() == {"error": "Passage reference is required"}
    assert esv_client.queries == []


def test_missing_api_key_is_a_server_error() -> None:
    service = PassageService(esv_client=None, cache=InMemoryCache())

    with pytest.raises(PassageFetchError) as excinfo:
        asyncio.run(service.fetch(PassageQuery(passage="John 1")))

    assert excinfo.value.status_code == 500
    assert excinfo.value.error == "ESV API key is not configured"


def test_upstream_status_is_mirrored() -> None:
    request = httpx.Request("GET", "https://api.esv.org/v3/passage/text/")
    response = httpx.Response(429, text="Slow down", request=request)
    client = FakeEsvClient(
        error=httpx.HTTPStatusError("rate limited", request=request, response=response)
    )
    service = PassageService(esv_client=client, cache=InMemoryCache())

    with pytest.raises(PassageFetchError) as excinfo:
        asyncio.run(service.fetch(PassageQuery(passage="John 1")))

    assert excinfo.value.status_code == 429
    assert excinfo.value.as_body() == {
        "error": "Failed to fetch passage from ESV API",
        "details": "Slow down",
    }


def test_other_failures_become_500_with_message() -> None:
    client = FakeEsvClient(error=httpx.ConnectError("connection refused"))
    service = PassageService(esv_client=client, cache=InMemoryCache())

    with pytest.raises(PassageFetchError) as excinfo:
        asyncio.run(service.fetch(PassageQuery(passage="John 1")))

    assert excinfo.value.status_code == 500
    assert excinfo.value.as_body() == {"error": "connection refused"}
