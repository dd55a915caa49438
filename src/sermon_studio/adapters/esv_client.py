"""Crossway ESV API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from sermon_studio.domain.passages import PassageQuery


class EsvClient(Protocol):
    """Interface for ESV API interactions."""

    async def get_passage_text(self, query: PassageQuery) -> dict[str, object]:
        """Fetch plain-text passages and return the raw API data."""


@dataclass
class HttpxEsvClient(EsvClient):
    """HTTPX-backed ESV client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxEsvClient":
        """Create an ESV client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def get_passage_text(self, query: PassageQuery) -> dict[str, object]:
        """Fetch a passage from the text endpoint.

        Raises ``httpx.HTTPStatusError`` for non-2xx responses so callers can
        relay the upstream status and body.
        """
        url = f"{self.base_url.rstrip('/')}/passage/text/"
        response = await self.http_client.get(
            url,
            params={
                "q": query.passage,
                "include-passage-references": "true",
                "include-verse-numbers": _flag(query.include_verse_numbers),
                "include-first-verse-numbers": "true",
                "include-footnotes": "false",
                "include-headings": _flag(query.include_headings),
                "include-short-copyright": "false",
            },
            headers={"Authorization": f"Token {self.api_key}"},
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _flag(value: bool) -> str:
    return "true" if value else "false"
