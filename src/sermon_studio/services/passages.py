"""Scripture passage lookups through the ESV API."""

import logging
from dataclasses import dataclass

import httpx

from sermon_studio.adapters.esv_client import EsvClient
from sermon_studio.domain.passages import Passage, PassageQuery
from sermon_studio.services.cache import Cache

_logger = logging.getLogger(__name__)

UPSTREAM_ERROR = "Failed to fetch passage from ESV API"


class PassageFetchError(Exception):
    """A passage lookup failed with an HTTP status to report."""

    def __init__(self, status_code: int, error: str, details: str | None = None) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details

    def as_body(self) -> dict[str, object]:
        body: dict[str, object] = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


@dataclass
class PassageService:
    """Fetches passages, mapping every failure to a ``PassageFetchError``."""

    esv_client: EsvClient | None
    cache: Cache
    ttl_seconds: int = 3600

    async def fetch(self, query: PassageQuery) -> Passage:
        if not query.passage or not query.passage.strip():
            raise PassageFetchError(400, "Passage reference is required")
        if self.esv_client is None:
            _logger.error("ESV API key is not configured")
            raise PassageFetchError(500, "ESV API key is not configured")

        cache_key = (
            f"esv:{query.passage.strip().lower()}:"
            f"{int(query.include_verse_numbers)}:{int(query.include_headings)}"
        )
        cached = self.cache.get(cache_key)
        if isinstance(cached, Passage):
            return cached

        _logger.info("Fetching ESV passage: %s", query.passage)
        try:
            data = await self.esv_client.get_passage_text(query)
        except httpx.HTTPStatusError as exc:
            details = exc.response.text
            _logger.error(
                "ESV API error: %s %s", exc.response.status_code, details
            )
            raise PassageFetchError(
                exc.response.status_code, UPSTREAM_ERROR, details
            ) from exc
        except Exception as exc:
            _logger.exception("Error fetching ESV passage %s", query.passage)
            raise PassageFetchError(500, str(exc) or "Unknown error") from exc

        passage = Passage(
            query=str(data.get("query", query.passage)),
            canonical=str(data.get("canonical", "")),
            passages=list(data.get("passages") or []),
            passage_meta=list(data.get("passage_meta") or []),
        )
        self.cache.set(cache_key, passage, ttl_seconds=self.ttl_seconds)
        return passage
