"""Helpers shared by the Supabase row parsers."""

from datetime import UTC, datetime
from uuid import UUID


def parse_timestamp(raw: object) -> datetime:
    """Parse a Postgres timestamp column, defaulting to now when missing."""
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    return datetime.now(tz=UTC)


def parse_uuid(raw: object) -> UUID:
    return raw if isinstance(raw, UUID) else UUID(str(raw))


def touched_now() -> str:
    return datetime.now(tz=UTC).isoformat()
