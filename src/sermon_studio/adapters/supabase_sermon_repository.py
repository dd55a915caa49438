"""Supabase repository for sermons; blocks are stored as a JSON column."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from sermon_studio.adapters.supabase_rows import parse_timestamp, parse_uuid, touched_now
from sermon_studio.domain.blocks import BLOCK_LIST_ADAPTER, PAGE_LIST_ADAPTER
from sermon_studio.domain.records import Sermon
from sermon_studio.services.sermons import SermonRepository

_TABLE = "sermons"


@dataclass
class SupabaseSermonRepository(SermonRepository):
    """Supabase-backed repository for sermons."""

    client: Client

    def list_records(self, user_id: UUID, scope: dict[str, object]) -> list[Sermon]:
        query = self.client.table(_TABLE).select("*").eq("user_id", str(user_id))
        if "id" in scope:
            query = query.eq("id", str(scope["id"]))
        response = query.order("updated_at", desc=True).execute()
        return [_parse_sermon(row) for row in response.data or []]

    def create_record(self, user_id: UUID, payload: dict[str, object]) -> Sermon:
        response = (
            self.client.table(_TABLE)
            .insert({"user_id": str(user_id), **_serialize(payload)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create sermon")
        return _parse_sermon(response.data[0])

    def update_record(
        self, user_id: UUID, record_id: UUID, patch: dict[str, object]
    ) -> None:
        response = (
            self.client.table(_TABLE)
            .update({**_serialize(patch), "updated_at": touched_now()})
            .eq("id", str(record_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update sermon")

    def delete_record(self, user_id: UUID, record_id: UUID) -> None:
        self.client.table(_TABLE).delete().eq("id", str(record_id)).eq(
            "user_id", str(user_id)
        ).execute()


def _serialize(payload: dict[str, object]) -> dict[str, object]:
    row = dict(payload)
    if "blocks" in row:
        row["blocks"] = BLOCK_LIST_ADAPTER.dump_python(
            list(row["blocks"] or []), mode="json", by_alias=True  # type: ignore[call-overload]
        )
    if "pages" in row:
        row["pages"] = PAGE_LIST_ADAPTER.dump_python(
            list(row["pages"] or []), mode="json"  # type: ignore[call-overload]
        )
    return row


def _parse_sermon(row: dict[str, object]) -> Sermon:
    return Sermon(
        id=parse_uuid(row["id"]),
        user_id=parse_uuid(row["user_id"]),
        title=str(row.get("title") or ""),
        subtitle=str(row.get("subtitle") or ""),
        blocks=tuple(BLOCK_LIST_ADAPTER.validate_python(row.get("blocks") or [])),
        pages=tuple(PAGE_LIST_ADAPTER.validate_python(row.get("pages") or [])),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
