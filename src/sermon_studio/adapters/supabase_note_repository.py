"""Supabase repository for notes."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from sermon_studio.adapters.supabase_rows import parse_timestamp, parse_uuid, touched_now
from sermon_studio.domain.records import Note
from sermon_studio.services.notes import NoteRepository

_TABLE = "notes"


@dataclass
class SupabaseNoteRepository(NoteRepository):
    """Supabase-backed repository for a user's notes."""

    client: Client

    def list_records(self, user_id: UUID, scope: dict[str, object]) -> list[Note]:
        """Return the user's notes, most recently edited first."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .order("updated_at", desc=True)
            .execute()
        )
        return [_parse_note(row) for row in response.data or []]

    def create_record(self, user_id: UUID, payload: dict[str, object]) -> Note:
        response = (
            self.client.table(_TABLE)
            .insert({"user_id": str(user_id), **_serialize(payload)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create note")
        return _parse_note(response.data[0])

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
            raise RuntimeError("Failed to update note")

    def delete_record(self, user_id: UUID, record_id: UUID) -> None:
        self.client.table(_TABLE).delete().eq("id", str(record_id)).eq(
            "user_id", str(user_id)
        ).execute()


def _serialize(payload: dict[str, object]) -> dict[str, object]:
    row = dict(payload)
    if "tags" in row:
        row["tags"] = list(row["tags"] or [])  # type: ignore[call-overload]
    return row


def _parse_note(row: dict[str, object]) -> Note:
    return Note(
        id=parse_uuid(row["id"]),
        user_id=parse_uuid(row["user_id"]),
        title=str(row.get("title") or ""),
        content=str(row.get("content") or ""),
        tags=tuple(row.get("tags") or ()),  # type: ignore[arg-type]
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
