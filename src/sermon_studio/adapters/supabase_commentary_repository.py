"""Supabase repository for uploaded commentaries."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from sermon_studio.adapters.supabase_rows import parse_timestamp, parse_uuid, touched_now
from sermon_studio.domain.records import Commentary
from sermon_studio.services.commentaries import CommentaryRepository

_TABLE = "commentaries"


@dataclass
class SupabaseCommentaryRepository(CommentaryRepository):
    """Supabase-backed repository for commentaries."""

    client: Client

    def list_records(self, user_id: UUID, scope: dict[str, object]) -> list[Commentary]:
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_commentary(row) for row in response.data or []]

    def create_record(self, user_id: UUID, payload: dict[str, object]) -> Commentary:
        response = (
            self.client.table(_TABLE)
            .insert({"user_id": str(user_id), **payload})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create commentary")
        return _parse_commentary(response.data[0])

    def update_record(
        self, user_id: UUID, record_id: UUID, patch: dict[str, object]
    ) -> None:
        response = (
            self.client.table(_TABLE)
            .update({**patch, "updated_at": touched_now()})
            .eq("id", str(record_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update commentary")

    def delete_record(self, user_id: UUID, record_id: UUID) -> None:
        self.client.table(_TABLE).delete().eq("id", str(record_id)).eq(
            "user_id", str(user_id)
        ).execute()


def _parse_commentary(row: dict[str, object]) -> Commentary:
    return Commentary(
        id=parse_uuid(row["id"]),
        user_id=parse_uuid(row["user_id"]),
        title=str(row.get("title") or ""),
        pdf_url=str(row.get("pdf_url") or ""),
        author=row.get("author"),  # type: ignore[arg-type]
        cover_image_url=row.get("cover_image_url"),  # type: ignore[arg-type]
        extracted_text=row.get("extracted_text"),  # type: ignore[arg-type]
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
