"""Supabase repositories for Bible highlights and Bible notes."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from sermon_studio.adapters.supabase_rows import parse_timestamp, parse_uuid, touched_now
from sermon_studio.domain.records import BibleHighlight, BibleNote
from sermon_studio.services.bible import BibleHighlightRepository, BibleNoteRepository


@dataclass
class SupabaseBibleHighlightRepository(BibleHighlightRepository):
    """Highlights are scoped to one book and chapter when listed."""

    client: Client
    table: str = "bible_highlights"

    def list_records(
        self, user_id: UUID, scope: dict[str, object]
    ) -> list[BibleHighlight]:
        query = self.client.table(self.table).select("*").eq("user_id", str(user_id))
        for column in ("book", "chapter"):
            if column in scope:
                query = query.eq(column, scope[column])
        response = query.order("start_offset").execute()
        return [_parse_highlight(row) for row in response.data or []]

    def create_record(
        self, user_id: UUID, payload: dict[str, object]
    ) -> BibleHighlight:
        response = (
            self.client.table(self.table)
            .insert({"user_id": str(user_id), **payload})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create highlight")
        return _parse_highlight(response.data[0])

    def update_record(
        self, user_id: UUID, record_id: UUID, patch: dict[str, object]
    ) -> None:
        response = (
            self.client.table(self.table)
            .update({**patch, "updated_at": touched_now()})
            .eq("id", str(record_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update highlight")

    def delete_record(self, user_id: UUID, record_id: UUID) -> None:
        self.client.table(self.table).delete().eq("id", str(record_id)).eq(
            "user_id", str(user_id)
        ).execute()


@dataclass
class SupabaseBibleNoteRepository(BibleNoteRepository):
    """Margin notes anchored at a character offset in a chapter."""

    client: Client
    table: str = "bible_notes"

    def list_records(self, user_id: UUID, scope: dict[str, object]) -> list[BibleNote]:
        query = self.client.table(self.table).select("*").eq("user_id", str(user_id))
        for column in ("book", "chapter"):
            if column in scope:
                query = query.eq(column, scope[column])
        response = query.order("position_offset").execute()
        return [_parse_bible_note(row) for row in response.data or []]

    def create_record(self, user_id: UUID, payload: dict[str, object]) -> BibleNote:
        response = (
            self.client.table(self.table)
            .insert({"user_id": str(user_id), **payload})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create Bible note")
        return _parse_bible_note(response.data[0])

    def update_record(
        self, user_id: UUID, record_id: UUID, patch: dict[str, object]
    ) -> None:
        response = (
            self.client.table(self.table)
            .update({**patch, "updated_at": touched_now()})
            .eq("id", str(record_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update Bible note")

    def delete_record(self, user_id: UUID, record_id: UUID) -> None:
        self.client.table(self.table).delete().eq("id", str(record_id)).eq(
            "user_id", str(user_id)
        ).execute()


def _parse_highlight(row: dict[str, object]) -> BibleHighlight:
    return BibleHighlight(
        id=parse_uuid(row["id"]),
        user_id=parse_uuid(row["user_id"]),
        book=str(row.get("book", "")),
        chapter=int(row.get("chapter", 0)),  # type: ignore[arg-type]
        text=str(row.get("text", "")),
        start_offset=int(row.get("start_offset", 0)),  # type: ignore[arg-type]
        end_offset=int(row.get("end_offset", 0)),  # type: ignore[arg-type]
        color=str(row.get("color", "")),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )


def _parse_bible_note(row: dict[str, object]) -> BibleNote:
    return BibleNote(
        id=parse_uuid(row["id"]),
        user_id=parse_uuid(row["user_id"]),
        book=str(row.get("book", "")),
        chapter=int(row.get("chapter", 0)),  # type: ignore[arg-type]
        position_offset=int(row.get("position_offset", 0)),  # type: ignore[arg-type]
        content=str(row.get("content", "")),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
