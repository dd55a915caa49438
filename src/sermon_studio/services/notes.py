"""Notes store."""

from dataclasses import dataclass
from uuid import UUID

from sermon_studio.domain.records import Note
from sermon_studio.services.auth import PrincipalProvider
from sermon_studio.services.notifications import Notifier
from sermon_studio.services.store import RecordRepository, RecordStore

NoteRepository = RecordRepository[Note]


@dataclass
class NotesStore:
    """Cache of the user's notes, most recently edited first."""

    store: RecordStore[Note]

    @classmethod
    def create(
        cls,
        repository: NoteRepository,
        principal: PrincipalProvider,
        notifier: Notifier,
    ) -> "NotesStore":
        """Build a notes store with the notes domain rules."""
        return cls(
            store=RecordStore(
                repository=repository,
                principal=principal,
                notifier=notifier,
                record_type=Note,
                label="note",
                plural_label="notes",
                sort_key=lambda note: note.updated_at,
                sort_descending=True,
                required_fields=("title",),
                select_created=True,
            )
        )

    @property
    def notes(self) -> list[Note]:
        return self.store.records

    @property
    def current_note(self) -> Note | None:
        return self.store.selected

    async def load_notes(self) -> list[Note]:
        """Load all notes owned by the signed-in user."""
        return await self.store.load()

    async def create_note(
        self,
        title: str = "Untitled Note",
        content: str = "",
        tags: tuple[str, ...] = (),
    ) -> Note | None:
        """Create a note and make it the current note."""
        return await self.store.create(
            {"title": title, "content": content, "tags": tuple(tags)}
        )

    async def update_note(self, note_id: UUID, updates: dict[str, object]) -> None:
        """Persist and apply a partial note update."""
        patch = dict(updates)
        if "tags" in patch:
            patch["tags"] = tuple(patch["tags"])  # type: ignore[arg-type]
        await self.store.update(note_id, patch)

    async def delete_note(self, note_id: UUID) -> None:
        """Delete a note, clearing it as current note if selected."""
        await self.store.delete(note_id)

    def set_current_note(self, note: Note | None) -> None:
        self.store.select(note)
