"""Bible reader store for per-chapter highlights and notes."""

import asyncio
import logging
from dataclasses import dataclass
from uuid import UUID

from sermon_studio.domain.records import BibleHighlight, BibleNote
from sermon_studio.services.auth import PrincipalProvider
from sermon_studio.services.notifications import Notifier
from sermon_studio.services.store import RecordRepository, RecordStore

_logger = logging.getLogger(__name__)

BibleHighlightRepository = RecordRepository[BibleHighlight]
BibleNoteRepository = RecordRepository[BibleNote]


@dataclass
class BibleStore:
    """Highlights and notes for the chapter currently open in the reader."""

    highlight_store: RecordStore[BibleHighlight]
    note_store: RecordStore[BibleNote]
    notifier: Notifier

    @classmethod
    def create(
        cls,
        highlight_repository: BibleHighlightRepository,
        note_repository: BibleNoteRepository,
        principal: PrincipalProvider,
        notifier: Notifier,
    ) -> "BibleStore":
        """Build a Bible store with the reader's ordering rules."""
        return cls(
            highlight_store=RecordStore(
                repository=highlight_repository,
                principal=principal,
                notifier=notifier,
                record_type=BibleHighlight,
                label="highlight",
                plural_label="highlights",
                sort_key=lambda highlight: highlight.start_offset,
                required_fields=("text",),
                delete_verb="remove",
            ),
            note_store=RecordStore(
                repository=note_repository,
                principal=principal,
                notifier=notifier,
                record_type=BibleNote,
                label="note",
                plural_label="notes",
                sort_key=lambda note: note.position_offset,
                required_fields=("content",),
                announce_success=True,
            ),
            notifier=notifier,
        )

    @property
    def highlights(self) -> list[BibleHighlight]:
        return self.highlight_store.records

    @property
    def notes(self) -> list[BibleNote]:
        return self.note_store.records

    @property
    def is_loading(self) -> bool:
        return self.highlight_store.is_loading or self.note_store.is_loading

    async def load_highlights_and_notes(self, book: str, chapter: int) -> None:
        """Fetch a chapter's highlights and notes together, then apply both."""
        user_id = await self.highlight_store.resolve_user()
        if user_id is None:
            self.highlight_store.replace_all([])
            self.note_store.replace_all([])
            return
        scope: dict[str, object] = {"book": book, "chapter": chapter}
        self.highlight_store.is_loading = True
        try:
            highlights, notes = await asyncio.gather(
                self.highlight_store.fetch(user_id, scope),
                self.note_store.fetch(user_id, scope),
            )
        except Exception:
            _logger.exception(
                "Failed to load Bible highlights and notes for %s %s", book, chapter
            )
            self.notifier.error("Failed to load highlights and notes")
            return
        finally:
            self.highlight_store.is_loading = False
        self.highlight_store.replace_all(highlights)
        self.note_store.replace_all(notes)

    async def add_highlight(  # noqa: PLR0913
        self,
        book: str,
        chapter: int,
        text: str,
        start_offset: int,
        end_offset: int,
        color: str,
    ) -> BibleHighlight | None:
        """Highlight a span of the chapter text."""
        return await self.highlight_store.create(
            {
                "book": book,
                "chapter": chapter,
                "text": text,
                "start_offset": start_offset,
                "end_offset": end_offset,
                "color": color,
            }
        )

    async def update_highlight(self, highlight_id: UUID, color: str) -> None:
        """Change a highlight's color."""
        await self.highlight_store.update(highlight_id, {"color": color})

    async def remove_highlight(self, highlight_id: UUID) -> None:
        await self.highlight_store.delete(highlight_id)

    async def add_note(
        self, book: str, chapter: int, content: str, offset: int
    ) -> BibleNote | None:
        """Anchor a note at an offset in the chapter."""
        return await self.note_store.create(
            {
                "book": book,
                "chapter": chapter,
                "content": content,
                "position_offset": offset,
            }
        )

    async def update_note(self, note_id: UUID, content: str) -> None:
        await self.note_store.update(note_id, {"content": content})

    async def delete_note(self, note_id: UUID) -> None:
        await self.note_store.delete(note_id)

    def dispose(self) -> None:
        self.highlight_store.dispose()
        self.note_store.dispose()
