"""Commentary library store."""

from dataclasses import dataclass
from uuid import UUID

from sermon_studio.domain.records import Commentary
from sermon_studio.services.auth import PrincipalProvider
from sermon_studio.services.notifications import Notifier
from sermon_studio.services.store import RecordRepository, RecordStore

CommentaryRepository = RecordRepository[Commentary]


@dataclass
class CommentaryStore:
    """Cache of uploaded commentaries, newest first."""

    store: RecordStore[Commentary]

    @classmethod
    def create(
        cls,
        repository: CommentaryRepository,
        principal: PrincipalProvider,
        notifier: Notifier,
    ) -> "CommentaryStore":
        """Build a commentary store with the commentary domain rules."""
        return cls(
            store=RecordStore(
                repository=repository,
                principal=principal,
                notifier=notifier,
                record_type=Commentary,
                label="commentary",
                plural_label="commentaries",
                sort_key=lambda commentary: commentary.created_at,
                sort_descending=True,
                required_fields=("title", "pdf_url"),
            )
        )

    @property
    def commentaries(self) -> list[Commentary]:
        return self.store.records

    async def load_commentaries(self) -> list[Commentary]:
        return await self.store.load()

    async def create_commentary(  # noqa: PLR0913
        self,
        title: str,
        pdf_url: str,
        author: str | None = None,
        cover_image_url: str | None = None,
        extracted_text: str | None = None,
    ) -> Commentary | None:
        """Register an uploaded commentary."""
        return await self.store.create(
            {
                "title": title,
                "pdf_url": pdf_url,
                "author": author,
                "cover_image_url": cover_image_url,
                "extracted_text": extracted_text,
            }
        )

    async def delete_commentary(self, commentary_id: UUID) -> None:
        await self.store.delete(commentary_id)
