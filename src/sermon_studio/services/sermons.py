"""Sermon outline store."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from uuid import UUID, uuid4

from sermon_studio.domain.blocks import (
    BLOCK_LIST_ADAPTER,
    PAGE_LIST_ADAPTER,
    BlockKind,
    SermonBlock,
    SermonPage,
)
from sermon_studio.domain.records import Sermon
from sermon_studio.services.auth import PrincipalProvider
from sermon_studio.services.notifications import Notifier
from sermon_studio.services.store import RecordRepository, RecordStore
from sermon_studio.services.templates import (
    BlockSeed,
    build_block,
    find_template,
    seed_blocks,
)

_logger = logging.getLogger(__name__)

SermonRepository = RecordRepository[Sermon]

_NEW_BLOCK_TITLES: dict[str, str] = {"point": "New Point"}


@dataclass
class SermonStore:
    """Cache of the user's sermons, most recently edited first."""

    store: RecordStore[Sermon]

    @classmethod
    def create(
        cls,
        repository: SermonRepository,
        principal: PrincipalProvider,
        notifier: Notifier,
    ) -> "SermonStore":
        """Build a sermon store with the sermon domain rules."""
        return cls(
            store=RecordStore(
                repository=repository,
                principal=principal,
                notifier=notifier,
                record_type=Sermon,
                label="sermon",
                plural_label="sermons",
                sort_key=lambda sermon: sermon.updated_at,
                sort_descending=True,
                required_fields=("title",),
                select_created=True,
            )
        )

    @property
    def sermons(self) -> list[Sermon]:
        return self.store.records

    @property
    def current_sermon(self) -> Sermon | None:
        return self.store.selected

    async def load_user_sermons(self) -> list[Sermon]:
        return await self.store.load()

    async def create_sermon(
        self, title: str = "Untitled Sermon", subtitle: str = ""
    ) -> Sermon | None:
        """Create an empty sermon and make it current."""
        return await self.store.create(
            {"title": title, "subtitle": subtitle, "blocks": (), "pages": ()}
        )

    async def create_sermon_from_template(self, template_key: str = "blank") -> Sermon | None:
        """Create a sermon pre-filled with a template's blocks."""
        template = find_template(template_key)
        return await self.store.create(
            {
                "title": template.name,
                "subtitle": template.description,
                "blocks": tuple(seed_blocks(template)),
            }
        )

    async def update_sermon(self, sermon_id: UUID, updates: dict[str, object]) -> None:
        """Persist and apply a partial sermon update."""
        patch = dict(updates)
        if "blocks" in patch:
            patch["blocks"] = _coerce_blocks(patch["blocks"])  # type: ignore[arg-type]
        if "pages" in patch:
            patch["pages"] = _coerce_pages(patch["pages"])  # type: ignore[arg-type]
        await self.store.update(sermon_id, patch)

    async def delete_sermon(self, sermon_id: UUID) -> None:
        await self.store.delete(sermon_id)

    def set_current_sermon(self, sermon: Sermon | None) -> None:
        self.store.select(sermon)

    async def load_sermon(self, sermon_id: UUID) -> Sermon | None:
        """Fetch one sermon and make it current."""
        user_id = await self.store.resolve_user()
        if user_id is None:
            return None
        self.store.is_loading = True
        try:
            rows = await self.store.fetch(user_id, {"id": sermon_id})
        except Exception:
            _logger.exception("Failed to load sermon %s", sermon_id)
            self.store.notifier.error("Failed to load sermon")
            return None
        finally:
            self.store.is_loading = False
        if not rows:
            _logger.warning("Sermon %s not found", sermon_id)
            return None
        self.store.select(rows[0])
        return rows[0]

    def add_block(
        self,
        kind: BlockKind,
        after_block_id: str | None = None,
        page_id: str | None = None,
    ) -> SermonBlock | None:
        """Insert a new block into the current sermon draft.

        The block goes right after ``after_block_id`` when that block exists,
        otherwise at the end. Changes stay local until ``save_current_sermon``.
        """
        sermon = self.current_sermon
        if sermon is None:
            return None
        block = build_block(
            BlockSeed(kind, title=_NEW_BLOCK_TITLES.get(kind)),
            block_id=uuid4().hex,
            order=len(sermon.blocks),
        ).model_copy(update={"page_id": page_id})
        blocks = list(sermon.blocks)
        position = _index_of(blocks, after_block_id)
        blocks.insert(len(blocks) if position is None else position + 1, block)
        self._replace_blocks(blocks)
        return self._find_block(block.id)

    def update_block(self, block_id: str, **changes: object) -> None:
        """Edit fields of one block in the current sermon draft."""
        sermon = self.current_sermon
        if sermon is None:
            return
        blocks = list(sermon.blocks)
        position = _index_of(blocks, block_id)
        if position is None:
            return
        block = blocks[position]
        unknown = set(changes) - (set(type(block).model_fields) - {"id", "kind"})
        if unknown:
            raise ValueError(f"Unknown block fields: {', '.join(sorted(unknown))}")
        blocks[position] = type(block).model_validate({**dict(block), **changes})
        self._replace_blocks(blocks, renumber=False)

    def delete_block(self, block_id: str) -> None:
        """Remove a block from the current sermon draft."""
        sermon = self.current_sermon
        if sermon is None:
            return
        self._replace_blocks([block for block in sermon.blocks if block.id != block_id])

    def reorder_blocks(self, block_id: str, new_order: int) -> None:
        """Move a block to a new position in the current sermon draft."""
        sermon = self.current_sermon
        if sermon is None:
            return
        blocks = list(sermon.blocks)
        position = _index_of(blocks, block_id)
        if position is None:
            return
        block = blocks.pop(position)
        blocks.insert(new_order, block)
        self._replace_blocks(blocks)

    async def save_current_sermon(self) -> None:
        """Persist the current sermon draft."""
        sermon = self.current_sermon
        if sermon is None:
            return
        await self.update_sermon(
            sermon.id,
            {
                "title": sermon.title,
                "subtitle": sermon.subtitle,
                "blocks": sermon.blocks,
                "pages": sermon.pages,
            },
        )

    def _replace_blocks(self, blocks: list[SermonBlock], renumber: bool = True) -> None:
        sermon = self.current_sermon
        if sermon is None:
            return
        if renumber:
            blocks = [
                block if block.order == index else block.model_copy(update={"order": index})
                for index, block in enumerate(blocks)
            ]
        self.store.select(replace(sermon, blocks=tuple(blocks)))

    def _find_block(self, block_id: str) -> SermonBlock | None:
        sermon = self.current_sermon
        if sermon is None:
            return None
        for block in sermon.blocks:
            if block.id == block_id:
                return block
        return None


def _index_of(blocks: list[SermonBlock], block_id: str | None) -> int | None:
    if block_id is None:
        return None
    for index, block in enumerate(blocks):
        if block.id == block_id:
            return index
    return None


def _coerce_blocks(blocks: Sequence[SermonBlock | dict[str, object]]) -> tuple[SermonBlock, ...]:
    """Validate raw or typed blocks into an immutable tuple."""
    return tuple(
        BLOCK_LIST_ADAPTER.validate_python(
            [
                block if isinstance(block, dict) else block.model_dump()
                for block in blocks
            ]
        )
    )


def _coerce_pages(pages: Sequence[SermonPage | dict[str, object]]) -> tuple[SermonPage, ...]:
    return tuple(
        PAGE_LIST_ADAPTER.validate_python(
            [page if isinstance(page, dict) else page.model_dump() for page in pages]
        )
    )
