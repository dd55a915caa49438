"""Domain models for user-owned records mirrored by the stores."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from sermon_studio.domain.blocks import SermonBlock, SermonPage


@dataclass(frozen=True)
class Note:
    """A free-form study note."""

    id: UUID
    user_id: UUID
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class BibleHighlight:
    """A highlighted span of a Bible chapter."""

    id: UUID
    user_id: UUID
    book: str
    chapter: int
    text: str
    start_offset: int
    end_offset: int
    color: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class BibleNote:
    """A note anchored at an offset inside a Bible chapter."""

    id: UUID
    user_id: UUID
    book: str
    chapter: int
    position_offset: int
    content: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Commentary:
    """An uploaded commentary document."""

    id: UUID
    user_id: UUID
    title: str
    pdf_url: str
    created_at: datetime
    updated_at: datetime
    author: str | None = None
    cover_image_url: str | None = None
    extracted_text: str | None = None


@dataclass(frozen=True)
class Sermon:
    """A sermon outline made of ordered blocks."""

    id: UUID
    user_id: UUID
    title: str
    created_at: datetime
    updated_at: datetime
    subtitle: str = ""
    blocks: tuple[SermonBlock, ...] = field(default_factory=tuple)
    pages: tuple[SermonPage, ...] = field(default_factory=tuple)
