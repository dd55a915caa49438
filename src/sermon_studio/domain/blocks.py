"""Sermon content blocks."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

BlockKind = Literal[
    "point",
    "bible",
    "illustration",
    "application",
    "quote",
    "media",
    "custom",
    "reader_note",
]


class _Block(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    order: int = 0
    page_id: str | None = Field(default=None, alias="pageId")


class PointBlock(_Block):
    kind: Literal["point"] = "point"
    title: str = ""
    body: str = ""
    number: int | None = None


class BibleBlock(_Block):
    kind: Literal["bible"] = "bible"
    reference: str = ""
    text: str = ""
    translation: str | None = None
    notes: str | None = None


class IllustrationBlock(_Block):
    kind: Literal["illustration"] = "illustration"
    title: str = ""
    body: str = ""


class ApplicationBlock(_Block):
    kind: Literal["application"] = "application"
    title: str = ""
    body: str = ""


class QuoteBlock(_Block):
    kind: Literal["quote"] = "quote"
    text: str = ""
    author: str | None = None
    source: str | None = None


class MediaBlock(_Block):
    kind: Literal["media"] = "media"
    url: str = ""
    type: Literal["image", "video", "audio"] = "image"
    caption: str | None = None


class CustomBlock(_Block):
    kind: Literal["custom"] = "custom"
    title: str = ""
    body: str = ""


class ReaderNoteBlock(_Block):
    kind: Literal["reader_note"] = "reader_note"
    title: str = ""
    summary: str = ""
    author: str | None = None
    source: str | None = None


SermonBlock = Annotated[
    PointBlock
    | BibleBlock
    | IllustrationBlock
    | ApplicationBlock
    | QuoteBlock
    | MediaBlock
    | CustomBlock
    | ReaderNoteBlock,
    Field(discriminator="kind"),
]

BLOCK_LIST_ADAPTER: TypeAdapter[list[SermonBlock]] = TypeAdapter(list[SermonBlock])


class SermonPage(BaseModel):
    """A titled group of blocks; blocks refer to it by ``pageId``."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    order: int = 0


PAGE_LIST_ADAPTER: TypeAdapter[list[SermonPage]] = TypeAdapter(list[SermonPage])
