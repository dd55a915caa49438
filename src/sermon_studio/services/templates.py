"""Built-in sermon outline templates."""

from dataclasses import dataclass
from typing import assert_never
from uuid import uuid4

from sermon_studio.domain.blocks import (
    ApplicationBlock,
    BibleBlock,
    BlockKind,
    CustomBlock,
    IllustrationBlock,
    MediaBlock,
    PointBlock,
    QuoteBlock,
    ReaderNoteBlock,
    SermonBlock,
)


@dataclass(frozen=True)
class BlockSeed:
    """Starting content for one block of a template."""

    kind: BlockKind
    title: str | None = None
    body: str | None = None
    reference: str | None = None
    text: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class SermonTemplate:
    """A named outline used to start a new sermon."""

    key: str
    name: str
    description: str
    blocks: tuple[BlockSeed, ...]


TEMPLATES: tuple[SermonTemplate, ...] = (
    SermonTemplate(
        key="three-point",
        name="Three-Point Sermon",
        description="Classic three-point structure with introduction and conclusion",
        blocks=(
            BlockSeed(
                "reader_note",
                title="Sermon Overview",
                body="Add your sermon purpose and main theme here",
            ),
            BlockSeed(
                "point",
                title="Introduction",
                body="Hook your audience and introduce the topic",
            ),
            BlockSeed("point", title="Point 1", body="First main point"),
            BlockSeed("bible", reference="", text=""),
            BlockSeed("illustration", body="Story or example for point 1"),
            BlockSeed("point", title="Point 2", body="Second main point"),
            BlockSeed("bible", reference="", text=""),
            BlockSeed("illustration", body="Story or example for point 2"),
            BlockSeed("point", title="Point 3", body="Third main point"),
            BlockSeed("bible", reference="", text=""),
            BlockSeed("illustration", body="Story or example for point 3"),
            BlockSeed("application", body="Practical application for the audience"),
            BlockSeed("point", title="Conclusion", body="Summarize and call to action"),
        ),
    ),
    SermonTemplate(
        key="expository",
        name="Expository Sermon",
        description="Verse-by-verse exposition of a biblical passage",
        blocks=(
            BlockSeed(
                "reader_note",
                title="Passage Overview",
                body="Context and background of the passage",
            ),
            BlockSeed(
                "point",
                title="Introduction",
                body="Introduce the passage and its context",
            ),
            BlockSeed("bible", reference="", text=""),
            BlockSeed(
                "point",
                title="Main Idea 1",
                body="First key teaching from the passage",
            ),
            BlockSeed("application", body="How this applies today"),
            BlockSeed(
                "point",
                title="Main Idea 2",
                body="Second key teaching from the passage",
            ),
            BlockSeed("application", body="Practical steps for application"),
            BlockSeed("point", title="Conclusion", body="Summary and response"),
        ),
    ),
    SermonTemplate(
        key="topical",
        name="Topical Sermon",
        description="Address a specific topic or theme with multiple scriptures",
        blocks=(
            BlockSeed(
                "reader_note",
                title="Topic Overview",
                body="Define the topic and why it matters",
            ),
            BlockSeed(
                "point",
                title="Introduction",
                body="Present the topic and its relevance",
            ),
            BlockSeed(
                "point",
                title="Biblical Foundation",
                body="What does the Bible say?",
            ),
            BlockSeed("bible", reference="", text=""),
            BlockSeed("bible", reference="", text=""),
            BlockSeed(
                "point",
                title="Real-Life Connection",
                body="How this affects our daily lives",
            ),
            BlockSeed("illustration", body="Contemporary example or story"),
            BlockSeed("application", body="Specific actions to take"),
            BlockSeed("point", title="Conclusion", body="Closing thoughts and challenge"),
        ),
    ),
    SermonTemplate(
        key="blank",
        name="Blank Canvas",
        description="Start from scratch with complete freedom",
        blocks=(
            BlockSeed(
                "reader_note",
                title="Sermon Notes",
                body="Add your initial thoughts here",
            ),
        ),
    ),
)


def find_template(key: str) -> SermonTemplate:
    """Return the template for a key, falling back to the first one."""
    for template in TEMPLATES:
        if template.key == key:
            return template
    return TEMPLATES[0]


def seed_blocks(template: SermonTemplate) -> list[SermonBlock]:
    """Instantiate a template's seeds as blocks with fresh ids."""
    return [
        build_block(seed, block_id=uuid4().hex, order=index)
        for index, seed in enumerate(template.blocks)
    ]


def build_block(seed: BlockSeed, block_id: str, order: int) -> SermonBlock:  # noqa: PLR0911
    """Create a block of the seed's kind, filling kind-specific defaults."""
    match seed.kind:
        case "point":
            return PointBlock(
                id=block_id,
                order=order,
                title=seed.title or "Untitled Point",
                body=seed.body or "",
            )
        case "bible":
            return BibleBlock(
                id=block_id,
                order=order,
                reference=seed.reference or "",
                text=seed.text or "",
            )
        case "illustration":
            return IllustrationBlock(
                id=block_id,
                order=order,
                title=seed.title or "Illustration",
                body=seed.body or "",
            )
        case "application":
            return ApplicationBlock(
                id=block_id,
                order=order,
                title=seed.title or "Application",
                body=seed.body or "",
            )
        case "quote":
            return QuoteBlock(id=block_id, order=order, text=seed.text or "")
        case "custom":
            return CustomBlock(
                id=block_id,
                order=order,
                title=seed.title or "Custom Block",
                body=seed.body or "",
            )
        case "reader_note":
            return ReaderNoteBlock(
                id=block_id,
                order=order,
                title=seed.title or "Reader's Note",
                summary=seed.body or "",
            )
        case "media":
            return MediaBlock(
                id=block_id,
                order=order,
                url=seed.url or "",
                caption=seed.title,
            )
        case _:
            assert_never(seed.kind)
