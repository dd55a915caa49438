"""Turn sermon blocks into the text lines shown on presentation slides."""

from typing import assert_never

from sermon_studio.domain.blocks import (
    ApplicationBlock,
    BibleBlock,
    CustomBlock,
    IllustrationBlock,
    MediaBlock,
    PointBlock,
    QuoteBlock,
    ReaderNoteBlock,
    SermonBlock,
)

DEFAULT_TRANSLATION = "ESV"


def extract_block_title(block: SermonBlock) -> str:  # noqa: PLR0911
    """Return the heading of a block."""
    match block:
        case BibleBlock():
            if not block.reference:
                return ""
            return f"{block.reference} ({block.translation or DEFAULT_TRANSLATION})"
        case PointBlock():
            return _point_title(block)
        case IllustrationBlock() | ApplicationBlock() | CustomBlock():
            return block.title
        case ReaderNoteBlock():
            return block.title
        case QuoteBlock():
            return f"Quote from {block.author}" if block.author else "Quote"
        case MediaBlock():
            return block.caption or "Media"
        case _:
            assert_never(block)


def extract_block_content(block: SermonBlock) -> list[str]:
    """Return the body lines of a block, without its heading."""
    match block:
        case BibleBlock():
            lines = [block.text]
        case PointBlock() | IllustrationBlock() | ApplicationBlock() | CustomBlock():
            lines = _paragraphs(block.body)
        case ReaderNoteBlock():
            lines = _paragraphs(block.summary)
        case QuoteBlock():
            lines = [block.text, _attribution(block)]
        case MediaBlock():
            lines = [f"Media: {block.url}" if block.url else ""]
        case _:
            assert_never(block)
    return _non_empty(lines)


def extract_text_lines(block: SermonBlock) -> list[str]:
    """Return every line of a block as shown in presentation mode."""
    match block:
        case QuoteBlock():
            # Quotes have no heading line, only text and attribution.
            heading = ""
        case MediaBlock():
            heading = block.caption or ""
        case _:
            heading = extract_block_title(block)
    return _non_empty([heading, *extract_block_content(block)])


def sermon_lines(blocks: list[SermonBlock]) -> dict[str, list[str]]:
    """Map block ids to their presentation lines, in block order."""
    ordered = sorted(blocks, key=lambda block: block.order)
    return {block.id: extract_text_lines(block) for block in ordered}


def _point_title(block: PointBlock) -> str:
    if block.number is None:
        return block.title
    return f"{block.number}. {block.title}"


def _attribution(block: QuoteBlock) -> str:
    parts = [part for part in (block.author, block.source) if part]
    if not parts:
        return ""
    return f"— {', '.join(parts)}"


def _paragraphs(text: str) -> list[str]:
    return [paragraph for paragraph in text.split("\n\n") if paragraph.strip()]


def _non_empty(lines: list[str]) -> list[str]:
    return [line for line in lines if line.strip()]
