"""Tests for slide line extraction and templates."""

from sermon_studio.domain.blocks import (
    BibleBlock,
    MediaBlock,
    PointBlock,
    QuoteBlock,
    ReaderNoteBlock,
)
from sermon_studio.services.slides import (
    extract_block_content,
    extract_block_title,
    extract_text_lines,
    sermon_lines,
)
from sermon_studio.services.templates import TEMPLATES, find_template, seed_blocks


def test_bible_block_title_defaults_translation() -> None:
    block = BibleBlock(id="b", reference="John 1:1", text="In the beginning was the Word")

    assert extract_block_title(block) == "John 1:1 (ESV)"
    assert extract_block_title(block.model_copy(update={"translation": "NIV"})) == (
        "John 1:1 (NIV)"
    )
    assert extract_block_title(BibleBlock(id="e")) == ""


def test_numbered_point_lines() -> None:
    block = PointBlock(id="p", title="Repent", body="Turn around\n\n\n\nBelieve", number=2)

    assert extract_text_lines(block) == ["2. Repent", "Turn around", "Believe"]


def test_quote_lines_have_no_heading() -> None:
    block = QuoteBlock(id="q", text="Grace is free", author="Spurgeon", source="Sermons")

    assert extract_block_title(block) == "Quote from Spurgeon"
    assert extract_text_lines(block) == ["Grace is free", "— Spurgeon, Sermons"]


def test_media_and_reader_note_lines() -> None:
    media = MediaBlock(id="m", url="https://cdn.example.org/clip.mp4", type="video")
    note = ReaderNoteBlock(id="r", title="Context", summary="Written from prison")

    assert extract_text_lines(media) == ["Media: https://cdn.example.org/clip.mp4"]
    assert extract_block_content(note) == ["Written from prison"]


def test_sermon_lines_follow_block_order() -> None:
    blocks = [
        PointBlock(id="second", order=1, title="B"),
        PointBlock(id="first", order=0, title="A"),
    ]

    assert list(sermon_lines(blocks)) == ["first", "second"]


def test_templates_have_unique_keys() -> None:
    keys = [template.key for template in TEMPLATES]

    assert keys == ["three-point", "expository", "topical", "blank"]


def test_find_template_falls_back_to_first() -> None:
    assert find_template("topical").name == "Topical Sermon"
    assert find_template("missing") is TEMPLATES[0]


def test_seed_blocks_get_fresh_ids_and_order() -> None:
    template = find_template("expository")

    first = seed_blocks(template)
    second = seed_blocks(template)

    assert [block.kind for block in first][:3] == ["reader_note", "point", "bible"]
    assert [block.order for block in first] == list(range(len(template.blocks)))
    assert {block.id for block in first}.isdisjoint({block.id for block in second})
