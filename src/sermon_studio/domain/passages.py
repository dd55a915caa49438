"""Scripture passage lookup results."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PassageQuery:
    """What to fetch and how to format it."""

    passage: str
    include_verse_numbers: bool = True
    include_headings: bool = False


@dataclass(frozen=True)
class Passage:
    """Passage text as returned by the ESV text endpoint."""

    query: str
    canonical: str
    passages: list[str] = field(default_factory=list)
    passage_meta: list[dict[str, object]] = field(default_factory=list)

    def as_dict(self) -> dict[str, object]:
        return {
            "query": self.query,
            "canonical": self.canonical,
            "passages": list(self.passages),
            "passage_meta": list(self.passage_meta),
        }
