"""Pydantic models for HTTP request and response bodies."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PassageRequest(_CamelModel):
    """Body of a passage lookup; ``passage`` is checked by the service."""

    passage: str | None = None
    include_verse_numbers: bool = True
    include_headings: bool = False


class NotesSessionResponse(_CamelModel):
    session_id: str
    audience_url: str


class SermonSessionResponse(_CamelModel):
    session_id: str
    audience_url: str
    presenter_url: str


class NoteCreateRequest(_CamelModel):
    title: str = "Untitled Note"
    content: str = ""
    tags: list[str] = Field(default_factory=list)


class SermonCreateRequest(_CamelModel):
    """Creates an empty sermon, or a seeded one when a template is named."""

    title: str = "Untitled Sermon"
    subtitle: str = ""
    template: str | None = None
