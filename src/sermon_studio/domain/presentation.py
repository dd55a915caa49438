"""Presentation state and broadcast message models."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

PresenceRole = Literal["presenter", "audience"]


class _WireModel(BaseModel):
    """Base for models exchanged with browsers (camelCase on the wire)."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PresentationSettings(_WireModel):
    """Display settings for the sermon audience view."""

    bg_type: Literal["solid", "image"] = "solid"
    bg_color: str = "#1a1a1a"
    bg_image_data_url: str | None = None
    text_color: Literal["white", "black"] = "white"
    uppercase: bool = False
    align: Literal["left", "center", "right"] = "center"
    size_scale: float = 1.0
    show_filmstrip: bool = False
    dim_inactive: bool = False
    show_waiting_message: bool = True
    text_box_padding: int = 8
    show_text_box: bool = True
    line_height: float = 1.8
    word_spacing: float = 0


DEFAULT_SETTINGS = PresentationSettings()


class SpotlightSettings(_WireModel):
    """Display settings for the notes spotlight popup."""

    enabled: bool = False
    mode: Literal["standard", "presentation"] = "standard"
    auto_close: bool = True
    dim_level: int = 50
    blur_background: bool = False
    blur_amount: int = 8
    popup_width: Literal["small", "medium", "large", "full"] = "medium"
    popup_height: Literal["auto", "small", "medium", "large"] = "auto"
    background_url: str | None = None
    background_type: Literal["preset", "custom", "none"] = "none"
    text_color: Literal["light", "dark"] = "light"
    overlay_darkness: int = 30


class EmphasisRange(_WireModel):
    """A colored emphasis span inside the spotlighted text."""

    start: int
    end: int
    text: str
    color_id: str


class PresentationState(_WireModel):
    """Full snapshot a late-joining audience member needs."""

    note_id: str
    note_title: str = ""
    spotlight_text: str = ""
    spotlight_open: bool = False
    spotlight_settings: SpotlightSettings = SpotlightSettings()
    settings: PresentationSettings = DEFAULT_SETTINGS
    current_page: int = 1
    total_pages: int = 1
    emphasis_list: tuple[EmphasisRange, ...] = ()


class SpotlightPayload(_WireModel):
    spotlight_text: str | None = None
    spotlight_open: bool | None = None


class EmphasisPayload(_WireModel):
    emphasis_list: tuple[EmphasisRange, ...] = ()


class PagePayload(_WireModel):
    current_page: int | None = None
    total_pages: int | None = None


class SettingsPayload(_WireModel):
    spotlight_settings: SpotlightSettings | None = None
    settings: PresentationSettings | None = None


class EmptyPayload(_WireModel):
    pass


class SpotlightUpdate(_WireModel):
    type: Literal["spotlight"] = "spotlight"
    payload: SpotlightPayload


class EmphasisUpdate(_WireModel):
    type: Literal["emphasis"] = "emphasis"
    payload: EmphasisPayload


class PageUpdate(_WireModel):
    type: Literal["page"] = "page"
    payload: PagePayload


class SettingsUpdate(_WireModel):
    type: Literal["settings"] = "settings"
    payload: SettingsPayload


class ClearUpdate(_WireModel):
    type: Literal["clear"] = "clear"
    payload: EmptyPayload = EmptyPayload()


class InitUpdate(_WireModel):
    """Carries a complete state; sent on every presenter state change."""

    type: Literal["init"] = "init"
    payload: PresentationState


PresentationUpdate = Annotated[
    SpotlightUpdate
    | EmphasisUpdate
    | PageUpdate
    | SettingsUpdate
    | ClearUpdate
    | InitUpdate,
    Field(discriminator="type"),
]

PRESENTATION_UPDATE_ADAPTER: TypeAdapter[PresentationUpdate] = TypeAdapter(
    PresentationUpdate
)


class BlockMessage(_WireModel):
    type: Literal["block"] = "block"
    block_id: str | None = None
    display_mode: Literal["title", "content", "both"] | None = None


class LineMessage(_WireModel):
    type: Literal["line"] = "line"
    block_id: str | None = None
    line_index: int | None = None


class ClearMessage(_WireModel):
    type: Literal["clear"] = "clear"


class SettingsMessage(_WireModel):
    type: Literal["settings"] = "settings"
    settings: PresentationSettings


SermonMessage = Annotated[
    BlockMessage | LineMessage | ClearMessage | SettingsMessage,
    Field(discriminator="type"),
]

SERMON_MESSAGE_ADAPTER: TypeAdapter[SermonMessage] = TypeAdapter(SermonMessage)


class SermonDisplayState(_WireModel):
    """What the sermon audience view is currently showing."""

    current_block_id: str | None = None
    current_line_index: int | None = None
    display_mode: Literal["title", "content", "both"] = "both"
    settings: PresentationSettings = DEFAULT_SETTINGS
