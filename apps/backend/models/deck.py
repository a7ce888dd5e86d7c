import uuid
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

HEX_COLOR_PATTERN = r"^#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$"


class SlideType(str, Enum):
    """Closed set of slide layouts. Each tag implies its required fields."""
    TITLE = "title"
    CONTENT = "content"
    BULLETS = "bullets"
    IMAGE = "image"
    OVERVIEW = "overview"
    TEXT = "text"


class Palette(BaseModel):
    """Five-color theme applied to a slide or a whole deck"""
    primary: str = Field(..., pattern=HEX_COLOR_PATTERN)
    secondary: str = Field(..., pattern=HEX_COLOR_PATTERN)
    accent: str = Field(..., pattern=HEX_COLOR_PATTERN)
    background: str = Field(..., pattern=HEX_COLOR_PATTERN)
    text: str = Field(..., pattern=HEX_COLOR_PATTERN)


DEFAULT_PALETTE = Palette(
    primary='#9333EA',
    secondary='#EC4899',
    accent='#A855F7',
    background='#111827',
    text='#FFFFFF',
)


class Slide(BaseModel):
    """
    A render-ready slide produced by enrichment.

    Attributes:
        id: Unique identifier within the deck
        type: Layout tag
        html/css: Generated markup, a pure function of the other fields
    """
    id: str = Field(..., description="Unique identifier within the deck")
    type: SlideType = Field(..., description="Layout tag")
    title: str = Field("", description="Slide heading")
    content: str = Field("", description="Free text body")
    bullets: List[str] = Field(default_factory=list, description="Ordered bullet items")
    imageUrl: Optional[str] = Field(None, description="Resolved image reference")
    iconUrl: Optional[str] = Field(None, description="Resolved icon reference")
    imagePrompt: Optional[str] = Field(None, description="Prompt suggested by the model for the slide visual")
    caption: Optional[str] = Field(None, description="Caption shown under the media region")
    backgroundColor: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    layout: Optional[str] = Field(None, description="left | right | center")
    theme: Optional[Palette] = Field(None, description="Derived or explicit palette")
    html: Optional[str] = Field(None, description="Generated markup fragment")
    css: Optional[str] = Field(None, description="Generated stylesheet fragment")


class RawDeck(BaseModel):
    """Loosely-typed deck as decoded from the model reply"""
    title: str
    slides: List[Dict[str, Any]]


class PresentationDeck(BaseModel):
    """
    Model representing a generated presentation.

    Attributes:
        id: Opaque identifier assigned when the deck is created
        title: Display title
        slides: Ordered slides; order is the navigation sequence
        theme: Default palette for slides without their own
    """
    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Unique identifier")
    title: str = Field(..., description="Title of the deck")
    slides: List[Slide] = Field(..., description="List of slides in the deck")
    theme: Palette = Field(default_factory=lambda: DEFAULT_PALETTE.model_copy(), description="Default palette")

    @field_validator('slides')
    @classmethod
    def _require_slides(cls, value: List[Slide]) -> List[Slide]:
        if not value:
            raise ValueError("A deck needs at least one slide")
        return value
