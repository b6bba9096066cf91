"""
Pydantic schemas defining the contracts between modules.

ContentItem variants: produced by the ClassificationPipeline
PreviewMetadata: handed in by site-specific preview/feed parsing
Post: the final record produced by the PostAssembler

Data flow:
  purified element → ClassificationPipeline → list[ContentItem]
  PreviewMetadata + list[ContentItem] → PostAssembler → Post
"""

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Item kinds ---

TEXT = "text"
HEADING = "heading"
QUOTE = "quote"
LINK = "link"
IMAGE = "image"
VIDEO = "video"

# Kinds that ancestor eviction never removes and never climbs past
PROTECTED_KINDS = frozenset({HEADING, QUOTE, LINK})


class ContentItem(BaseModel):
    """Base class for all content items."""
    kind: str

    def get_text(self) -> Optional[str]:
        """Text this item contributes to an auto-generated description."""
        return None

    @property
    def is_image(self) -> bool:
        return self.kind == IMAGE

    @property
    def is_link(self) -> bool:
        return self.kind == LINK


class TextualItem(ContentItem):
    """
    A text-bearing item (text, heading, quote).

    Several text nodes under one semantic ancestor are merged into a single
    item through append().
    """
    body: str

    def get_text(self) -> Optional[str]:
        return self.body

    def append(self, text: str) -> None:
        self.body = f"{self.body} {text}"


class TextItem(TextualItem):
    kind: Literal["text"] = TEXT


class HeadingItem(TextualItem):
    kind: Literal["heading"] = HEADING
    level: int = Field(ge=1, le=6)


class QuoteItem(TextualItem):
    kind: Literal["quote"] = QUOTE


class LinkItem(ContentItem):
    kind: Literal["link"] = LINK
    url: str
    text: Optional[str] = None

    def get_text(self) -> Optional[str]:
        return self.text


class ImageItem(ContentItem):
    kind: Literal["image"] = IMAGE
    url: str
    alt: Optional[str] = None


class VideoItem(ContentItem):
    kind: Literal["video"] = VIDEO
    platform_id: str = Field(description="YouTube video id (11 characters)")


AnyContentItem = Annotated[
    Union[TextItem, HeadingItem, QuoteItem, LinkItem, ImageItem, VideoItem],
    Field(discriminator="kind"),
]


# --- Inputs ---

class PreviewMetadata(BaseModel):
    """
    Article preview produced by a site's index page or feed.

    The title is deliberately optional here: an empty or missing title is
    rejected by the PostAssembler with InvalidTitleError, not by validation.
    """
    title: Optional[str] = None
    uri: str
    image: Optional[str] = None
    description: Optional[str] = None
    published_at: Optional[datetime] = None  # Defaults to extraction time


class ExtractionSettings(BaseModel):
    """Tunable limits for classification, assembly and fetching."""
    description_length: int = Field(default=200, ge=0)  # Counted in code points

    # Promotion depth limits per classifier
    quote_depth: int = Field(default=5, ge=0)
    heading_depth: int = Field(default=5, ge=0)
    link_depth: int = Field(default=5, ge=0)
    video_depth: int = Field(default=3, ge=0)
    formatting_depth: int = Field(default=6, ge=0)

    # How many ancestor levels eviction may climb
    eviction_depth: int = Field(default=5, ge=0)

    user_agent: str = "Mozilla/5.0 (compatible; news-extractor/0.1)"
    timeout: float = Field(default=10.0, gt=0)


# --- Output ---

class Post(BaseModel):
    """A fully assembled article.  Immutable once built."""
    model_config = ConfigDict(frozen=True)

    source_id: str
    title: str
    description: str = Field(min_length=1)
    published_at: str = Field(description="Formatted as YYYY-MM-DD HH:MM:SS")
    source_uri: str
    lead_image: Optional[str] = None
    items: list[AnyContentItem] = Field(default_factory=list)
