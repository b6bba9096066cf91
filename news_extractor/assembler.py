"""
Post assembly.

Combines the preview metadata of an article with its classified content
items into the final Post record:

  - the first image becomes the lead image (unless the preview already has
    one) and later copies of the lead image are dropped;
  - when the preview carries no description, the leading text items are
    folded into an auto-generated one until it reaches description_length
    code points.  Links contribute their text but stay in the item list.
"""

from datetime import datetime
from typing import Optional

from .exceptions import InvalidTitleError
from .logger import get_module_logger
from .schemas import ContentItem, Post, PreviewMetadata
from .utils import normalize_spaces

logger = get_module_logger("assembler")

PUBLISHED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"


class PostAssembler:
    """Builds Post records from preview metadata and content items."""

    def __init__(self, description_length: int = 200):
        self.description_length = description_length

    def assemble(
        self,
        metadata: PreviewMetadata,
        items: list[ContentItem],
        source_id: str
    ) -> Post:
        """
        Assemble a post.

        Args:
            metadata: Preview of the article (title, URI, optional extras)
            items: Content items from the ClassificationPipeline
            source_id: Identifier of the site parser producing the post

        Returns:
            The assembled Post

        Raises:
            InvalidTitleError: if the preview has no title
        """
        if not metadata.title:
            raise InvalidTitleError(
                "Preview metadata does not contain a title",
                details={"uri": metadata.uri}
            )

        published_at = metadata.published_at or datetime.now()
        lead_image: Optional[str] = metadata.image
        has_description = bool(metadata.description)
        auto_description = ''
        post_items: list[ContentItem] = []

        for item in items:
            if lead_image is None and item.is_image:
                lead_image = item.url
                continue

            if item.is_image and item.url == lead_image:
                continue

            if has_description:
                post_items.append(item)
                continue

            if not item.is_image and len(auto_description) < self.description_length:
                text = item.get_text()
                if text:
                    separator = ' ' if auto_description else ''
                    auto_description += separator + text
                # Consumed into the description; links stay as content
                if not item.is_link:
                    continue

            post_items.append(item)

        if has_description:
            description = metadata.description
        else:
            description = normalize_spaces(auto_description) or metadata.title

        logger.debug(f"Assembled '{metadata.title}': {len(post_items)} items, "
                     f"lead image: {lead_image is not None}")

        return Post(
            source_id=source_id,
            title=metadata.title,
            description=description,
            published_at=published_at.strftime(PUBLISHED_AT_FORMAT),
            source_uri=metadata.uri,
            lead_image=lead_image,
            # Copies, so later merges in the caller cannot reach the post
            items=[item.model_copy() for item in post_items],
        )


def assemble(metadata: PreviewMetadata, items: list[ContentItem], source_id: str,
             description_length: int = 200) -> Post:
    """Convenience function to assemble a post."""
    return PostAssembler(description_length).assemble(metadata, items, source_id)
