"""
Main orchestrator for the news extractor.

Coordinates the pipeline: Preprocessor → ClassificationPipeline → PostAssembler.
This module wires the stages together and picks the article element out of
the parsed page.
"""

from pathlib import Path
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

from .assembler import PostAssembler
from .logger import get_module_logger, setup_logger
from .pipeline import ClassificationPipeline
from .preprocessor import Preprocessor
from .schemas import ContentItem, ExtractionSettings, Post, PreviewMetadata

logger = get_module_logger("main")


class ArticleExtractor:
    """
    Main orchestrator for article extraction.

    Coordinates the pipeline:
    1. Preprocessor: parses the page and purifies the article element
    2. ClassificationPipeline: turns the element into content items
    3. PostAssembler: builds the Post record
    """

    def __init__(
        self,
        settings: Optional[ExtractionSettings] = None,
        log_level: int = None
    ):
        if log_level is not None:
            setup_logger(level=log_level)

        self.settings = settings or ExtractionSettings()
        self.preprocessor = Preprocessor()
        self.pipeline = ClassificationPipeline(self.settings)
        self.assembler = PostAssembler(self.settings.description_length)

    def select_content(self, soup: BeautifulSoup,
                       content_selector: Optional[str] = None) -> Optional[Tag]:
        """Locate the article element; falls back to <body> (or the whole tree)."""
        if content_selector:
            try:
                element = soup.select_one(content_selector)
            except Exception as e:
                logger.warning(f"Invalid CSS '{content_selector}': {e}")
                element = None
            if element is not None:
                return element
            logger.warning(f"No element matches '{content_selector}', using body")

        return soup.body or soup

    def extract_items(
        self,
        html: str,
        base_uri: str,
        content_selector: Optional[str] = None
    ) -> list[ContentItem]:
        """Parse, purify and classify; no post assembly."""
        soup = self.preprocessor.parse(html)
        element = self.select_content(soup, content_selector)
        self.preprocessor.purify(element)
        return self.pipeline.classify(element, base_uri)

    def parse(
        self,
        html: str,
        metadata: PreviewMetadata,
        content_selector: Optional[str] = None,
        source_id: str = "ArticleExtractor"
    ) -> Post:
        """
        Extract a post from an article page.

        Args:
            html: Page or fragment HTML
            metadata: Preview of the article (title, URI, ...)
            content_selector: CSS selector of the article body
            source_id: Identifier stored on the post

        Returns:
            Assembled Post

        Raises:
            InvalidTitleError: if the metadata has no title
        """
        logger.info(f"Extracting {metadata.uri}")

        items = self.extract_items(html, metadata.uri, content_selector)
        post = self.assembler.assemble(metadata, items, source_id)

        logger.info(f"Complete: {len(post.items)} items")
        return post

    def parse_file(
        self,
        file_path: Union[str, Path],
        metadata: PreviewMetadata,
        content_selector: Optional[str] = None,
        source_id: str = "ArticleExtractor"
    ) -> Post:
        """Extract a post from an HTML file."""
        file_path = Path(file_path)

        # Read raw bytes so the declared charset can be honored when decoding
        raw_bytes = file_path.read_bytes()
        declared_charset = Preprocessor.detect_charset_from_bytes(raw_bytes)
        html = raw_bytes.decode(declared_charset, errors='replace')

        return self.parse(html, metadata, content_selector=content_selector,
                          source_id=source_id)


def extract_post(html: str, metadata: PreviewMetadata,
                 content_selector: Optional[str] = None) -> Post:
    """Convenience function to extract a post from HTML."""
    return ArticleExtractor().parse(html, metadata, content_selector)
