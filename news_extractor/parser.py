"""
Base class for site parsers.

A site parser knows where a site lists its articles and where the article
body lives in the page.  Everything else (fetching, classification, post
assembly, error isolation between articles) is provided here.

Subclasses implement two hooks:
  get_preview_list(min_count, max_count) → list[PreviewMetadata]
  parse_news_page(preview) → Post     (usually: fetch + build_post)
"""

from abc import ABC, abstractmethod
from typing import Optional

import requests

from .exceptions import InvalidTitleError, TransportError
from .fetcher import PageFetcher
from .logger import get_module_logger
from .main import ArticleExtractor
from .schemas import ExtractionSettings, Post, PreviewMetadata

logger = get_module_logger("parser")


class NewsParser(ABC):
    """Abstract batch parser for one news site."""

    def __init__(
        self,
        settings: Optional[ExtractionSettings] = None,
        session: Optional[requests.Session] = None
    ):
        self.settings = settings or ExtractionSettings()
        self.fetcher = PageFetcher(self.settings, session=session)
        self.extractor = ArticleExtractor(self.settings)

    @property
    def source_id(self) -> str:
        return type(self).__name__

    @abstractmethod
    def get_preview_list(self, min_count: int = 10, max_count: int = 100) -> list[PreviewMetadata]:
        """Fetch the site's index or feed and return article previews."""
        pass

    @abstractmethod
    def parse_news_page(self, preview: PreviewMetadata) -> Post:
        """Fetch one article and turn it into a post."""
        pass

    def parse(self, min_count: int = 10, max_count: int = 100) -> list[Post]:
        """
        Parse the site's latest articles.

        An article whose page cannot be fetched or whose preview has no title
        is skipped with a warning; the rest of the batch continues.
        """
        previews = self.get_preview_list(min_count, max_count)
        logger.info(f"{self.source_id}: {len(previews)} previews")

        posts = []
        for preview in previews:
            try:
                posts.append(self.parse_news_page(preview))
            except (TransportError, InvalidTitleError) as e:
                logger.warning(f"{self.source_id}: skipping {preview.uri}: {e.message}")

        logger.info(f"{self.source_id}: {len(posts)} posts parsed")
        return posts

    def fetch_page(self, uri: str) -> str:
        return self.fetcher.fetch(uri)

    def build_post(
        self,
        html: str,
        preview: PreviewMetadata,
        content_selector: Optional[str] = None
    ) -> Post:
        """Extract the post for a page that has already been fetched."""
        return self.extractor.parse(html, preview, content_selector=content_selector,
                                    source_id=self.source_id)
