"""
News Extractor

Extracts structured article content from news-site HTML.
- Preprocessor: parsing and purification of the article element
- ClassificationPipeline: rule-based classification into content items
- PostAssembler: post record with lead image and auto-description

Public API surface:
  Pipeline classes  — Preprocessor, ClassificationPipeline, PostAssembler, ArticleExtractor
  Site parsers      — NewsParser, PageFetcher
  Data models       — ContentItem variants, PreviewMetadata, Post, ExtractionSettings
  Error types       — InvalidTitleError, TransportError, UriEncodingError
"""

# --- Pipeline stages ---
from .preprocessor import Preprocessor, purify
from .pipeline import ClassificationPipeline, classify
from .assembler import PostAssembler, assemble
from .main import ArticleExtractor

# --- Site parser support ---
from .fetcher import PageFetcher
from .parser import NewsParser
from .config import load_settings

# --- Data models ---
from .schemas import (
    ContentItem,
    TextItem,
    HeadingItem,
    QuoteItem,
    LinkItem,
    ImageItem,
    VideoItem,
    PreviewMetadata,
    Post,
    ExtractionSettings,
)

# --- Exceptions ---
from .exceptions import NewsExtractorError, InvalidTitleError, TransportError, UriEncodingError

__version__ = "0.1.0"
__all__ = [
    "Preprocessor",
    "purify",
    "ClassificationPipeline",
    "classify",
    "PostAssembler",
    "assemble",
    "ArticleExtractor",
    "PageFetcher",
    "NewsParser",
    "load_settings",
    "ContentItem",
    "TextItem",
    "HeadingItem",
    "QuoteItem",
    "LinkItem",
    "ImageItem",
    "VideoItem",
    "PreviewMetadata",
    "Post",
    "ExtractionSettings",
    "NewsExtractorError",
    "InvalidTitleError",
    "TransportError",
    "UriEncodingError",
]
