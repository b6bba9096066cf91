"""
Custom exceptions for the news extractor.

Error philosophy:
  - InvalidTitleError → FAIL HARD for one article: the post cannot be assembled.
  - TransportError    → FAIL HARD for one article: the page could not be fetched.
  - UriEncodingError  → NON-FATAL: the offending node contributes no item.

Nothing here aborts a whole batch.  NewsParser.parse() catches the per-article
errors, logs them and moves on to the next preview.

Duplicate claims on the attachment map are not exceptions at all; they are
reported as ClaimStatus values (see attachments.py).
"""

from typing import Optional


class NewsExtractorError(Exception):
    """Base exception for all news extractor errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- FAIL HARD: aborts the current article ---

class InvalidTitleError(NewsExtractorError):
    """
    Raised by the PostAssembler when the preview metadata has no title.

    There is no fallback: a post without a title cannot be published.
    """
    pass


class TransportError(NewsExtractorError):
    """Raised when a page fetch fails or returns a status outside 200-399."""

    def __init__(
        self,
        message: str,
        uri: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.uri = uri
        self.status_code = status_code  # None when the request never got a response


# --- NON-FATAL: absorbed at the node level ---

class UriEncodingError(NewsExtractorError):
    """Raised when a link or image URL cannot be resolved or re-encoded."""

    def __init__(self, message: str, uri: str, details: Optional[dict] = None):
        super().__init__(message, details)
        self.uri = uri
