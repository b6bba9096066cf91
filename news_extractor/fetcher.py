"""
Page fetching.

Thin requests wrapper used by site parsers: re-encodes the URI, checks the
response status and undoes an extra layer of gzip some sites put on their
bodies.
"""

import gzip
from typing import Optional

import requests
from requests.utils import requote_uri

from .exceptions import TransportError
from .logger import get_module_logger
from .preprocessor import Preprocessor
from .schemas import ExtractionSettings

logger = get_module_logger("fetcher")

GZIP_MAGIC = b'\x1f\x8b\x08'


class PageFetcher:
    """Fetches article pages over HTTP."""

    def __init__(
        self,
        settings: Optional[ExtractionSettings] = None,
        session: Optional[requests.Session] = None
    ):
        self.settings = settings or ExtractionSettings()
        self.session = session or requests.Session()
        self.session.headers.setdefault('User-Agent', self.settings.user_agent)

    def fetch_bytes(self, uri: str) -> bytes:
        """
        Fetch a page body.

        Raises:
            TransportError: on network failure or a status outside 200-399
        """
        encoded_uri = requote_uri(uri)
        try:
            response = self.session.get(encoded_uri, timeout=self.settings.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Could not fetch {encoded_uri}: {e}", uri=encoded_uri)

        if response.status_code < 200 or response.status_code >= 400:
            raise TransportError(
                f"Could not fetch {encoded_uri}, status code {response.status_code}",
                uri=encoded_uri,
                status_code=response.status_code
            )

        # requests already handles Content-Encoding: gzip; this catches bodies
        # that are gzipped without saying so
        content = response.content
        if content.startswith(GZIP_MAGIC):
            try:
                content = gzip.decompress(content)
            except (OSError, EOFError) as e:
                raise TransportError(f"Corrupt gzip body from {encoded_uri}: {e}",
                                     uri=encoded_uri, status_code=response.status_code)

        logger.debug(f"Fetched {encoded_uri}: {len(content)} bytes")
        return content

    def fetch(self, uri: str) -> str:
        """Fetch a page and decode it with the charset it declares."""
        raw_bytes = self.fetch_bytes(uri)
        charset = Preprocessor.detect_charset_from_bytes(raw_bytes)
        return raw_bytes.decode(charset, errors='replace')


def fetch_page(uri: str, settings: Optional[ExtractionSettings] = None) -> str:
    """Convenience function to fetch a single page."""
    return PageFetcher(settings).fetch(uri)
