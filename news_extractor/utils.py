"""
Shared text and URI helpers.
"""

import re
from urllib.parse import urljoin, urlsplit

from requests.exceptions import InvalidURL
from requests.utils import requote_uri

from .exceptions import UriEncodingError

WHITESPACE_PATTERN = re.compile(r'\s+')

# Characters that count as "nothing" when deciding whether a node has text.
# Scraped markup is full of no-break spaces, braille blanks (U+2800) and
# zero-width spaces used as layout filler.
BLANK_CHARS = " \t\n\r\x00\x0b\u00a0\u2800\u200b\ufeff"

ALLOWED_SCHEMES = ('http', 'https')


def normalize_spaces(text: str) -> str:
    """Collapse every run of whitespace to a single space and trim the ends."""
    return WHITESPACE_PATTERN.sub(' ', text).strip()


def is_blank(text: str) -> bool:
    """True when the text holds nothing but whitespace and BLANK_CHARS."""
    return all(char.isspace() or char in BLANK_CHARS for char in text)


def resolve_uri(href: str, base_uri: str) -> str:
    """
    Resolve a (possibly relative) link against the article URI and re-encode it.

    Raises:
        UriEncodingError: if the result is not an absolute http(s) URL
    """
    try:
        absolute = urljoin(base_uri, href.strip())
        encoded = requote_uri(absolute)
        parts = urlsplit(encoded)
    except (ValueError, InvalidURL) as e:
        raise UriEncodingError(f"Cannot encode URI: {e}", uri=href)

    if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.hostname:
        raise UriEncodingError("Not an absolute http(s) URI", uri=href,
                               details={"resolved": encoded})
    return encoded
