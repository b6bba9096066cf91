"""
Preprocessor module: parsing and purification of article HTML.

- Detects the declared charset from raw bytes
- Sanitizes the raw HTML string (fixes common malformations)
- Parses with a tolerant parser fallback chain
- Purifies the article element before classification (removes scripts,
  styles, forms, videos, tables and javascript: links)

Design principle: NEVER FAIL on bad HTML. Always produce a usable tree.

Pipeline position: before the ClassificationPipeline.
Input:  raw HTML bytes or string
Output: BeautifulSoup tree; purify() mutates the article element in place
"""

import codecs
import re

from bs4 import BeautifulSoup, Tag

from .logger import get_module_logger

logger = get_module_logger("preprocessor")


class Preprocessor:
    """Rule-based HTML parsing and purification."""

    # Elements removed with their whole subtree before classification.
    # Tables are dropped because scraped layout tables turn into text soup.
    PURIFY_ELEMENTS = ['script', 'style', 'form', 'video', 'table']

    # WHATWG encoding spec: browsers silently remap these charsets.
    # https://encoding.spec.whatwg.org/#names-and-labels
    # Every browser treats "iso-8859-1" as "windows-1252": the two agree on
    # 0x00–0x7F but windows-1252 defines printable characters in 0x80–0x9F.
    # Matching browser behavior keeps decoded text identical to what readers see.
    WHATWG_CHARSET_MAP = {
        'iso-8859-1': 'windows-1252',
        'iso8859-1': 'windows-1252',
        'iso88591': 'windows-1252',
        'latin-1': 'windows-1252',
        'latin1': 'windows-1252',
        'us-ascii': 'windows-1252',
        'ascii': 'windows-1252',
        'iso-8859-9': 'windows-1254',
        'iso-8859-11': 'windows-874',
    }

    @staticmethod
    def detect_charset_from_bytes(raw_bytes: bytes) -> str:
        """
        Detect charset from raw HTML bytes by scanning the first 2048 bytes
        for <meta charset=...> or <meta http-equiv="Content-Type" content="...; charset=...">.

        Applies the WHATWG browser mapping (e.g. iso-8859-1 → windows-1252).
        Returns 'utf-8' when nothing usable is declared.
        """
        # Charset declarations must appear within the first 1024 bytes; 2048 for safety
        head_str = raw_bytes[:2048].decode('ascii', errors='ignore')

        charset = None

        # Modern form: <meta charset="...">
        m = re.search(r'<meta[^>]+charset=["\']?\s*([^\s"\';>]+)', head_str, re.IGNORECASE)
        if m:
            charset = m.group(1).strip().lower()

        # Legacy form: <meta http-equiv="Content-Type" content="...; charset=...">
        if not charset:
            m = re.search(
                r'<meta[^>]+content=["\'][^"\']*charset=([^\s"\';>]+)',
                head_str, re.IGNORECASE
            )
            if m:
                charset = m.group(1).strip().lower()

        if not charset:
            return 'utf-8'

        charset = Preprocessor.WHATWG_CHARSET_MAP.get(charset, charset)
        try:
            codecs.lookup(charset)
        except LookupError:
            logger.warning(f"Unknown charset '{charset}', decoding as utf-8")
            return 'utf-8'
        return charset

    def _sanitize_html(self, html: str) -> tuple[str, list[str]]:
        """
        Sanitize raw HTML string before parsing.

        Fixes common malformations at the string level so parsers
        don't choke on them.

        Returns:
            Tuple of (sanitized HTML, list of warnings)
        """
        warnings = []
        sanitized = html

        # NULL bytes crash many parsers and are never valid in text content
        if '\x00' in sanitized:
            sanitized = sanitized.replace('\x00', '')
            warnings.append("Removed NULL bytes")

        # Double angle brackets (e.g. <<p>>) appear in copy-paste corruption
        double_bracket_pattern = r'<{2,}(\/?[a-zA-Z][^>]*?)>{2,}'
        if re.search(double_bracket_pattern, sanitized):
            sanitized = re.sub(double_bracket_pattern, r'<\1>', sanitized)
            warnings.append("Fixed double angle brackets")

        # Double-equals in attributes (href=="/path") is a common CMS bug
        malformed_attr_pattern = r'(\w+)==(["\'])'
        if re.search(malformed_attr_pattern, sanitized):
            sanitized = re.sub(malformed_attr_pattern, r'\1=\2', sanitized)
            warnings.append("Fixed malformed attributes (double equals)")

        sanitized = sanitized.replace('\r\n', '\n').replace('\r', '\n')

        # Control characters (except tab/newline) corrupt text output
        control_chars = ''.join(chr(c) for c in range(32) if c not in (9, 10))
        if any(c in sanitized for c in control_chars):
            sanitized = sanitized.translate(str.maketrans('', '', control_chars))
            warnings.append("Removed control characters")

        logger.debug(f"Sanitization complete. {len(warnings)} fixes applied.")
        return sanitized, warnings

    def parse(self, html: str) -> BeautifulSoup:
        """
        Sanitize and parse an HTML document or fragment.

        Parser fallback chain: html5lib → lxml → html.parser.
        html5lib implements the WHATWG parsing algorithm and copes with the
        worst markup; lxml is fast and tolerant; html.parser is always there.
        """
        sanitized_html, warnings = self._sanitize_html(html)
        for warning in warnings:
            logger.debug(warning)

        try:
            return BeautifulSoup(sanitized_html, 'html5lib')
        except Exception as e:
            logger.warning(f"html5lib parsing failed, trying lxml: {e}")

        try:
            return BeautifulSoup(sanitized_html, 'lxml')
        except Exception as e:
            logger.warning(f"lxml parsing also failed: {e}")

        return BeautifulSoup(sanitized_html, 'html.parser')

    def purify(self, element: Tag) -> dict[str, int]:
        """
        Remove non-content descendants from an article element, in place.

        Must run before classification.  Removes script, style, form, video
        and table subtrees, and links whose href uses the javascript: scheme.

        Returns:
            Count of removed elements per tag name
        """
        removed = {}

        for link in element.find_all('a', href=True):
            if link.decomposed:
                continue
            if link['href'].strip().lower().startswith('javascript'):
                link.decompose()
                removed['a'] = removed.get('a', 0) + 1

        for tag in element.find_all(self.PURIFY_ELEMENTS):
            # Nested matches die with their ancestor
            if tag.decomposed:
                continue
            name = tag.name
            tag.decompose()
            removed[name] = removed.get(name, 0) + 1

        if removed:
            logger.debug(f"Purified: {removed}")
        return removed


def parse_html(html: str) -> BeautifulSoup:
    """Convenience function to parse HTML."""
    return Preprocessor().parse(html)


def purify(element: Tag) -> Tag:
    """Convenience function: purify an element and return it."""
    Preprocessor().purify(element)
    return element
