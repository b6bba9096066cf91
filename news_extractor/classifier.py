"""
Node classification predicates.

Pure functions over a DocumentTree index.  They answer "is this node of kind
K" and never consult the attachment map; deciding *which* node an item
attaches to is the pipeline's job.
"""

import re
from typing import Optional
from urllib.parse import urlsplit

from .document import DocumentTree, COMMENT_NODE
from .utils import is_blank, ALLOWED_SCHEMES

# --- Lookup tables (data, not behavior) ---

QUOTE_TAGS = frozenset({'q', 'blockquote'})

HEADING_LEVELS = {'h1': 1, 'h2': 2, 'h3': 3, 'h4': 4, 'h5': 5, 'h6': 6}

# Inline tags whose text belongs to the enclosing block.  'a' is listed so
# that text inside a link that failed link classification still merges into
# its paragraph.
FORMATTING_TAGS = frozenset({'strong', 'b', 'span', 's', 'i', 'a', 'em'})

IMAGE_TAGS = frozenset({'img', 'amp-img'})

# youtu.be/ID, youtube.com/watch?...v=ID, youtube.com/embed/ID, youtube.com/v/ID
YOUTUBE_ID_PATTERN = re.compile(
    r'(youtu\.be/|youtube\.com/(watch\?(.*&)?v=|(embed|v)/))([A-Za-z0-9_-]{11})',
    re.IGNORECASE
)


def has_text(tree: DocumentTree, index: int) -> bool:
    return not is_blank(tree.text_content(index))


def is_quote(tree: DocumentTree, index: int) -> bool:
    return tree.name(index) in QUOTE_TAGS


def heading_level(tree: DocumentTree, index: int) -> Optional[int]:
    return HEADING_LEVELS.get(tree.name(index))


def is_heading(tree: DocumentTree, index: int) -> bool:
    return heading_level(tree, index) is not None


def is_link(tree: DocumentTree, index: int) -> bool:
    """An anchor with a non-empty href whose scheme, if any, is http(s)."""
    if tree.name(index) != 'a':
        return False

    href = tree.attr(index, 'href')
    if not href:
        return False

    try:
        scheme = urlsplit(href.strip()).scheme
    except ValueError:
        return False
    return not scheme or scheme.lower() in ALLOWED_SCHEMES


def is_image(tree: DocumentTree, index: int) -> bool:
    return tree.name(index) in IMAGE_TAGS


def is_picture_child(tree: DocumentTree, index: int) -> bool:
    """Any node sitting directly inside a <picture> wrapper."""
    parent = tree.parent(index)
    return parent is not None and tree.name(parent) == 'picture'


def is_iframe(tree: DocumentTree, index: int) -> bool:
    return tree.name(index) == 'iframe'


def is_formatting(tree: DocumentTree, index: int) -> bool:
    return tree.name(index) in FORMATTING_TAGS


def is_formatting_root(tree: DocumentTree, index: int) -> bool:
    """The outermost tag of a chain of nested formatting tags."""
    parent = tree.parent(index)
    if parent is not None and is_formatting(tree, parent):
        return False
    return is_formatting(tree, index)


def is_comment(tree: DocumentTree, index: int) -> bool:
    return tree.name(index) == COMMENT_NODE


def youtube_video_id(src: str) -> Optional[str]:
    match = YOUTUBE_ID_PATTERN.search(src)
    return match.group(5) if match else None
