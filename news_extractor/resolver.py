"""
Bounded ancestor promotion.

A bare text node is rarely the right attachment point.  Promotion walks up
from a node to the nearest ancestor that satisfies a predicate, so that all
text under one quote, heading, link or formatting chain produces a single
item instead of many fragments.
"""

from enum import Enum
from typing import Optional

from . import classifier
from .document import DocumentTree


class Predicate(Enum):
    """The closed set of tests promotion can search for."""
    QUOTE = "quote"
    HEADING = "heading"
    LINK = "link"
    IFRAME = "iframe"
    FORMATTING_ROOT = "formatting_root"

    def test(self, tree: DocumentTree, index: int) -> bool:
        return _PREDICATES[self](tree, index)


_PREDICATES = {
    Predicate.QUOTE: classifier.is_quote,
    Predicate.HEADING: classifier.is_heading,
    Predicate.LINK: classifier.is_link,
    Predicate.IFRAME: classifier.is_iframe,
    Predicate.FORMATTING_ROOT: classifier.is_formatting_root,
}


def promote(tree: DocumentTree, index: int, predicate: Predicate,
            max_depth: int) -> Optional[int]:
    """
    Return the node itself or the closest of its max_depth ancestors that
    satisfies the predicate, or None when there is none.
    """
    node = index
    depth = max_depth
    while True:
        if predicate.test(tree, node):
            return node
        parent = tree.parent(node)
        if depth <= 0 or parent is None:
            return None
        node = parent
        depth -= 1
