"""
Node → item attachment map for a single extraction pass.

The map records which tree node produced which content item.  It is the only
mutable state of a classification pass and is created fresh for every
classify() call.  Items are shared with the output list: detaching a node
drops the map reference only, the emitted item stays where it is.
"""

from enum import Enum
from typing import NamedTuple, Optional

from .schemas import ContentItem


class ClaimStatus(Enum):
    """Outcome of a classifier trying to claim a node."""
    CLAIMED = "claimed"        # New item attached and emitted
    DUPLICATE = "duplicate"    # Node already attached, nothing emitted
    MERGED = "merged"          # Node already attached, text appended to its item


class Claim(NamedTuple):
    status: ClaimStatus
    item: Optional[ContentItem] = None


class AttachmentMap:
    """One-to-one relation between node indices and content items."""

    def __init__(self):
        self._items: dict[int, ContentItem] = {}

    def __contains__(self, node: int) -> bool:
        return node in self._items

    def __len__(self) -> int:
        return len(self._items)

    def get(self, node: int) -> Optional[ContentItem]:
        return self._items.get(node)

    def attach(self, node: int, item: ContentItem) -> ClaimStatus:
        """Attach an item unless the node already carries one."""
        if node in self._items:
            return ClaimStatus.DUPLICATE
        self._items[node] = item
        return ClaimStatus.CLAIMED

    def detach(self, node: int) -> Optional[ContentItem]:
        return self._items.pop(node, None)
