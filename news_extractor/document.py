"""
Read-only arena view of a BeautifulSoup subtree.

Every node of the subtree gets a stable integer index in document order
(pre-order), index 0 being the subtree root.  The classification pipeline
addresses nodes only through these indices, so the attachment map is a plain
index → item table and no BeautifulSoup object is ever mutated or hashed.

Because the arena is pre-order, the descendants of node i occupy the
contiguous index range [i + 1, end(i)).  Text content and leaf iteration are
computed from that range without recursion.
"""

from typing import Iterator, Optional

from bs4 import Comment, Declaration, Doctype, ProcessingInstruction, Tag

TEXT_NODE = "#text"
COMMENT_NODE = "#comment"

# String subclasses that carry no visible text
NON_CONTENT_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


class DocumentTree:
    """Index-addressed snapshot of an element and all of its descendants."""

    def __init__(self, root: Tag):
        self._names: list[str] = []
        self._attrs: list[dict] = []
        self._strings: list[str] = []
        self._parents: list[Optional[int]] = []
        self._children: list[list[int]] = []
        self._text_cache: dict[int, str] = {}

        positions = {id(root): self._add(root, None)}

        # .descendants is a flat generator in document order, so parents are
        # always registered before their children
        for element in root.descendants:
            parent_index = positions[id(element.parent)]
            index = self._add(element, parent_index)
            self._children[parent_index].append(index)
            if isinstance(element, Tag):
                positions[id(element)] = index

        # Subtree end offsets, children before parents
        self._ends = [0] * len(self._names)
        for index in range(len(self._names) - 1, -1, -1):
            children = self._children[index]
            self._ends[index] = self._ends[children[-1]] if children else index + 1

    def _add(self, element, parent: Optional[int]) -> int:
        if isinstance(element, Tag):
            name = element.name.lower()
            attrs = dict(element.attrs)
            string = ""
        elif isinstance(element, NON_CONTENT_STRINGS):
            name, attrs, string = COMMENT_NODE, {}, ""
        else:
            name, attrs, string = TEXT_NODE, {}, str(element)

        self._names.append(name)
        self._attrs.append(attrs)
        self._strings.append(string)
        self._parents.append(parent)
        self._children.append([])
        return len(self._names) - 1

    def __len__(self) -> int:
        return len(self._names)

    def name(self, index: int) -> str:
        """Tag name, or '#text' / '#comment' for character data."""
        return self._names[index]

    def is_element(self, index: int) -> bool:
        return not self._names[index].startswith('#')

    def is_text(self, index: int) -> bool:
        return self._names[index] == TEXT_NODE

    def attr(self, index: int, name: str) -> str:
        """Attribute value, '' when absent.  Multi-valued attributes are space-joined."""
        value = self._attrs[index].get(name, '')
        if isinstance(value, list):
            return ' '.join(value)
        return value

    def parent(self, index: int) -> Optional[int]:
        return self._parents[index]

    def children(self, index: int) -> list[int]:
        return self._children[index]

    def descendants(self, index: int) -> range:
        return range(index + 1, self._ends[index])

    def text_content(self, index: int) -> str:
        """Concatenated text of the node and all descendant text nodes (no comments)."""
        if self._names[index] == TEXT_NODE:
            return self._strings[index]
        if index not in self._text_cache:
            self._text_cache[index] = ''.join(
                self._strings[i] for i in self.descendants(index)
                if self._names[i] == TEXT_NODE
            )
        return self._text_cache[index]

    def find_first(self, index: int, name: str) -> Optional[int]:
        """First descendant element with the given tag name."""
        for i in self.descendants(index):
            if self._names[i] == name:
                return i
        return None

    def leaves(self) -> Iterator[int]:
        """Childless nodes below the root, in document order."""
        for index in range(1, len(self._names)):
            if not self._children[index]:
                yield index
