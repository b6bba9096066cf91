"""
Rule-based content classification.

Turns a purified article element into an ordered list of content items
(quote, heading, link, video, image, text).

Pipeline position: after Preprocessor.purify(), before PostAssembler.
Input:  BeautifulSoup element holding the article body + the article URI
Output: list[ContentItem] in document order

How a pass works:
  The leaves of the subtree are visited in document order.  For each leaf the
  classifiers are tried in priority order: quote → heading → link → video →
  image → text.  Most classifiers first promote the leaf to a meaningful
  ancestor (the <blockquote>, <h2> or <a> around it) and claim that ancestor
  in the AttachmentMap.  Later leaves under an already claimed ancestor are
  duplicates and produce nothing, except for plain text, which is appended to
  the item already attached to its block.

  When a quote, heading or link is claimed, the nearest attached ancestor
  block is evicted from the map (unless it is itself a heading, quote or
  link), so text following the more specific item starts a new text item.
  Eviction never touches the output list: it is append-only.
"""

from typing import Optional

from bs4 import Tag

from .attachments import AttachmentMap, Claim, ClaimStatus
from .classifier import (
    has_text, heading_level, is_comment, is_formatting, is_image,
    is_picture_child, youtube_video_id,
)
from .document import DocumentTree
from .exceptions import UriEncodingError
from .logger import get_module_logger
from .resolver import Predicate, promote
from .schemas import (
    ContentItem, ExtractionSettings, HeadingItem, ImageItem, LinkItem,
    QuoteItem, TextItem, TextualItem, VideoItem, PROTECTED_KINDS,
)
from .utils import normalize_spaces, resolve_uri

logger = get_module_logger("pipeline")


class ClassificationPipeline:
    """Classifies article markup into content items."""

    def __init__(self, settings: Optional[ExtractionSettings] = None):
        self.settings = settings or ExtractionSettings()

    def classify(self, element: Tag, base_uri: str) -> list[ContentItem]:
        """
        Classify the descendants of an element.

        Args:
            element: Article body, already purified
            base_uri: Canonical article URI used to resolve relative links

        Returns:
            Content items in document order
        """
        tree = DocumentTree(element)
        items = _ClassificationPass(tree, base_uri, self.settings).run()
        logger.info(f"Classified {len(tree)} nodes into {len(items)} items")
        return items


class _ClassificationPass:
    """State of one classify() call.  Never reused across articles."""

    def __init__(self, tree: DocumentTree, base_uri: str, settings: ExtractionSettings):
        self.tree = tree
        self.base_uri = base_uri
        self.settings = settings
        self.attachments = AttachmentMap()

    def run(self) -> list[ContentItem]:
        items = []
        for index in self.tree.leaves():
            item = self._classify_node(index)
            if item is not None:
                items.append(item)
        return items

    def _classify_node(self, index: int) -> Optional[ContentItem]:
        searches = (
            self._search_quote,
            self._search_heading,
            self._search_link,
            self._search_video,
            self._search_image,
            self._search_text,
        )
        for search in searches:
            claim = search(index)
            if claim is None:
                continue
            if claim.status is ClaimStatus.CLAIMED:
                return claim.item
            logger.debug(f"Node {index} ({self.tree.name(index)}): {claim.status.value} "
                         f"in {search.__name__}")
            return None

        # A line break ends the current text block
        if self.tree.name(index) == 'br':
            self._evict_ancestors(self.tree.parent(index))
        return None

    # --- Classifiers, in priority order ---

    def _search_quote(self, index: int) -> Optional[Claim]:
        target = promote(self.tree, index, Predicate.QUOTE, self.settings.quote_depth)
        if target is None or not has_text(self.tree, target):
            return None

        item = QuoteItem(body=normalize_spaces(self.tree.text_content(target)))
        return self._claim(target, item)

    def _search_heading(self, index: int) -> Optional[Claim]:
        target = promote(self.tree, index, Predicate.HEADING, self.settings.heading_depth)
        if target is None or not has_text(self.tree, target):
            return None

        item = HeadingItem(
            body=normalize_spaces(self.tree.text_content(target)),
            level=heading_level(self.tree, target),
        )
        return self._claim(target, item)

    def _search_link(self, index: int) -> Optional[Claim]:
        if is_image(self.tree, index):
            return None

        target = promote(self.tree, index, Predicate.LINK, self.settings.link_depth)
        if target is None:
            return None

        href = self.tree.attr(target, 'href')
        try:
            url = resolve_uri(href, self.base_uri)
        except UriEncodingError as e:
            logger.warning(f"Skipping link '{href}': {e.message}")
            return None

        text = None
        if has_text(self.tree, target):
            text = normalize_spaces(self.tree.text_content(target))
        return self._claim(target, LinkItem(url=url, text=text))

    def _search_video(self, index: int) -> Optional[Claim]:
        target = promote(self.tree, index, Predicate.IFRAME, self.settings.video_depth)
        if target is None:
            return None
        if target in self.attachments:
            return Claim(ClaimStatus.DUPLICATE)

        video_id = youtube_video_id(self.tree.attr(target, 'src'))
        if video_id is None:
            return None
        return self._claim(target, VideoItem(platform_id=video_id), evict=False)

    def _search_image(self, index: int) -> Optional[Claim]:
        if not self.tree.is_element(index):
            return None

        # Anything inside a <picture> (its <source>s, its <img>) speaks for
        # the picture as a whole; the picture is claimed once
        picture = self.tree.parent(index) if is_picture_child(self.tree, index) else None
        if picture is None and not is_image(self.tree, index):
            return None

        src = self.tree.attr(index, 'src')
        if picture is not None:
            if picture in self.attachments:
                return Claim(ClaimStatus.DUPLICATE)
            img = self.tree.find_first(picture, 'img')
            if img is not None:
                src = self.tree.attr(img, 'src')

        src = src.strip()
        if not src or src.lower().startswith('data:'):
            return None

        try:
            url = resolve_uri(src, self.base_uri)
        except UriEncodingError as e:
            logger.warning(f"Skipping image '{src}': {e.message}")
            return None

        item = ImageItem(url=url, alt=self.tree.attr(index, 'alt') or None)
        # Bare images are not attached; repeated images are dropped later by
        # the assembler's lead-image check
        if picture is not None:
            self.attachments.attach(picture, item)
        return Claim(ClaimStatus.CLAIMED, item)

    def _search_text(self, index: int) -> Optional[Claim]:
        if is_comment(self.tree, index) or not has_text(self.tree, index):
            return None

        target = index
        if self.tree.is_text(index):
            promoted = promote(self.tree, index, Predicate.FORMATTING_ROOT,
                               self.settings.formatting_depth)
            target = promoted if promoted is not None else self.tree.parent(index)

        # Formatting tags never own a text item; their block does
        if is_formatting(self.tree, target) and self.tree.parent(target) is not None:
            target = self.tree.parent(target)

        text = normalize_spaces(self.tree.text_content(index))
        existing = self.attachments.get(target)
        if existing is not None:
            if isinstance(existing, TextualItem):
                existing.append(text)
                return Claim(ClaimStatus.MERGED)
            return Claim(ClaimStatus.DUPLICATE)

        item = TextItem(body=text)
        self.attachments.attach(target, item)
        return Claim(ClaimStatus.CLAIMED, item)

    # --- Attachment helpers ---

    def _claim(self, target: int, item: ContentItem, evict: bool = True) -> Claim:
        if self.attachments.attach(target, item) is ClaimStatus.DUPLICATE:
            return Claim(ClaimStatus.DUPLICATE)
        if evict:
            self._evict_ancestors(self.tree.parent(target))
        return Claim(ClaimStatus.CLAIMED, item)

    def _evict_ancestors(self, node: Optional[int]) -> None:
        """
        Detach the nearest attached ancestor, climbing at most eviction_depth
        levels.  Protected items (heading, quote, link) stay attached and end
        the climb.
        """
        depth = self.settings.eviction_depth
        while node is not None and depth > 0:
            item = self.attachments.get(node)
            if item is not None:
                if item.kind not in PROTECTED_KINDS:
                    self.attachments.detach(node)
                    logger.debug(f"Evicted {item.kind} item from node {node} ({self.tree.name(node)})")
                return
            node = self.tree.parent(node)
            depth -= 1


def classify(element: Tag, base_uri: str,
             settings: Optional[ExtractionSettings] = None) -> list[ContentItem]:
    """Convenience function to classify an article element."""
    return ClassificationPipeline(settings).classify(element, base_uri)
