"""Main content region detection."""

import logging
from typing import Optional

from bs4 import Tag
from soupsieve import SelectorSyntaxError

from ..dom.tree import DocumentTree, class_string, word_count
from ..models.config import ExtractionConfig

logger = logging.getLogger(__name__)

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

# Page chrome never considered as main content
SKIP_TAGS = frozenset({"nav", "header", "footer", "aside"})
SKIP_ROLES = frozenset({"navigation", "banner", "contentinfo", "complementary"})
SKIP_CLASS_FRAGMENTS = (
    "nav",
    "navigation",
    "sidebar",
    "footer",
    "header",
    "menu",
    "toc",
    "table-of-contents",
    "ad",
    "advertisement",
    "cookie",
    "popup",
    "modal",
)


def is_skippable_element(element: Tag) -> bool:
    """
    Check whether an element looks like page chrome rather than content.

    Matches chrome tags, landmark roles, and class/id values containing
    navigation, sidebar, ad or overlay idioms.

    Args:
        element: The element to check

    Returns:
        True if the element should be skipped
    """
    if element.name in SKIP_TAGS:
        return True

    role = element.get("role")
    if role and str(role).lower() in SKIP_ROLES:
        return True

    class_name = class_string(element).lower()
    element_id = str(element.get("id") or "").lower()
    return any(fragment in class_name or fragment in element_id for fragment in SKIP_CLASS_FRAGMENTS)


class ContentRegionSelector:
    """
    Finds the element that best represents the main content of a page.

    Tries well-known content selectors first, then falls back to a
    text-density score over div/section containers, and finally to the
    document root. Always returns an element.

    Example:
        selector = ContentRegionSelector()
        region = selector.select(tree)
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        """
        Initialize the selector.

        Args:
            config: Extraction tuning (uses defaults if None)
        """
        self._config = config or ExtractionConfig()

    def _has_substantial_content(self, element: Tag) -> bool:
        return word_count(element) > self._config.min_content_words

    def _match_known_selectors(self, tree: DocumentTree) -> Optional[Tag]:
        for selector in self._config.content_selectors:
            try:
                element = tree.select_one(selector)
            except (SelectorSyntaxError, NotImplementedError, ValueError) as e:
                logger.debug(f"Skipping content selector {selector!r}: {e}")
                continue
            if element is not None and self._has_substantial_content(element):
                logger.debug(f"Content region matched selector {selector!r}")
                return element
        return None

    def density_score(self, element: Tag) -> int:
        """
        Score an element by how much readable content it holds.

        Args:
            element: Candidate container

        Returns:
            words + paragraph_weight * paragraphs + heading_weight * headings
        """
        paragraphs = len(element.find_all("p"))
        headings = len(element.find_all(HEADING_TAGS))
        return (
            word_count(element)
            + paragraphs * self._config.paragraph_weight
            + headings * self._config.heading_weight
        )

    def _find_densest_container(self, tree: DocumentTree) -> Optional[Tag]:
        best: Optional[Tag] = None
        max_score = 0

        for element in tree.iter_elements("div", "section"):
            if is_skippable_element(element):
                continue
            score = self.density_score(element)
            # Strictly greater: ties keep the earlier element
            if score > max_score:
                max_score = score
                best = element

        if best is not None:
            logger.debug(f"Content region chosen by density score {max_score}")
        return best

    def select(self, tree: DocumentTree) -> Tag:
        """
        Select the main content element.

        Args:
            tree: The document to search

        Returns:
            The content region (the document root if nothing better is found)
        """
        element = self._match_known_selectors(tree)
        if element is not None:
            return element

        element = self._find_densest_container(tree)
        if element is not None:
            return element

        logger.debug(f"No content region found for {tree.url}, using document root")
        return tree.root


def select_content_region(tree: DocumentTree, config: Optional[ExtractionConfig] = None) -> Tag:
    """Select the main content element of a document."""
    return ContentRegionSelector(config).select(tree)
