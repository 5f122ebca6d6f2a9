"""Sibling documentation page discovery from navigation regions."""

import logging
from collections.abc import Iterable, Iterator
from typing import Optional

from bs4 import Tag
from soupsieve import SelectorSyntaxError

from ..dom.tree import DocumentTree, class_string
from ..models.config import NavigationConfig
from ..models.document import PageLink
from .filters import (
    SeenUrlTracker,
    absolutize_url,
    has_excluded_extension,
    has_fragment,
    is_same_origin,
    normalize_url,
)

logger = logging.getLogger(__name__)

LANDMARK_SELECTOR = 'nav, aside, [role="navigation"]'

# Site-wide chrome that should not be mistaken for a docs sidebar
SKIP_NAV_ROLES = frozenset({"banner", "contentinfo"})
SKIP_NAV_FRAGMENTS = ("header", "footer", "navbar", "top-nav", "main-nav")


def is_skippable_nav(element: Tag) -> bool:
    """
    Check whether a navigation landmark is site chrome (header/footer menus).

    Args:
        element: A nav, aside or role=navigation element

    Returns:
        True if the landmark should be ignored
    """
    role = str(element.get("role") or "").lower()
    if role in SKIP_NAV_ROLES:
        return True

    class_name = class_string(element).lower()
    element_id = str(element.get("id") or "").lower()
    if any(fragment in class_name or fragment in element_id for fragment in SKIP_NAV_FRAGMENTS):
        return True

    parent = element.parent
    if isinstance(parent, Tag):
        if parent.name in ("header", "footer"):
            return True
        if str(parent.get("role") or "").lower() in SKIP_NAV_ROLES:
            return True

    return False


class NavigationHarvester:
    """
    Discovers sibling documentation pages linked from navigation.

    Runs a cascade of strategies over the whole document, accumulating
    into one result list:

    1. Known sidebar selectors of common documentation generators
    2. Generic nav/aside landmarks (only if too few links so far)
    3. Lists dominated by same-origin links (only if still too few)

    Links are filtered to same-origin documents, deduplicated on their
    normalized URL, and flagged when they point at the current page.

    Example:
        harvester = NavigationHarvester()
        links = harvester.harvest(tree, "https://docs.example.com/guide/intro")
        for link in links:
            print(link.title, link.url, link.is_current_page)
    """

    def __init__(self, config: Optional[NavigationConfig] = None):
        """
        Initialize the harvester.

        Args:
            config: Navigation tuning (uses defaults if None)
        """
        self._config = config or NavigationConfig()

    def harvest(self, tree: DocumentTree, current_url: str) -> list[PageLink]:
        """
        Harvest sibling page links from a document.

        Args:
            tree: The document to scan (not just the content region)
            current_url: URL of the page the tree was loaded from

        Returns:
            Ordered, deduplicated list of PageLink (possibly empty)
        """
        links: list[PageLink] = []
        seen = SeenUrlTracker()
        current = normalize_url(current_url)

        def collect(anchors: Iterable[Tag]) -> int:
            before = len(links)
            for anchor in anchors:
                link = self._to_page_link(anchor, tree, current, seen)
                if link is not None:
                    links.append(link)
            return len(links) - before

        for selector, anchors in self._iter_sidebar_matches(tree):
            added = collect(anchors)
            logger.debug(f"Sidebar selector {selector!r} contributed {added} links")
            if len(links) > self._config.enough_links:
                break

        if len(links) < self._config.enough_links:
            for landmark in self._find_landmarks(tree):
                collect(landmark.find_all("a"))

        if len(links) < self._config.enough_links:
            for link_list in self._find_internal_link_lists(tree):
                collect(link_list.find_all("a"))

        logger.debug(f"Harvested {len(links)} navigation links from {current_url}")
        return links

    def _iter_sidebar_matches(self, tree: DocumentTree) -> Iterator[tuple[str, list[Tag]]]:
        for selector in self._config.sidebar_selectors:
            try:
                anchors = tree.select(selector)
            except (SelectorSyntaxError, NotImplementedError, ValueError) as e:
                logger.debug(f"Skipping sidebar selector {selector!r}: {e}")
                continue

            if len(anchors) > self._config.sidebar_min_links:
                yield selector, anchors

    def _find_landmarks(self, tree: DocumentTree) -> list[Tag]:
        landmarks = []
        for element in tree.select(LANDMARK_SELECTOR):
            if is_skippable_nav(element):
                continue
            if len(element.find_all("a")) > self._config.landmark_min_links:
                landmarks.append(element)
        return landmarks

    def _find_internal_link_lists(self, tree: DocumentTree) -> list[Tag]:
        lists = []
        for element in tree.iter_elements("ul", "ol"):
            anchors = [a for a in element.find_all("a") if a.get("href")]
            if not anchors:
                continue

            internal = sum(
                1 for a in anchors if is_same_origin(absolutize_url(str(a["href"]), tree.base_url), tree.origin)
            )
            if internal <= self._config.list_min_internal_links:
                continue
            if internal / len(anchors) > self._config.internal_link_ratio:
                lists.append(element)
        return lists

    def _to_page_link(
        self,
        anchor: Tag,
        tree: DocumentTree,
        current: str,
        seen: SeenUrlTracker,
    ) -> Optional[PageLink]:
        """Apply the link collection rules to one anchor."""
        raw_href = anchor.get("href")
        if not raw_href:
            return None

        title = anchor.get_text().strip()
        if len(title) < 2:
            return None

        href = absolutize_url(str(raw_href), tree.base_url)
        if not is_same_origin(href, tree.origin):
            return None

        normalized = normalize_url(href)

        # In-page jump on the current page
        if normalized == current and (str(raw_href).startswith("#") or has_fragment(href)):
            return None

        if has_excluded_extension(href, self._config.excluded_extensions):
            return None

        if not seen.add(href):
            return None

        return PageLink(title=title, url=href, is_current_page=normalized == current)


def harvest_navigation_links(
    tree: DocumentTree,
    current_url: str,
    config: Optional[NavigationConfig] = None,
) -> list[PageLink]:
    """Harvest sibling page links with the default harvester."""
    return NavigationHarvester(config).harvest(tree, current_url)
