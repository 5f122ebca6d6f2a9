"""Composed extraction: content region, Markdown and metadata for one page."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from ..conversion.markdown import MarkdownRenderer
from ..conversion.protocols import ContentSelector, MarkdownConverter
from ..conversion.region import ContentRegionSelector
from ..discovery.navigation import NavigationHarvester
from ..dom.tree import DocumentTree
from ..metadata import TitleResolver
from ..models.config import ExtractionConfig, NavigationConfig
from ..models.document import ExtractedDocument, PageLink

logger = logging.getLogger(__name__)


class ContentExtractor:
    """
    Extracts one page into an ExtractedDocument.

    Pure and synchronous: works on an already-parsed DocumentTree and
    never modifies it, so the same tree can be handed to the navigation
    harvester afterwards.

    Example:
        extractor = ContentExtractor()
        tree = DocumentTree.from_html(html, url)
        doc = extractor.extract(tree, tree.base_url, "Intro", url, datetime.now(timezone.utc))
        siblings = extractor.discover(tree, url)
    """

    def __init__(
        self,
        extraction: ExtractionConfig | None = None,
        navigation: NavigationConfig | None = None,
        selector: ContentSelector | None = None,
        renderer: MarkdownConverter | None = None,
    ):
        """
        Initialize the extractor.

        Args:
            extraction: Region selection and rendering settings
            navigation: Sibling page discovery settings
            selector: Content region selector (ContentRegionSelector if None)
            renderer: Markdown converter (MarkdownRenderer if None)
        """
        extraction = extraction or ExtractionConfig()
        self._selector: ContentSelector = selector or ContentRegionSelector(extraction)
        self._renderer: MarkdownConverter = renderer or MarkdownRenderer(extraction)
        self._harvester = NavigationHarvester(navigation)
        self._title_resolver = TitleResolver()

    def extract(
        self,
        tree: DocumentTree,
        base_url: str,
        title: str,
        current_url: str,
        now: datetime,
    ) -> ExtractedDocument:
        """
        Extract the main content of a document.

        Args:
            tree: Parsed document
            base_url: URL for resolving relative links and images
            title: Page title (see TitleResolver)
            current_url: URL recorded on the output document
            now: Extraction timestamp

        Returns:
            ExtractedDocument with Markdown, headings and code blocks
        """
        region = self._selector.select(tree)
        result = self._renderer.render(region, base_url)

        logger.debug(
            f"Extracted {current_url}: {len(result.content)} chars, "
            f"{len(result.headings)} headings, {len(result.code_blocks)} code blocks"
        )

        return ExtractedDocument(
            title=title,
            url=current_url,
            extracted_at=now,
            content=result.content,
            headings=result.headings,
            code_blocks=result.code_blocks,
        )

    def extract_page(self, tree: DocumentTree, now: datetime | None = None) -> ExtractedDocument:
        """
        Extract a document using its own URL and resolved title.

        Args:
            tree: Parsed document
            now: Extraction timestamp (defaults to the current UTC time)

        Returns:
            ExtractedDocument for the page
        """
        return self.extract(
            tree,
            tree.base_url,
            self._title_resolver.resolve(tree),
            tree.url,
            now or datetime.now(timezone.utc),
        )

    def discover(self, tree: DocumentTree, current_url: str | None = None) -> list[PageLink]:
        """
        Harvest sibling documentation pages from a document.

        Args:
            tree: Parsed document
            current_url: URL of the page (defaults to the tree's URL)

        Returns:
            List of PageLink (possibly empty)
        """
        return self._harvester.harvest(tree, current_url or tree.url)


def extract(
    tree: DocumentTree,
    base_url: str,
    title: str,
    current_url: str,
    now: datetime,
) -> ExtractedDocument:
    """Extract the main content of a document with default settings."""
    return ContentExtractor().extract(tree, base_url, title, current_url, now)
