"""Protocol definitions for content conversion."""

from typing import Protocol

from bs4 import Tag

from ..dom.tree import DocumentTree
from ..models.document import RenderResult


class ContentSelector(Protocol):
    """
    Protocol for locating the main content of a document.

    Implementations must always return an element, falling back to the
    document root rather than returning None.
    """

    def select(self, tree: DocumentTree) -> Tag:
        """
        Select the main content element.

        Args:
            tree: Parsed document

        Returns:
            The content region element
        """
        ...


class MarkdownConverter(Protocol):
    """
    Protocol for rendering a content region to Markdown.

    Implementations must not modify the region they are given.
    """

    def render(self, region: Tag, base_url: str) -> RenderResult:
        """
        Render a content region.

        Args:
            region: The content region element
            base_url: URL for resolving relative links

        Returns:
            RenderResult with Markdown, headings and code blocks
        """
        ...
