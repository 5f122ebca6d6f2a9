"""Page title resolution."""

import logging
from typing import Optional

from bs4 import Tag

from .dom.tree import DocumentTree

logger = logging.getLogger(__name__)


class TitleResolver:
    """
    Resolves a page title from document metadata.

    Priority: og:title meta tag, then the first <h1>, then <title>.

    Example:
        title = TitleResolver().resolve(tree)
    """

    def _og_title(self, tree: DocumentTree) -> Optional[str]:
        og_title = tree.soup.find("meta", property="og:title")
        if isinstance(og_title, Tag) and og_title.get("content"):
            return str(og_title["content"]).strip()
        return None

    def _document_title(self, tree: DocumentTree) -> str:
        title_tag = tree.soup.find("title")
        if isinstance(title_tag, Tag):
            return title_tag.get_text().strip()
        return ""

    def resolve(self, tree: DocumentTree) -> str:
        """
        Resolve the title of a document.

        Args:
            tree: Parsed document

        Returns:
            Page title (empty string if the document has none)
        """
        og_title = self._og_title(tree)
        if og_title:
            return og_title

        h1 = tree.soup.find("h1")
        if isinstance(h1, Tag):
            return h1.get_text().strip() or self._document_title(tree)

        return self._document_title(tree)
