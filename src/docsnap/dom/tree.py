"""Read-only document tree access over BeautifulSoup."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from ..discovery.filters import absolutize_url, get_origin

logger = logging.getLogger(__name__)

_CHARSET_RE = re.compile(r'charset=["\']?([^"\'\s>/;]+)', re.IGNORECASE)


def detect_encoding(html: bytes) -> str:
    """Detect character encoding from a meta charset in the document head."""
    head = html[:2048].decode("latin-1", errors="ignore")
    match = _CHARSET_RE.search(head)
    if match:
        return match.group(1).strip()
    return "utf-8"


def parse_html(html: bytes | str) -> BeautifulSoup:
    """Parse HTML bytes or text to BeautifulSoup."""
    if isinstance(html, bytes):
        encoding = detect_encoding(html)
        try:
            html = html.decode(encoding, errors="replace")
        except LookupError:
            logger.debug(f"Unknown encoding {encoding!r}, falling back to utf-8")
            html = html.decode("utf-8", errors="replace")
    return BeautifulSoup(html, "html.parser")


def is_text_node(node: object) -> bool:
    """True for visible text strings (not comments, doctype or CDATA-like strings)."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def text_content(element: Tag) -> str:
    """Concatenated text of an element and all its descendants."""
    return element.get_text()


def word_count(element: Tag) -> int:
    """Number of whitespace-separated words in an element's text."""
    return len(text_content(element).split())


def class_string(element: Tag) -> str:
    """The element's class attribute as a single space-separated string."""
    classes = element.get("class")
    if classes is None:
        return ""
    if isinstance(classes, str):
        return classes
    return " ".join(classes)


class DocumentTree:
    """
    A parsed document plus the URLs needed to resolve and classify its links.

    The engine only reads from the tree. Anything that needs to mutate
    (element removal before rendering) works on a copy.

    Example:
        tree = DocumentTree.from_html(html_bytes, "https://docs.example.com/guide/")
        region = select_content_region(tree)
    """

    def __init__(self, soup: BeautifulSoup, url: str):
        """
        Initialize the tree.

        Args:
            soup: Parsed document
            url: URL the document was loaded from
        """
        self._soup = soup
        self._url = url
        self._base_url = self._resolve_base_url(soup, url)
        self._origin = get_origin(url)

    @classmethod
    def from_html(cls, html: bytes | str, url: str) -> DocumentTree:
        """
        Build a tree from raw HTML.

        Args:
            html: Raw HTML bytes (encoding detected) or decoded text
            url: URL the document was loaded from

        Returns:
            DocumentTree for the document
        """
        return cls(parse_html(html), url)

    @staticmethod
    def _resolve_base_url(soup: BeautifulSoup, url: str) -> str:
        base = soup.find("base", href=True)
        if isinstance(base, Tag):
            return absolutize_url(str(base["href"]), url)
        return url

    @property
    def soup(self) -> BeautifulSoup:
        """The underlying BeautifulSoup document."""
        return self._soup

    @property
    def url(self) -> str:
        """URL the document was loaded from."""
        return self._url

    @property
    def base_url(self) -> str:
        """Base URL for resolving relative hrefs and srcs."""
        return self._base_url

    @property
    def origin(self) -> str:
        """Scheme and host of the document, used to classify links as internal."""
        return self._origin

    @property
    def root(self) -> Tag:
        """The body element, or the whole document when there is no body."""
        body = self._soup.find("body")
        if isinstance(body, Tag):
            return body
        return self._soup

    def select(self, selector: str) -> list[Tag]:
        """All elements matching a CSS selector, in document order."""
        return self._soup.select(selector)

    def select_one(self, selector: str) -> Tag | None:
        """First element matching a CSS selector."""
        return self._soup.select_one(selector)

    def iter_elements(self, *names: str) -> Iterator[Tag]:
        """Elements with any of the given tag names, in document order."""
        for element in self._soup.find_all(list(names)):
            if isinstance(element, Tag):
                yield element
