"""HTML to Markdown rendering of a content region."""

from __future__ import annotations

import copy
import logging
import re
from typing import Callable

from bs4 import Tag
from bs4.element import PageElement
from soupsieve import SelectorSyntaxError

from ..discovery.filters import absolutize_url
from ..dom.tree import is_text_node
from ..models.config import ExtractionConfig
from ..models.document import CodeBlock, Heading, RenderResult
from .language import detect_language
from .region import HEADING_TAGS

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_FENCED_BLOCK_RE = re.compile(r"(^```[^\n]*\n.*?\n```$)", re.MULTILINE | re.DOTALL)

# Handlers that never look at the recursively rendered children
_SELF_CONTAINED_TAGS = frozenset({"pre", "table", "ul", "ol", "img", "hr", "br", "script", "style", "noscript", "svg"})

TagHandler = Callable[[Tag, str, str], str]


def is_hidden(element: Tag) -> bool:
    """Check for the hidden attribute or aria-hidden="true"."""
    if element.has_attr("hidden"):
        return True
    return str(element.get("aria-hidden", "")).strip().lower() == "true"


def clean_markdown(markdown: str) -> str:
    """
    Strip trailing whitespace per line and collapse runs of blank lines.

    Fenced code blocks are copied through untouched, so the content keeps
    the same code text as the collected CodeBlock records.
    """
    parts = _FENCED_BLOCK_RE.split(markdown)
    # Even indexes are prose, odd indexes are captured fences
    for index in range(0, len(parts), 2):
        prose = "\n".join(line.rstrip() for line in parts[index].split("\n"))
        parts[index] = _EXCESS_NEWLINES_RE.sub("\n\n", prose)
    return "".join(parts).strip()


class MarkdownRenderer:
    """
    Converts a content region into Markdown.

    Works on a private copy of the region: disallowed elements (scripts,
    navigation, ads, ...) are removed from the copy, never from the
    caller's tree. Rendering is a depth-first walk where each element
    is rendered from its tag, its attributes and its children's output.
    Tags without a handler pass their children through unchanged.

    Headings and code blocks are collected from the same cleaned copy.

    Example:
        renderer = MarkdownRenderer()
        result = renderer.render(region, "https://docs.example.com/guide")
        print(result.content)
    """

    def __init__(self, config: ExtractionConfig | None = None):
        """
        Initialize the renderer.

        Args:
            config: Extraction settings (uses defaults if None)
        """
        self._config = config or ExtractionConfig()

        self._handlers: dict[str, TagHandler] = {
            "p": self._render_paragraph,
            "br": self._render_line_break,
            "strong": self._render_strong,
            "b": self._render_strong,
            "em": self._render_emphasis,
            "i": self._render_emphasis,
            "code": self._render_code,
            "pre": self._render_pre,
            "a": self._render_link,
            "ul": self._render_list,
            "ol": self._render_list,
            "blockquote": self._render_blockquote,
            "table": self._render_table,
            "img": self._render_image,
            "hr": self._render_rule,
            "script": self._render_nothing,
            "style": self._render_nothing,
            "noscript": self._render_nothing,
            "svg": self._render_nothing,
        }
        for name in HEADING_TAGS:
            self._handlers[name] = self._render_heading

    def prepare(self, region: Tag) -> Tag:
        """
        Copy a region and strip disallowed descendants from the copy.

        Args:
            region: Element from the caller's tree (left untouched)

        Returns:
            Detached, cleaned copy of the region
        """
        clone = copy.copy(region)

        for selector in self._config.remove_selectors:
            try:
                matches = clone.select(selector)
            except (SelectorSyntaxError, NotImplementedError, ValueError) as e:
                logger.debug(f"Skipping remove selector {selector!r}: {e}")
                continue
            for element in matches:
                # Nested matches die with their ancestor
                if not element.decomposed:
                    element.decompose()

        return clone

    def render(self, region: Tag, base_url: str) -> RenderResult:
        """
        Render a content region to Markdown.

        Args:
            region: The content region element
            base_url: URL for resolving relative links and images

        Returns:
            RenderResult with Markdown content, headings and code blocks
        """
        clone = self.prepare(region)
        content = clean_markdown(self.render_node(clone, base_url))

        return RenderResult(
            content=content,
            headings=self.collect_headings(clone),
            code_blocks=self.collect_code_blocks(clone),
        )

    def render_node(self, node: PageElement, base_url: str) -> str:
        """
        Render one node and its subtree without final cleanup.

        Args:
            node: Element or text node
            base_url: URL for resolving relative links and images

        Returns:
            Markdown fragment
        """
        if is_text_node(node):
            return _WHITESPACE_RE.sub(" ", str(node))

        if not isinstance(node, Tag):
            return ""

        if is_hidden(node):
            return ""

        name = (node.name or "").lower()
        if name in _SELF_CONTAINED_TAGS:
            children = ""
        else:
            children = "".join(self.render_node(child, base_url) for child in node.children)

        handler = self._handlers.get(name)
        if handler is None:
            return children
        return handler(node, children, base_url)

    # Tag handlers

    def _render_heading(self, element: Tag, children: str, base_url: str) -> str:
        level = int(element.name[1])
        return f"\n\n{'#' * level} {children.strip()}\n\n"

    def _render_paragraph(self, element: Tag, children: str, base_url: str) -> str:
        return f"\n\n{children.strip()}\n\n"

    def _render_line_break(self, element: Tag, children: str, base_url: str) -> str:
        return "\n"

    def _render_strong(self, element: Tag, children: str, base_url: str) -> str:
        return f"**{children.strip()}**"

    def _render_emphasis(self, element: Tag, children: str, base_url: str) -> str:
        return f"*{children.strip()}*"

    def _render_code(self, element: Tag, children: str, base_url: str) -> str:
        parent = element.parent
        if parent is not None and parent.name == "pre":
            return children
        return f"`{children.strip()}`"

    def _render_pre(self, element: Tag, children: str, base_url: str) -> str:
        code_element = element.find("code") or element
        language = detect_language(code_element.get("class"))
        code = code_element.get_text().strip()
        return f"\n\n```{language}\n{code}\n```\n\n"

    def _render_link(self, element: Tag, children: str, base_url: str) -> str:
        href = element.get("href")
        text = children.strip()
        if href and text:
            return f"[{text}]({absolutize_url(str(href), base_url)})"
        return text

    def _render_list(self, element: Tag, children: str, base_url: str) -> str:
        ordered = element.name == "ol"
        items = [child for child in element.children if isinstance(child, Tag) and child.name == "li"]

        lines = []
        for index, item in enumerate(items, start=1):
            prefix = f"{index}. " if ordered else "- "
            lines.append(prefix + self.render_node(item, base_url).strip())

        return "\n\n" + "\n".join(lines) + "\n\n"

    def _render_blockquote(self, element: Tag, children: str, base_url: str) -> str:
        lines = "\n".join(f"> {line}" for line in children.strip().split("\n"))
        return f"\n\n{lines}\n\n"

    def _render_table(self, element: Tag, children: str, base_url: str) -> str:
        rows = element.find_all("tr")
        if not rows:
            return ""

        lines: list[str] = []
        header_emitted = False

        for index, row in enumerate(rows):
            cells = row.find_all(["th", "td"])
            texts = [" ".join(cell.get_text().split()) for cell in cells]
            lines.append("| " + " | ".join(texts) + " |")

            # Exactly one separator, after the first header-like row
            if not header_emitted and (index == 0 or row.find("th") is not None):
                lines.append("| " + " | ".join("---" for _ in texts) + " |")
                header_emitted = True

        return "\n\n" + "\n".join(lines) + "\n\n"

    def _render_image(self, element: Tag, children: str, base_url: str) -> str:
        src = element.get("src")
        if not src:
            return ""
        alt = element.get("alt") or "image"
        return f"![{alt}]({absolutize_url(str(src), base_url)})"

    def _render_rule(self, element: Tag, children: str, base_url: str) -> str:
        return "\n\n---\n\n"

    def _render_nothing(self, element: Tag, children: str, base_url: str) -> str:
        return ""

    # Side collections

    def collect_headings(self, region: Tag) -> list[Heading]:
        """
        Collect h1-h6 elements in document order.

        Args:
            region: Cleaned region copy

        Returns:
            Headings with level, trimmed text and id (when present)
        """
        headings = []
        for element in region.find_all(HEADING_TAGS):
            element_id = element.get("id")
            headings.append(
                Heading(
                    level=int(element.name[1]),
                    text=element.get_text().strip(),
                    id=str(element_id) if element_id else None,
                )
            )
        return headings

    def collect_code_blocks(self, region: Tag) -> list[CodeBlock]:
        """
        Collect one code block per pre/code pairing in document order.

        Args:
            region: Cleaned region copy

        Returns:
            Non-empty code blocks with detected languages
        """
        blocks = []
        for pre in region.find_all("pre"):
            code_element = pre.find("code") or pre
            code = code_element.get_text().strip()
            if code:
                blocks.append(CodeBlock(language=detect_language(code_element.get("class")), code=code))
        return blocks


def render_to_markdown(region: Tag, base_url: str, config: ExtractionConfig | None = None) -> RenderResult:
    """Render a content region to Markdown with the default renderer."""
    return MarkdownRenderer(config).render(region, base_url)
