"""Content conversion for docsnap (region selection, HTML to Markdown)."""

from .language import detect_language
from .markdown import MarkdownRenderer, render_to_markdown
from .protocols import ContentSelector, MarkdownConverter
from .region import ContentRegionSelector, is_skippable_element, select_content_region

__all__ = [
    # Protocols
    "ContentSelector",
    "MarkdownConverter",
    # Implementations
    "ContentRegionSelector",
    "MarkdownRenderer",
    # Functions
    "detect_language",
    "is_skippable_element",
    "render_to_markdown",
    "select_content_region",
]
