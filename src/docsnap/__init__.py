"""
docsnap - Extract the main content of documentation pages as Markdown.

Usage:
    from docsnap import ContentExtractor, DocumentTree

    tree = DocumentTree.from_html(html, "https://docs.example.com/intro")
    extractor = ContentExtractor()

    doc = extractor.extract_page(tree)
    print(doc.content)

    for link in extractor.discover(tree):
        print(link.title, link.url)
"""

__version__ = "1.0.0"

from .core.batch import BatchExtractor, PageFetchError
from .core.extractor import ContentExtractor, extract
from .dom.tree import DocumentTree
from .metadata import TitleResolver
from .models.config import (
    DocsnapConfig,
    ExportFormat,
    ExtractionConfig,
    NavigationConfig,
    NetworkConfig,
    OutputConfig,
)
from .models.document import CodeBlock, ExtractedDocument, Heading, PageLink
from .models.events import EventType, FetchEvent, FetchStats

__all__ = [
    "__version__",
    # Core
    "BatchExtractor",
    "ContentExtractor",
    "DocumentTree",
    "PageFetchError",
    "TitleResolver",
    "extract",
    # Config
    "DocsnapConfig",
    "ExportFormat",
    "ExtractionConfig",
    "NavigationConfig",
    "NetworkConfig",
    "OutputConfig",
    # Records
    "CodeBlock",
    "ExtractedDocument",
    "Heading",
    "PageLink",
    # Events
    "EventType",
    "FetchEvent",
    "FetchStats",
]
