"""Docsnap configuration, record and event models."""

from .config import (
    DocsnapConfig,
    ExportFormat,
    ExtractionConfig,
    NavigationConfig,
    NetworkConfig,
    OutputConfig,
)
from .document import CodeBlock, ExtractedDocument, Heading, PageLink, RenderResult
from .events import EventType, FetchEvent, FetchStats

__all__ = [
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
    "RenderResult",
    # Events
    "EventType",
    "FetchEvent",
    "FetchStats",
]
