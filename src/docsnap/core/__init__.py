"""Extraction entry points for docsnap."""

from .batch import BatchExtractor, PageFetchError
from .extractor import ContentExtractor, extract

__all__ = [
    "BatchExtractor",
    "ContentExtractor",
    "PageFetchError",
    "extract",
]
