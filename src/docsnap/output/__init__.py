"""Output formatting and file writing for docsnap."""

from .formatters import (
    extract_domain_name,
    format_as_json,
    format_as_markdown,
    format_batch_as_json,
    format_batch_as_markdown,
    sanitize_filename,
)
from .writer import DocumentWriter

__all__ = [
    "DocumentWriter",
    "extract_domain_name",
    "format_as_json",
    "format_as_markdown",
    "format_batch_as_json",
    "format_batch_as_markdown",
    "sanitize_filename",
]
