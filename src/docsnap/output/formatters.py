"""Serialization of extracted documents to Markdown and JSON."""

import json
import re
from urllib.parse import urlparse

from ..models.document import ExtractedDocument

# Subdomains that say nothing about which product the docs belong to
_GENERIC_SUBDOMAINS = ("www.", "docs.", "api.", "developer.", "dev.")

DEFAULT_FOLDER = "extracted"
DEFAULT_FILENAME = "untitled"


def format_as_markdown(doc: ExtractedDocument) -> str:
    """
    Render a document as Markdown with a provenance header.

    Args:
        doc: The extracted document

    Returns:
        Markdown text: title heading, source/extracted block, then content
    """
    extracted_at = doc.to_dict()["extractedAt"]
    return f"# {doc.title}\n\n> **Source:** {doc.url}\n> **Extracted:** {extracted_at}\n\n{doc.content}\n"


def format_as_json(doc: ExtractedDocument) -> str:
    """Serialize a document to pretty-printed JSON with wire field names."""
    return json.dumps(doc.to_dict(), indent=2, ensure_ascii=False)


def format_batch_as_markdown(docs: list[ExtractedDocument]) -> str:
    """Join several documents into one Markdown text separated by rules."""
    return "\n---\n\n".join(format_as_markdown(doc) for doc in docs)


def format_batch_as_json(docs: list[ExtractedDocument]) -> str:
    """Serialize several documents to a pretty-printed JSON array."""
    return json.dumps([doc.to_dict() for doc in docs], indent=2, ensure_ascii=False)


def sanitize_filename(name: str, max_length: int = 50) -> str:
    """
    Turn a page title into a safe file stem.

    Args:
        name: Page title
        max_length: Maximum stem length

    Returns:
        Lowercase stem made of [a-z0-9_]
    """
    stem = re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")
    return stem[:max_length] or DEFAULT_FILENAME


def extract_domain_name(url: str) -> str:
    """
    Derive a short folder name from a URL's host.

    "https://docs.python.org/3/" becomes "python".

    Args:
        url: Page URL

    Returns:
        Folder name made of [a-z0-9-], at most 30 characters
    """
    try:
        hostname = urlparse(url).hostname or ""
    except ValueError:
        return DEFAULT_FOLDER

    for prefix in _GENERIC_SUBDOMAINS:
        if hostname.startswith(prefix):
            hostname = hostname[len(prefix) :]

    parts = hostname.split(".")
    if len(parts) >= 2:
        hostname = parts[0]

    domain = re.sub(r"[^a-z0-9-]", "", hostname.lower())[:30]
    return domain or DEFAULT_FOLDER
