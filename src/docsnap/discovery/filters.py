"""URL utilities shared by rendering and navigation discovery."""

import logging
from collections.abc import Iterable
from urllib.parse import urljoin, urlsplit, urlunsplit

logger = logging.getLogger(__name__)


def normalize_url(url: str) -> str:
    """
    Normalize a URL for deduplication.

    Removes the fragment and strips one trailing slash from paths longer
    than the root path. Malformed URLs are returned unchanged.

    Args:
        url: The URL to normalize

    Returns:
        Normalized URL string
    """
    try:
        parsed = urlsplit(url)
    except ValueError:
        return url

    path = parsed.path
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]

    return urlunsplit((parsed.scheme, parsed.netloc, path, parsed.query, ""))


def absolutize_url(href: str, base_url: str) -> str:
    """Resolve href against base_url; malformed input is returned unchanged."""
    try:
        return urljoin(base_url, href)
    except ValueError:
        return href


def get_origin(url: str) -> str:
    """
    Return the scheme://host[:port] origin of a URL.

    Args:
        url: The URL to inspect

    Returns:
        Lowercased origin, or an empty string if the URL has none
    """
    try:
        parsed = urlsplit(url)
    except ValueError:
        return ""
    if not parsed.scheme or not parsed.netloc:
        return ""
    return f"{parsed.scheme.lower()}://{parsed.netloc.lower()}"


def is_same_origin(url: str, origin: str) -> bool:
    """Check whether url belongs to the given origin."""
    return bool(origin) and get_origin(url) == origin


def has_fragment(url: str) -> bool:
    """Check whether url carries a #fragment."""
    try:
        return bool(urlsplit(url).fragment) or url.endswith("#")
    except ValueError:
        return "#" in url


def has_excluded_extension(url: str, extensions: Iterable[str]) -> bool:
    """
    Check whether the URL path ends with one of the given file extensions.

    Args:
        url: The URL to check
        extensions: Extensions including the dot, e.g. ".pdf"

    Returns:
        True if the path names an excluded file type
    """
    try:
        path = urlsplit(url).path.lower()
    except ValueError:
        path = url.lower()
    return any(path.endswith(ext.lower()) for ext in extensions)


class SeenUrlTracker:
    """
    Track seen URLs to prevent duplicates during discovery.

    Uses URL normalization for consistent comparison. A tracker is scoped
    to a single harvest; create a new one per call.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def add(self, url: str) -> bool:
        """
        Add a URL to the tracker.

        Args:
            url: The URL to add

        Returns:
            True if URL was new, False if already seen
        """
        normalized = normalize_url(url)
        if normalized in self._seen:
            return False
        self._seen.add(normalized)
        return True

    def __contains__(self, url: str) -> bool:
        """Check if URL has been seen."""
        return normalize_url(url) in self._seen

    def __len__(self) -> int:
        """Return number of unique URLs seen."""
        return len(self._seen)
