"""Protocol definitions for HTTP client abstraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class HttpResponse:
    """
    Immutable HTTP response returned by HttpClient.

    Attributes:
        status_code: HTTP status code (200, 404, etc.)
        content: Raw response content as bytes
        content_type: Content-Type header value
        url: Final URL after any redirects
    """

    status_code: int
    content: bytes
    content_type: str
    url: str

    @property
    def is_html(self) -> bool:
        """Check whether the response declares an HTML content type."""
        content_type = self.content_type.lower()
        return "text/html" in content_type or "application/xhtml" in content_type


class HttpClient(Protocol):
    """
    Protocol for HTTP clients.

    Lets the batch extractor run against test doubles or other backends.
    """

    async def get(
        self,
        url: str,
        *,
        timeout: float | None = None,
    ) -> HttpResponse:
        """
        Perform an HTTP GET request.

        Args:
            url: The URL to fetch
            timeout: Request timeout in seconds

        Returns:
            HttpResponse with status, content and content type

        Raises:
            Exception on network errors (after retries exhausted)
        """
        ...
