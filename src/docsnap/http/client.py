"""Async HTTP client that acquires documentation pages politely."""

from __future__ import annotations

import asyncio
import logging
import random
from types import TracebackType
from typing import Optional

import aiohttp

from ..models.config import NetworkConfig
from .protocols import HttpResponse
from .rate_limiter import PerHostRateLimiter

logger = logging.getLogger(__name__)

# Pages are HTML; anything else is still accepted so the caller can report it
HTML_ACCEPT = "text/html,application/xhtml+xml;q=0.9,*/*;q=0.5"


def parse_retry_after(value: Optional[str], max_wait: float = 60.0) -> Optional[float]:
    """
    Read a Retry-After header given in seconds.

    HTTP-date values and garbage return None; waits are capped at max_wait.
    """
    if not value or not value.strip().isdigit():
        return None
    return min(float(value.strip()), max_wait)


class AsyncHttpClient:
    """
    Fetches documentation pages for extraction.

    Requests ask for HTML and go through a PerHostRateLimiter. 429 and 5xx
    answers and dropped connections are retried with exponential backoff;
    a Retry-After in seconds also defers the whole host. Bodies larger
    than max_content_size are refused.

    Example:
        client = AsyncHttpClient(rate_limiter=PerHostRateLimiter(default_delay=0.5))

        async with client:
            response = await client.get("https://example.com")
            print(response.content.decode())
    """

    # Status codes that warrant a retry
    RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

    # Exceptions that warrant a retry
    RETRYABLE_EXCEPTIONS = (
        aiohttp.ClientConnectionError,
        asyncio.TimeoutError,
        ConnectionError,
    )

    def __init__(
        self,
        rate_limiter: PerHostRateLimiter | None = None,
        max_retries: int = 3,
        retry_base_delay: float = 1.0,
        max_content_size: int = 20 * 1024 * 1024,
        user_agent: str | None = None,
        default_timeout: float = 30.0,
    ) -> None:
        """
        Initialize the HTTP client.

        Args:
            rate_limiter: Per-host rate limiter (a 0.5s limiter if None)
            max_retries: Maximum retry attempts for failed requests
            retry_base_delay: Base delay for exponential backoff (seconds)
            max_content_size: Maximum response size in bytes
            user_agent: Custom User-Agent string
            default_timeout: Default request timeout in seconds
        """
        self._rate_limiter = rate_limiter or PerHostRateLimiter()
        self._max_retries = max_retries
        self._retry_base_delay = retry_base_delay
        self._max_content_size = max_content_size
        self._default_timeout = default_timeout

        if user_agent is None:
            user_agent = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (docsnap/1.0)"
        self._user_agent = user_agent

        self._session: aiohttp.ClientSession | None = None

    @classmethod
    def from_config(cls, network: NetworkConfig) -> AsyncHttpClient:
        """Build a client from the network section of a DocsnapConfig."""
        return cls(
            rate_limiter=PerHostRateLimiter(network.rate_limit, host_delays=network.host_rate_limits),
            max_retries=network.max_retries,
            max_content_size=network.max_page_bytes,
            user_agent=network.user_agent,
            default_timeout=network.timeout,
        )

    async def __aenter__(self) -> AsyncHttpClient:
        """Enter async context and create session."""
        self._session = aiohttp.ClientSession(headers={"User-Agent": self._user_agent, "Accept": HTML_ACCEPT})
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    def _calculate_retry_delay(self, attempt: int) -> float:
        """
        Calculate delay for exponential backoff with jitter.

        Args:
            attempt: Current attempt number (0-indexed)

        Returns:
            Delay in seconds
        """
        delay: float = self._retry_base_delay * (2**attempt)
        jitter: float = random.uniform(0, 1)
        return delay + jitter

    async def get(
        self,
        url: str,
        *,
        timeout: float | None = None,
    ) -> HttpResponse:
        """
        Perform an HTTP GET request with retry logic.

        Args:
            url: The URL to fetch
            timeout: Request timeout in seconds (uses default if None)

        Returns:
            HttpResponse with status, content and content type

        Raises:
            aiohttp.ClientError: On network errors after retries exhausted
            ValueError: On content size exceeded
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        timeout_val = timeout or self._default_timeout

        for attempt in range(self._max_retries + 1):
            try:
                async with (
                    self._rate_limiter.limit(url),
                    self._session.get(
                        url,
                        timeout=aiohttp.ClientTimeout(total=timeout_val),
                        allow_redirects=True,
                    ) as response,
                ):
                    if response.status in self.RETRYABLE_STATUS_CODES:
                        if attempt < self._max_retries:
                            delay = self._calculate_retry_delay(attempt)
                            retry_after = parse_retry_after(response.headers.get("Retry-After"))
                            if retry_after is not None:
                                delay = max(delay, retry_after)
                                self._rate_limiter.defer(url, retry_after)
                            logger.warning(
                                f"Got {response.status} for {url}, retrying in {delay:.1f}s "
                                f"(attempt {attempt + 1}/{self._max_retries + 1})"
                            )
                            await asyncio.sleep(delay)
                            continue
                        response.raise_for_status()

                    content = await self._read_body(response)
                    return HttpResponse(
                        status_code=response.status,
                        content=content,
                        content_type=response.headers.get("Content-Type", ""),
                        url=str(response.url),
                    )

            except self.RETRYABLE_EXCEPTIONS as e:
                if attempt < self._max_retries:
                    delay = self._calculate_retry_delay(attempt)
                    logger.warning(
                        f"Error fetching {url}: {e}, retrying in {delay:.1f}s "
                        f"(attempt {attempt + 1}/{self._max_retries + 1})"
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.error(f"HTTP fetch error for {url} after {self._max_retries + 1} attempts: {e}")
                    raise

        raise RuntimeError(f"Unexpected error fetching {url}")

    async def _read_body(self, response: aiohttp.ClientResponse) -> bytes:
        """Read the body, refusing anything above max_content_size."""
        content_length = response.headers.get("Content-Length")
        if content_length and content_length.isdigit() and int(content_length) > self._max_content_size:
            raise ValueError(f"Page too large: {content_length} bytes (limit {self._max_content_size})")

        chunks: list[bytes] = []
        size = 0
        async for chunk in response.content.iter_chunked(64 * 1024):
            size += len(chunk)
            if size > self._max_content_size:
                raise ValueError(f"Page exceeds {self._max_content_size} bytes: {response.url}")
            chunks.append(chunk)
        return b"".join(chunks)
