"""Per-host request spacing for polite page acquisition."""

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Optional
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)


def host_key(url: str) -> str:
    """Lowercased host name of a URL, without port; empty for file:// and relative URLs."""
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


class PerHostRateLimiter:
    """
    Spaces out requests to the same documentation host.

    Every host waits default_delay seconds between request starts unless
    host_delays names its own delay (hosts are matched case-insensitively,
    ports ignored). A server's Retry-After can push a host further back
    with defer().

    Example:
        limiter = PerHostRateLimiter(default_delay=0.5, host_delays={"api.example.com": 2.0})

        async with limiter.limit("https://docs.example.com/one"):
            await fetch_page(...)
        async with limiter.limit("https://docs.example.com/two"):
            # starts at least 0.5s after "one" started
            await fetch_page(...)
    """

    def __init__(self, default_delay: float = 0.5, host_delays: Optional[Mapping[str, float]] = None):
        self.default_delay = default_delay
        self._host_delays = {host.lower(): delay for host, delay in (host_delays or {}).items()}
        self._next_allowed: dict[str, float] = {}
        self._lock = asyncio.Lock()

    def delay_for(self, url: str) -> float:
        """Minimum spacing in seconds for the URL's host."""
        return self._host_delays.get(host_key(url), self.default_delay)

    def defer(self, url: str, seconds: float) -> None:
        """Hold back the next request to the URL's host for at least `seconds`."""
        host = host_key(url)
        not_before = time.monotonic() + seconds
        self._next_allowed[host] = max(self._next_allowed.get(host, 0.0), not_before)
        logger.debug(f"Deferring {host or url} for {seconds:.1f}s")

    @asynccontextmanager
    async def limit(self, url: str) -> AsyncIterator[None]:
        """Wait for the host's turn, then run the request inside the context."""
        host = host_key(url)

        async with self._lock:
            wait_time = self._next_allowed.get(host, 0.0) - time.monotonic()
            if wait_time > 0:
                logger.debug(f"Waiting {wait_time:.2f}s before requesting {host}")
                await asyncio.sleep(wait_time)
            self._next_allowed[host] = time.monotonic() + self.delay_for(url)

        yield
