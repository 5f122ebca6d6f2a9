"""Batch extraction: fetch pages over HTTP and extract them one by one."""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from datetime import datetime, timezone
from types import TracebackType

from ..dom.tree import DocumentTree
from ..http import AsyncHttpClient, HttpClient
from ..models.config import DocsnapConfig
from ..models.document import ExtractedDocument, PageLink
from ..models.events import EventType, FetchEvent, FetchStats
from ..output.formatters import extract_domain_name
from ..output.writer import DocumentWriter
from .extractor import ContentExtractor

logger = logging.getLogger(__name__)


class PageFetchError(Exception):
    """A page could not be acquired as an HTML document."""


class BatchExtractor:
    """
    Acquires pages over HTTP and extracts them with ContentExtractor.

    Pages are visited sequentially. A failure on one page is reported as a
    FETCH_FAILED event and the run moves on to the next page.

    Example:
        config = DocsnapConfig(url="https://docs.example.com/intro")

        async with BatchExtractor(config) as batch:
            links = await batch.discover(config.url)
            async for event in batch.run(links):
                print(event.type, event.url)

        print(batch.stats.to_dict())
    """

    def __init__(
        self,
        config: DocsnapConfig,
        http_client: HttpClient | None = None,
        writer: DocumentWriter | None = None,
    ):
        """
        Initialize the batch extractor.

        Args:
            config: Configuration for extraction, discovery and networking
            http_client: HTTP client to use (an AsyncHttpClient is created if None)
            writer: Optional writer; when set, every extracted page is saved
        """
        self.config = config
        self._extractor = ContentExtractor(config.extraction, config.navigation)
        self._writer = writer
        self._http_client = http_client
        self._owned_client: AsyncHttpClient | None = None
        self._cancelled = False
        self._stats = FetchStats()
        self._documents: list[ExtractedDocument] = []

    async def __aenter__(self) -> BatchExtractor:
        """Create the HTTP client if one was not injected."""
        if self._http_client is None:
            self._owned_client = AsyncHttpClient.from_config(self.config.network)
            await self._owned_client.__aenter__()
            self._http_client = self._owned_client
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the HTTP client if this extractor created it."""
        if self._owned_client is not None:
            await self._owned_client.__aexit__(exc_type, exc_val, exc_tb)
            self._owned_client = None
            self._http_client = None

    @property
    def stats(self) -> FetchStats:
        """Get current batch statistics."""
        return self._stats

    @property
    def documents(self) -> list[ExtractedDocument]:
        """Documents extracted so far, in visiting order."""
        return list(self._documents)

    def cancel(self) -> None:
        """
        Request graceful cancellation.

        The current page is finished, then a CANCELLED event is emitted.
        """
        self._cancelled = True

    async def fetch_tree(self, url: str) -> DocumentTree:
        """
        Fetch a page and parse it.

        Args:
            url: Page URL

        Returns:
            DocumentTree whose URL is the final URL after redirects

        Raises:
            PageFetchError: On a non-200 status or a non-HTML response
        """
        if self._http_client is None:
            raise RuntimeError("BatchExtractor not initialized. Use 'async with' context manager.")

        response = await self._http_client.get(url)
        if response.status_code != 200:
            raise PageFetchError(f"HTTP {response.status_code} for {url}")
        if not response.is_html:
            raise PageFetchError(f"Not an HTML page ({response.content_type or 'unknown type'}): {url}")

        return DocumentTree.from_html(response.content, response.url)

    async def extract_url(self, url: str) -> ExtractedDocument:
        """
        Fetch and extract a single page.

        Args:
            url: Page URL

        Returns:
            ExtractedDocument for the page
        """
        return self.extract_tree(await self.fetch_tree(url))

    def extract_tree(self, tree: DocumentTree) -> ExtractedDocument:
        """
        Extract an already-parsed page.

        Args:
            tree: Parsed page (fetched or loaded from disk)

        Returns:
            ExtractedDocument for the page
        """
        return self._extractor.extract_page(tree, datetime.now(timezone.utc))

    async def discover(self, url: str) -> list[PageLink]:
        """
        Fetch a page and harvest its sibling documentation pages.

        Args:
            url: Page URL

        Returns:
            List of PageLink (possibly empty)
        """
        return self.discover_tree(await self.fetch_tree(url))

    def discover_tree(self, tree: DocumentTree) -> list[PageLink]:
        """
        Harvest sibling documentation pages from an already-parsed page.

        Args:
            tree: Parsed page (fetched or loaded from disk)

        Returns:
            List of PageLink (possibly empty)
        """
        links = self._extractor.discover(tree)
        self._stats.pages_discovered = len(links)
        logger.info(f"Discovered {len(links)} sibling pages on {tree.url}")
        return links

    async def run(self, links: list[PageLink], folder: str | None = None) -> AsyncIterator[FetchEvent]:
        """
        Extract every linked page in order, yielding progress events.

        Args:
            links: Pages to extract
            folder: Output sub-folder for the writer (derived from the
                    first link's domain if None)

        Yields:
            FetchEvent for each step of the run
        """
        start = time.monotonic()
        total = len(links)
        if folder is None and links:
            folder = extract_domain_name(links[0].url)

        yield FetchEvent(type=EventType.STARTED, total=total, message=f"Extracting {total} pages")

        for index, link in enumerate(links, start=1):
            if self._cancelled:
                self._stats.pages_skipped = total - index + 1
                logger.info(f"Batch cancelled with {self._stats.pages_skipped} pages left")
                yield FetchEvent(type=EventType.CANCELLED, message="Batch extraction cancelled")
                break

            yield FetchEvent(type=EventType.FETCH_STARTED, url=link.url, current=index, total=total)

            try:
                doc = await self.extract_url(link.url)
                self._documents.append(doc)
                self._stats.pages_extracted += 1
                self._stats.code_blocks_extracted += len(doc.code_blocks)

                yield FetchEvent(
                    type=EventType.PAGE_CONVERTED,
                    url=link.url,
                    current=index,
                    total=total,
                    title=doc.title,
                    content_chars=len(doc.content),
                    code_blocks=len(doc.code_blocks),
                )

                if self._writer is not None:
                    for path in await self._writer.write(doc, folder):
                        self._stats.files_saved += 1
                        yield FetchEvent(type=EventType.PAGE_SAVED, url=link.url, output_path=path)

            except Exception as e:
                self._stats.pages_failed += 1
                logger.error(f"Failed to extract {link.url}: {e}")
                yield FetchEvent(type=EventType.FETCH_FAILED, url=link.url, error=str(e), current=index, total=total)

        self._stats.duration_seconds = time.monotonic() - start
        yield FetchEvent(
            type=EventType.COMPLETED,
            message=f"Extracted {self._stats.pages_extracted}/{total} pages",
        )
