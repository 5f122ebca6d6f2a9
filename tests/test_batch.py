"""Tests for batch extraction over a mocked HTTP client."""

from unittest.mock import AsyncMock

import pytest

from docsnap.core.batch import BatchExtractor, PageFetchError
from docsnap.http.protocols import HttpResponse
from docsnap.models.config import DocsnapConfig, ExportFormat
from docsnap.models.document import PageLink
from docsnap.models.events import EventType
from docsnap.output.writer import DocumentWriter

WORDS = " ".join(["lorem"] * 60)

INDEX = """<html><body>
<div class="sidebar"><nav>
  <a href="/guide/one">Page one</a>
  <a href="/guide/two">Page two</a>
  <a href="/guide/three">Page three</a>
  <a href="/guide/four">Page four</a>
</nav></div>
<main><h1>Index</h1><p>{words}</p></main>
</body></html>"""


def page(title: str) -> bytes:
    return f"<html><head><title>{title}</title></head><body><main><p>{WORDS}</p></main></body></html>".encode()


def html_response(url: str, content: bytes, status: int = 200, content_type: str = "text/html; charset=utf-8"):
    return HttpResponse(status_code=status, content=content, content_type=content_type, url=url)


@pytest.fixture
def pages():
    """Map of URL to canned response."""
    return {
        "https://docs.example.com/guide/": html_response(
            "https://docs.example.com/guide/", INDEX.format(words=WORDS).encode()
        ),
        "https://docs.example.com/guide/one": html_response("https://docs.example.com/guide/one", page("One")),
        "https://docs.example.com/guide/two": html_response("https://docs.example.com/guide/two", b"gone", status=404),
        "https://docs.example.com/guide/three": html_response(
            "https://docs.example.com/guide/three", b"%PDF", content_type="application/pdf"
        ),
    }


@pytest.fixture
def mock_client(pages):
    """Create mock HTTP client serving canned pages."""
    client = AsyncMock()

    async def get(url, **kwargs):
        return pages[url]

    client.get.side_effect = get
    return client


def link(path: str) -> PageLink:
    return PageLink(title=f"Page {path}", url=f"https://docs.example.com/guide/{path}")


class TestBatchExtractor:
    """Tests for BatchExtractor."""

    @pytest.mark.asyncio
    async def test_extract_url(self, mock_client):
        """Test a single page is fetched and extracted."""
        async with BatchExtractor(DocsnapConfig(), http_client=mock_client) as batch:
            doc = await batch.extract_url("https://docs.example.com/guide/one")

        assert doc.title == "One"
        assert doc.url == "https://docs.example.com/guide/one"
        assert doc.content.startswith("lorem")
        mock_client.get.assert_called_once_with("https://docs.example.com/guide/one")

    @pytest.mark.asyncio
    async def test_non_200_raises(self, mock_client):
        """Test error statuses raise PageFetchError."""
        async with BatchExtractor(DocsnapConfig(), http_client=mock_client) as batch:
            with pytest.raises(PageFetchError, match="HTTP 404"):
                await batch.extract_url("https://docs.example.com/guide/two")

    @pytest.mark.asyncio
    async def test_non_html_raises(self, mock_client):
        """Test non-HTML responses raise PageFetchError."""
        async with BatchExtractor(DocsnapConfig(), http_client=mock_client) as batch:
            with pytest.raises(PageFetchError, match="Not an HTML page"):
                await batch.extract_url("https://docs.example.com/guide/three")

    @pytest.mark.asyncio
    async def test_discover(self, mock_client):
        """Test sibling pages are harvested from a fetched page."""
        async with BatchExtractor(DocsnapConfig(), http_client=mock_client) as batch:
            links = await batch.discover("https://docs.example.com/guide/")

        assert [item.title for item in links] == ["Page one", "Page two", "Page three", "Page four"]
        assert batch.stats.pages_discovered == 4

    @pytest.mark.asyncio
    async def test_run_continues_after_failures(self, mock_client):
        """Test failed pages are reported and the run goes on."""
        links = [link("two"), link("one"), link("three")]

        async with BatchExtractor(DocsnapConfig(), http_client=mock_client) as batch:
            events = [event async for event in batch.run(links)]

        assert [event.type for event in events] == [
            EventType.STARTED,
            EventType.FETCH_STARTED,
            EventType.FETCH_FAILED,
            EventType.FETCH_STARTED,
            EventType.PAGE_CONVERTED,
            EventType.FETCH_STARTED,
            EventType.FETCH_FAILED,
            EventType.COMPLETED,
        ]
        assert events[2].is_error
        assert "404" in events[2].error
        assert events[3].current == 2
        assert events[3].total == 3
        assert batch.stats.pages_extracted == 1
        assert batch.stats.pages_failed == 2
        assert [doc.title for doc in batch.documents] == ["One"]
        assert events[4].title == "One"
        assert events[4].code_blocks == 0
        assert events[4].content_chars > 0

    @pytest.mark.asyncio
    async def test_run_saves_with_writer(self, mock_client, tmp_path):
        """Test extracted pages are written and reported."""
        writer = DocumentWriter(tmp_path, ExportFormat.BOTH)

        async with BatchExtractor(DocsnapConfig(), http_client=mock_client, writer=writer) as batch:
            events = [event async for event in batch.run([link("one")])]

        saved = [event for event in events if event.type == EventType.PAGE_SAVED]
        assert len(saved) == 2
        assert batch.stats.files_saved == 2
        assert (tmp_path / "example" / "one.md").exists()
        assert (tmp_path / "example" / "one.json").exists()

    @pytest.mark.asyncio
    async def test_run_uses_given_folder(self, mock_client, tmp_path):
        """Test an explicit folder overrides the domain folder."""
        writer = DocumentWriter(tmp_path)

        async with BatchExtractor(DocsnapConfig(), http_client=mock_client, writer=writer) as batch:
            async for _ in batch.run([link("one")], folder="guide"):
                pass

        assert (tmp_path / "guide" / "one.md").exists()

    @pytest.mark.asyncio
    async def test_cancel(self, mock_client):
        """Test cancellation stops before the next page."""
        async with BatchExtractor(DocsnapConfig(), http_client=mock_client) as batch:
            batch.cancel()
            events = [event async for event in batch.run([link("one"), link("two")])]

        assert [event.type for event in events] == [EventType.STARTED, EventType.CANCELLED, EventType.COMPLETED]
        mock_client.get.assert_not_called()
        assert batch.stats.pages_skipped == 2

    @pytest.mark.asyncio
    async def test_cancel_from_event_loop(self, mock_client):
        """Test cancelling on the first failure leaves the rest unvisited."""
        links = [link("two"), link("one"), link("three")]

        async with BatchExtractor(DocsnapConfig(), http_client=mock_client) as batch:
            events = []
            async for event in batch.run(links):
                events.append(event)
                if event.is_error:
                    batch.cancel()

        assert [event.type for event in events] == [
            EventType.STARTED,
            EventType.FETCH_STARTED,
            EventType.FETCH_FAILED,
            EventType.CANCELLED,
            EventType.COMPLETED,
        ]
        assert mock_client.get.await_count == 1
        assert batch.stats.pages_failed == 1
        assert batch.stats.pages_skipped == 2

    @pytest.mark.asyncio
    async def test_empty_run(self, mock_client):
        """Test an empty link list completes immediately."""
        async with BatchExtractor(DocsnapConfig(), http_client=mock_client) as batch:
            events = [event async for event in batch.run([])]

        assert [event.type for event in events] == [EventType.STARTED, EventType.COMPLETED]
        assert batch.stats.success_rate == 0.0

    @pytest.mark.asyncio
    async def test_requires_context_without_client(self):
        """Test fetching without an initialized client fails clearly."""
        batch = BatchExtractor(DocsnapConfig())

        with pytest.raises(RuntimeError, match="not initialized"):
            await batch.fetch_tree("https://docs.example.com/")
