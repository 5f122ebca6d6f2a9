"""Progress events and statistics for batch extraction."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional


class EventType(str, Enum):
    """What happened to the batch or to one of its pages."""

    STARTED = "started"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    FETCH_STARTED = "fetch_started"
    FETCH_FAILED = "fetch_failed"

    PAGE_CONVERTED = "page_converted"
    PAGE_SAVED = "page_saved"


@dataclass
class FetchEvent:
    """
    One step of a batch run, yielded by BatchExtractor.run().

    Page events carry the page URL and its 1-based position in the batch.
    PAGE_CONVERTED also carries the resolved title and the size of the
    extracted Markdown, PAGE_SAVED the written file.

    Example:
        async for event in batch.run(links):
            if event.type == EventType.PAGE_CONVERTED:
                print(f"{event.current}/{event.total} {event.title}: {event.code_blocks} code blocks")
    """

    type: EventType
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    url: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    current: Optional[int] = None
    total: Optional[int] = None

    title: Optional[str] = None
    content_chars: Optional[int] = None
    code_blocks: Optional[int] = None
    output_path: Optional[Path] = None

    @property
    def progress_percent(self) -> Optional[float]:
        if self.current is not None and self.total and self.total > 0:
            return (self.current / self.total) * 100
        return None

    @property
    def is_error(self) -> bool:
        return self.type == EventType.FETCH_FAILED


@dataclass
class FetchStats:
    """Running totals for a batch; pages_skipped counts pages left unvisited by a cancel."""

    pages_discovered: int = 0
    pages_extracted: int = 0
    pages_failed: int = 0
    pages_skipped: int = 0
    code_blocks_extracted: int = 0
    files_saved: int = 0
    duration_seconds: float = 0.0

    @property
    def pages_attempted(self) -> int:
        return self.pages_extracted + self.pages_failed

    @property
    def success_rate(self) -> float:
        """Percentage of attempted pages that were extracted."""
        if self.pages_attempted == 0:
            return 0.0
        return (self.pages_extracted / self.pages_attempted) * 100

    def to_dict(self) -> dict:
        return {
            "pages_discovered": self.pages_discovered,
            "pages_extracted": self.pages_extracted,
            "pages_failed": self.pages_failed,
            "pages_skipped": self.pages_skipped,
            "code_blocks_extracted": self.code_blocks_extracted,
            "files_saved": self.files_saved,
            "duration_seconds": round(self.duration_seconds, 2),
            "success_rate": round(self.success_rate, 1),
        }
