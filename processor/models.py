"""Data models for event ingestion."""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass
class RawBlock:
    """Event block as found in a listing page, before normalization."""
    title: str
    content: str
    href: Optional[str] = None


@dataclass
class ScrapedEvent:
    """Event extracted from a source page, not yet reviewed."""
    title: str
    start_date: Optional[date]
    end_date: Optional[date]
    prefecture: Optional[str]
    city: Optional[str]
    venue: Optional[str]
    organizer: Optional[str]
    admission_fee: Optional[str]
    has_sales: bool
    description: str
    external_url: Optional[str]
    source_region: str
    source_url: str


@dataclass
class ImportableEvent(ScrapedEvent):
    """Scraped event annotated for operator review."""
    id: str = ''
    is_duplicate: bool = False
    similar_event_title: Optional[str] = None
    # 'exact' (same start date, skipped at commit), 'similar' or None
    duplicate_type: Optional[str] = None


@dataclass
class FetchResult:
    """Outcome of fetching one source page."""
    url: str
    html: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PreviewResult:
    """Annotated events returned for operator review."""
    events: List[ImportableEvent] = field(default_factory=list)

    @property
    def duplicate_count(self) -> int:
        return sum(1 for event in self.events if event.is_duplicate)

    @property
    def exact_count(self) -> int:
        return sum(1 for event in self.events if event.duplicate_type == 'exact')


@dataclass
class ImportResult:
    """Result of a commit."""
    imported_count: int
    requested_count: int

    @property
    def skipped_count(self) -> int:
        return self.requested_count - self.imported_count
