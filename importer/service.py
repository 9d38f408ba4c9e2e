"""Operator-facing entry points of the event import pipeline."""
import logging
from typing import Callable, Dict, List

from importer.committer import EventImporter
from importer.duplicate_checker import DuplicateChecker
from importer.errors import NothingSelectedError
from processor.models import ImportableEvent, ImportResult, PreviewResult, ScrapedEvent
from scraper.bonsai_events import BonsaiEventScraper

logger = logging.getLogger(__name__)


class EventImportService:
    """
    Preview and commit scraped events on behalf of an operator.

    Every call runs ``authorize`` first. It returns the operator ID or raises
    AuthorizationError, in which case nothing else happens.
    """

    def __init__(self, scraper: BonsaiEventScraper, checker: DuplicateChecker,
                 importer: EventImporter, authorize: Callable[[], str]):
        self.scraper = scraper
        self.checker = checker
        self.importer = importer
        self.authorize = authorize

    def preview_all(self) -> PreviewResult:
        """Scrape every source and flag likely duplicates."""
        self.authorize()
        return self._preview(self.scraper.scrape_all())

    def preview_region(self, region_id: str) -> PreviewResult:
        """
        Scrape one source and flag likely duplicates.

        Raises:
            SourceNotFoundError: If no source matches ``region_id``
        """
        self.authorize()
        return self._preview(self.scraper.scrape_by_region(region_id))

    def commit_selected(self, events: List[ImportableEvent]) -> ImportResult:
        """
        Import the events the operator selected.

        Raises:
            NothingSelectedError: If ``events`` is empty
        """
        operator_id = self.authorize()
        if not events:
            raise NothingSelectedError("No events selected for import")
        return self.importer.commit(events, operator_id)

    def list_sources(self) -> List[Dict[str, str]]:
        """Return region identifiers and URLs of the registered sources."""
        self.authorize()
        return [
            {'id': source.region, 'name': source.region, 'url': source.url}
            for source in self.scraper.sources
        ]

    def _preview(self, scraped: List[ScrapedEvent]) -> PreviewResult:
        if not scraped:
            logger.info("No events found")
            return PreviewResult(events=[])
        return PreviewResult(events=self.checker.annotate(scraped))
