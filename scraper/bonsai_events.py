"""Scraper for bonsai.co.jp regional event listings."""
import logging
import time
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

import requests
from bs4 import BeautifulSoup

from importer.errors import SourceNotFoundError
from processor.event_processor import EventProcessor
from processor.models import FetchResult, RawBlock, ScrapedEvent
from scraper.sources import EventSource, default_sources

logger = logging.getLogger(__name__)


class BlockExtractor(ABC):
    """Finds event blocks in one page layout."""

    @abstractmethod
    def extract_blocks(self, soup: BeautifulSoup) -> List[RawBlock]:
        """Return the raw event blocks found in ``soup``, in document order."""

    @staticmethod
    def _text(element, separator: str = '') -> str:
        if element is None:
            return ''
        return element.get_text(separator, strip=True)


class EventAreaBlockExtractor(BlockExtractor):
    """
    Layout with ``div.event_area`` blocks.

    The title is the first ``span``, the detail text the first ``p`` and the
    optional detail link an ``a.base``.
    """

    def extract_blocks(self, soup: BeautifulSoup) -> List[RawBlock]:
        blocks = []
        for element in soup.select('div.event_area'):
            link = element.select_one('a.base[href]')
            blocks.append(RawBlock(
                title=self._text(element.find('span')),
                content=self._text(element.find('p'), ' '),
                href=link.get('href') if link else None
            ))
        return blocks


class ListBlockExtractor(BlockExtractor):
    """Layout with ``.the_list`` blocks holding ``.the_title``/``.the_content``."""

    def extract_blocks(self, soup: BeautifulSoup) -> List[RawBlock]:
        blocks = []
        for element in soup.select('div.the_list'):
            link = element.select_one('a.the_permalink[href]')
            blocks.append(RawBlock(
                title=self._text(element.select_one('.the_title')),
                content=self._text(element.select_one('.the_content'), ' '),
                href=link.get('href') if link else None
            ))
        return blocks


DEFAULT_BLOCK_EXTRACTORS = (EventAreaBlockExtractor(), ListBlockExtractor())


class BonsaiEventScraper:
    """Scraper for the registered bonsai.co.jp event listing pages."""

    HEADERS = {
        'User-Agent': 'Mozilla/5.0 (compatible; BonsaiEventImporter/1.0)',
        'Accept': 'text/html,application/xhtml+xml',
        'Accept-Language': 'ja,en;q=0.9',
    }

    def __init__(self, sources: Optional[Sequence[EventSource]] = None,
                 timeout: int = 30, request_delay: float = 0.5,
                 max_retries: int = 3, processor: Optional[EventProcessor] = None,
                 block_extractors: Sequence[BlockExtractor] = DEFAULT_BLOCK_EXTRACTORS):
        """
        Initialize the scraper.

        Args:
            sources: Sources to scrape (default: the full registry)
            timeout: HTTP request timeout in seconds (default: 30)
            request_delay: Pause between two source requests in seconds
            max_retries: Attempts per page for server and network errors
            processor: EventProcessor used to normalize blocks
            block_extractors: Page layouts to try, in order
        """
        self.sources = list(sources) if sources is not None else default_sources()
        self.timeout = timeout
        self.request_delay = request_delay
        self.max_retries = max(1, max_retries)
        self.processor = processor or EventProcessor()
        self.block_extractors = list(block_extractors)

    def scrape_all(self) -> List[ScrapedEvent]:
        """
        Scrape every registered source, one after another.

        A failing source contributes no events and never stops the batch.

        Returns:
            All scraped events, grouped by source in registry order
        """
        logger.info(f"Scraping {len(self.sources)} sources")
        all_events = []

        for index, source in enumerate(self.sources):
            if index > 0 and self.request_delay > 0:
                time.sleep(self.request_delay)
            events = self.scrape_region(source.url, source.region, source.prefectures)
            all_events.extend(events)

        logger.info(f"Scraped {len(all_events)} events from {len(self.sources)} sources")
        return all_events

    def scrape_by_region(self, region_id: str) -> List[ScrapedEvent]:
        """
        Scrape a single source identified by region label or URL fragment.

        Args:
            region_id: Region label (e.g. '関東') or part of the source URL

        Returns:
            Events scraped from the matching source

        Raises:
            SourceNotFoundError: If no registered source matches
        """
        source = self.find_source(region_id)
        return self.scrape_region(source.url, source.region, source.prefectures)

    def find_source(self, region_id: str) -> EventSource:
        """Resolve a source by exact region label or URL substring."""
        if region_id:
            for source in self.sources:
                if source.region == region_id or region_id in source.url:
                    return source
        raise SourceNotFoundError(region_id)

    def scrape_region(self, url: str, region: str,
                      prefectures: Sequence[str]) -> List[ScrapedEvent]:
        """
        Scrape events from one listing page.

        Args:
            url: Listing page URL
            region: Region label stamped on every event
            prefectures: Prefectures configured for the source

        Returns:
            List of ScrapedEvent objects; empty if the page could not be fetched
        """
        result = self._fetch_page(url)
        if not result.ok:
            logger.error(f"Failed to fetch {region} events from {url}: {result.error}")
            return []

        try:
            blocks = self._parse_blocks(result.html)
        except Exception as e:
            logger.error(f"Failed to parse {region} page {url}: {e}")
            return []

        events = self.processor.process_blocks(blocks, region, url, prefectures)
        if not events:
            logger.info(f"No events found for {region} at {url}")
        return events

    def _fetch_page(self, url: str) -> FetchResult:
        """
        Fetch a listing page with retry logic.

        Server errors and network failures are retried with exponential
        backoff; client errors are not.

        Returns:
            FetchResult carrying either the HTML or the failure reason
        """
        base_delay = 1  # seconds

        for attempt in range(self.max_retries):
            try:
                logger.info(f"Fetching {url} (attempt {attempt + 1}/{self.max_retries})")
                response = requests.get(url, headers=self.HEADERS, timeout=self.timeout)
                response.raise_for_status()
                # Pages without a charset header would otherwise decode as Latin-1
                if not response.encoding or response.encoding.lower() == 'iso-8859-1':
                    response.encoding = response.apparent_encoding
                return FetchResult(url=url, html=response.text)

            except requests.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status is not None and status < 500:
                    return FetchResult(url=url, error=f"HTTP {status}")
                last_error = str(e)

            except requests.RequestException as e:
                last_error = str(e)

            if attempt < self.max_retries - 1:
                delay = base_delay * (2 ** attempt)
                logger.warning(
                    f"Request failed (attempt {attempt + 1}/{self.max_retries}): "
                    f"{last_error}. Retrying in {delay} seconds..."
                )
                time.sleep(delay)

        return FetchResult(url=url, error=last_error)

    def _parse_blocks(self, html: str) -> List[RawBlock]:
        """Find event blocks using the first layout that matches the page."""
        soup = BeautifulSoup(html, 'html.parser')
        for extractor in self.block_extractors:
            blocks = extractor.extract_blocks(soup)
            if blocks:
                return blocks
        return []
