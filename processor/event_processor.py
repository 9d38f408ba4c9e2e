"""Event processor turning raw listing blocks into structured events."""
import logging
import re
from datetime import date
from typing import List, Optional, Sequence
from urllib.parse import urljoin

from processor.dates import parse_dates
from processor.locations import extract_city, extract_prefecture, extract_venue
from processor.models import RawBlock, ScrapedEvent
from processor.text import sanitize_description

logger = logging.getLogger(__name__)

TITLE_BULLET_PATTERN = re.compile(r'^[●◆◇■□▲△▼▽★☆○◎・]+\s*')
ORGANIZER_PATTERN = re.compile(r'主催[／/：:]\s*([^連絡☎\n]+)')
ADMISSION_FEE_PATTERNS = [
    re.compile(r'入場無料'),
    re.compile(r'入場料[：:／/]?\s*[^\s、。]+'),
    re.compile(r'入園料[：:／/]?\s*[^\s、。]+'),
    re.compile(r'無料'),
]
SALES_PATTERN = re.compile(r'即売|販売|売店')


class EventProcessor:
    """Processor for normalizing raw event blocks from one source."""

    MAX_TITLE_LENGTH = 200

    def __init__(self, today: Optional[date] = None):
        """
        Initialize the processor.

        Args:
            today: Reference date for year inference (default: run date)
        """
        self.today = today

    def process_blocks(self, blocks: List[RawBlock], region: str, url: str,
                       prefectures: Sequence[str]) -> List[ScrapedEvent]:
        """
        Process raw blocks scraped from one source page.

        Args:
            blocks: Raw blocks in document order
            region: Region label of the source
            url: URL the blocks were fetched from
            prefectures: Prefectures configured for the source

        Returns:
            List of ScrapedEvent objects in document order
        """
        events = []

        for block in blocks:
            try:
                event = self._process_single_block(block, region, url, prefectures)
                if event:
                    events.append(event)
            except Exception as e:
                logger.warning(f"Failed to process event block '{block.title}': {e}")
                continue

        logger.info(
            f"Processed {len(events)} events out of {len(blocks)} blocks "
            f"from {region}"
        )
        return events

    def _process_single_block(self, block: RawBlock, region: str, url: str,
                              prefectures: Sequence[str]) -> Optional[ScrapedEvent]:
        """
        Process a single block.

        Returns:
            ScrapedEvent object or None if the block has no title
        """
        title = self.clean_title(block.title)
        if not title:
            logger.debug(f"Skipping block without title from {url}")
            return None

        content = block.content or ''

        start_date, end_date = parse_dates(content, self.today)
        if start_date is None:
            start_date, end_date = parse_dates(title, self.today)

        venue = extract_venue(content)

        return ScrapedEvent(
            title=title[:self.MAX_TITLE_LENGTH],
            start_date=start_date,
            end_date=end_date,
            prefecture=extract_prefecture(title, content, prefectures),
            city=extract_city(content, venue),
            venue=venue,
            organizer=self._extract_organizer(content),
            admission_fee=self._extract_admission_fee(content),
            has_sales=bool(SALES_PATTERN.search(content)),
            description=sanitize_description(content),
            external_url=urljoin(url, block.href) if block.href else None,
            source_region=region,
            source_url=url
        )

    @staticmethod
    def clean_title(title: Optional[str]) -> str:
        """Strip whitespace and leading decorative bullets from a title."""
        if not title:
            return ''
        return TITLE_BULLET_PATTERN.sub('', title.strip()).strip()

    def _extract_organizer(self, content: str) -> Optional[str]:
        match = ORGANIZER_PATTERN.search(content)
        if match:
            organizer = sanitize_description(match.group(1))
            return organizer or None
        return None

    def _extract_admission_fee(self, content: str) -> Optional[str]:
        for pattern in ADMISSION_FEE_PATTERNS:
            match = pattern.search(content)
            if match:
                return match.group(0)
        return None
