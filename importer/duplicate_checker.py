"""Near-duplicate detection against stored events."""
import logging
import time
from dataclasses import fields
from typing import List

from processor.models import ImportableEvent, ScrapedEvent
from storage.dynamodb_manager import DynamoDBManager

logger = logging.getLogger(__name__)

SCRAPED_FIELDS = [f.name for f in fields(ScrapedEvent)]

EXACT = 'exact'
SIMILAR = 'similar'


class DuplicateChecker:
    """Flags scraped events that likely exist in the store already."""

    TOLERANCE_DAYS = 1

    def __init__(self, store: DynamoDBManager):
        self.store = store

    def annotate(self, events: List[ScrapedEvent]) -> List[ImportableEvent]:
        """
        Convert scraped events into importable events with duplicate flags.

        A match on the same start date is an ``exact`` duplicate: the commit
        applies the same title rule and will always skip it. A match one day
        off is ``similar`` and is imported if the operator selects it.
        Events without a start date cannot be matched and are never flagged.

        Args:
            events: Scraped events in preview order

        Returns:
            List of ImportableEvent objects in the same order
        """
        run_token = int(time.time() * 1000)
        importable = []

        for index, event in enumerate(events):
            matches = []
            if event.start_date is not None:
                matches = self.store.find_similar_events(
                    event.title, event.start_date, self.TOLERANCE_DAYS
                )

            duplicate_type = None
            similar_title = None
            if matches:
                same_day = event.start_date.isoformat()
                exact = [item for item in matches if item.get('start_date') == same_day]
                duplicate_type = EXACT if exact else SIMILAR
                similar_title = (exact or matches)[0].get('title')

            importable.append(ImportableEvent(
                **{name: getattr(event, name) for name in SCRAPED_FIELDS},
                id=f"scraped-{index}-{run_token}",
                is_duplicate=bool(matches),
                similar_event_title=similar_title,
                duplicate_type=duplicate_type
            ))

        duplicates = sum(1 for event in importable if event.is_duplicate)
        exact_count = sum(1 for event in importable if event.duplicate_type == EXACT)
        logger.info(
            f"Duplicate check: {duplicates} of {len(importable)} events look imported "
            f"({exact_count} exact)"
        )
        return importable
