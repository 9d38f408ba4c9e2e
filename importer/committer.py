"""Commit of operator-selected events into the store."""
import logging
from typing import Callable, List, Optional, Sequence

from processor.models import ImportableEvent, ImportResult
from storage.dynamodb_manager import DynamoDBManager

logger = logging.getLogger(__name__)

# Public pages showing events, refreshed after every commit
EVENT_LISTING_PATHS = ('/events', '/admin/events')


class EventImporter:
    """Persists selected events, skipping undated ones and duplicates."""

    def __init__(self, store: DynamoDBManager,
                 invalidate_cache: Optional[Callable[[Sequence[str]], None]] = None):
        """
        Initialize the importer.

        Args:
            store: Event store
            invalidate_cache: Called with the listing paths after a commit
        """
        self.store = store
        self.invalidate_cache = invalidate_cache

    def commit(self, events: List[ImportableEvent], operator_id: str) -> ImportResult:
        """
        Persist the selected events.

        Each event is written on its own; a store failure propagates and
        leaves the events written before it in place.

        Args:
            events: Events selected by the operator
            operator_id: Operator the new events are attributed to

        Returns:
            ImportResult whose imported_count may be lower than requested
        """
        imported_count = 0

        for event in events:
            if event.start_date is None:
                logger.info(f"Skipping '{event.title}': no start date")
                continue

            if self.store.find_event(event.title, event.start_date):
                logger.info(f"Skipping '{event.title}' on {event.start_date}: already imported")
                continue

            self.store.create_event(event, created_by=operator_id)
            imported_count += 1

        if self.invalidate_cache:
            self.invalidate_cache(EVENT_LISTING_PATHS)

        logger.info(f"Imported {imported_count} of {len(events)} selected events")
        return ImportResult(imported_count=imported_count, requested_count=len(events))
