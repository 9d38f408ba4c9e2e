"""DynamoDB manager for event storage operations."""
import logging
import time
import uuid
from datetime import date, timedelta
from typing import List, Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from processor.models import ScrapedEvent

logger = logging.getLogger(__name__)


class DynamoDBManager:
    """Manager for DynamoDB operations on the events table."""

    TITLE_PREFIX_LENGTH = 10

    def __init__(self, table_name: str, region_name: Optional[str] = None):
        """
        Initialize DynamoDB client and table reference.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region (default: from the environment)
        """
        self.table_name = table_name
        self.dynamodb = boto3.resource('dynamodb', region_name=region_name)
        self.table = self.dynamodb.Table(table_name)
        logger.info(f"Initialized DynamoDBManager for table: {table_name}")

    def find_similar_events(self, title: str, start_date: date,
                            tolerance_days: int = 1) -> List[dict]:
        """
        Find visible events that look like the given title and date.

        A title matches when it equals ``title`` or contains its first ten
        characters; the start date must lie within ``tolerance_days``.

        Args:
            title: Candidate title
            start_date: Candidate start date
            tolerance_days: Allowed distance in days

        Returns:
            List of matching DynamoDB items
        """
        window_start = (start_date - timedelta(days=tolerance_days)).isoformat()
        window_end = (start_date + timedelta(days=tolerance_days)).isoformat()

        condition = (
            Attr('is_hidden').eq(False)
            & Attr('start_date').between(window_start, window_end)
            & self._title_condition(title)
        )
        return self._scan(condition)

    def find_event(self, title: str, start_date: date) -> Optional[dict]:
        """
        Find a visible event with a matching title on exactly ``start_date``.

        Args:
            title: Candidate title
            start_date: Candidate start date

        Returns:
            First matching DynamoDB item or None
        """
        condition = (
            Attr('is_hidden').eq(False)
            & Attr('start_date').eq(start_date.isoformat())
            & self._title_condition(title)
        )
        items = self._scan(condition)
        return items[0] if items else None

    def create_event(self, event: ScrapedEvent, created_by: str) -> str:
        """
        Write a new event item.

        Args:
            event: Event to persist; must have a start date
            created_by: Operator the event is attributed to

        Returns:
            Generated event ID

        Raises:
            ValueError: If the event has no start date
            ClientError: If the write fails
        """
        if event.start_date is None:
            raise ValueError(f"Event '{event.title}' has no start date")

        item = self._event_to_item(event, created_by)
        try:
            self.table.put_item(Item=item)
        except ClientError as e:
            logger.error(f"Error writing event '{event.title}': {e}")
            raise

        logger.info(f"Created event {item['event_id']}: {event.title}")
        return item['event_id']

    def _scan(self, condition) -> List[dict]:
        """
        Scan the table with a filter, following pagination.

        Reads are strongly consistent so an event created earlier in the same
        commit is always seen by the next duplicate check.

        Raises:
            ClientError: If the scan fails
        """
        try:
            response = self.table.scan(FilterExpression=condition, ConsistentRead=True)
            items = response.get('Items', [])

            while 'LastEvaluatedKey' in response:
                response = self.table.scan(
                    FilterExpression=condition,
                    ConsistentRead=True,
                    ExclusiveStartKey=response['LastEvaluatedKey']
                )
                items.extend(response.get('Items', []))

            return items

        except ClientError as e:
            logger.error(f"Error scanning DynamoDB table: {e}")
            raise

    def _title_condition(self, title: str):
        prefix = title[:self.TITLE_PREFIX_LENGTH]
        return Attr('title').eq(title) | Attr('title').contains(prefix)

    def _event_to_item(self, event: ScrapedEvent, created_by: str) -> dict:
        """
        Convert an event to a DynamoDB item.

        Args:
            event: Event to convert
            created_by: Operator ID

        Returns:
            DynamoDB item dictionary
        """
        item = {
            'event_id': str(uuid.uuid4()),
            'title': event.title,
            'start_date': event.start_date.isoformat(),
            'has_sales': event.has_sales,
            'is_hidden': False,
            'created_by': created_by,
            'created_at': int(time.time())
        }

        # Unset optional attributes are omitted
        optional = {
            'end_date': event.end_date.isoformat() if event.end_date else None,
            'prefecture': event.prefecture,
            'city': event.city,
            'venue': event.venue,
            'organizer': event.organizer,
            'admission_fee': event.admission_fee,
            'description': event.description,
            'external_url': event.external_url,
        }
        for key, value in optional.items():
            if value:
                item[key] = value

        return item
