"""AWS Lambda handler for the bonsai event import pipeline."""
import json
import logging
import os
import time
from dataclasses import asdict
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from botocore.exceptions import ClientError

from importer.committer import EventImporter
from importer.duplicate_checker import DuplicateChecker
from importer.errors import AuthorizationError, NothingSelectedError, SourceNotFoundError
from importer.service import EventImportService
from processor.models import ImportableEvent
from scraper.bonsai_events import BonsaiEventScraper
from storage.dynamodb_manager import DynamoDBManager


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def make_authorizer(operator_id: Optional[str], allowed_ids: List[str]) -> Callable[[], str]:
    """
    Build the authorization check run before every pipeline call.

    Args:
        operator_id: ID of the caller, from the invocation payload
        allowed_ids: Operator IDs allowed to import events

    Returns:
        Callable returning the operator ID or raising AuthorizationError
    """
    def authorize() -> str:
        if not operator_id:
            raise AuthorizationError("Authentication required")
        if operator_id not in allowed_ids:
            raise AuthorizationError("Administrator privileges required")
        return operator_id

    return authorize


def event_to_payload(event: ImportableEvent) -> Dict[str, Any]:
    """Convert an ImportableEvent to a JSON-safe dict."""
    payload = asdict(event)
    for key in ('start_date', 'end_date'):
        value = payload[key]
        payload[key] = value.isoformat() if value else None
    return payload


def event_from_payload(payload: Dict[str, Any]) -> ImportableEvent:
    """
    Rebuild an ImportableEvent sent back by the review UI.

    Raises:
        KeyError: If a required field is missing
        ValueError: If the payload is not an object or a date is not in ISO format
    """
    if not isinstance(payload, dict):
        raise ValueError(f"Selected event must be an object, got {type(payload).__name__}")

    data = dict(payload)
    for key in ('start_date', 'end_date'):
        value = data.get(key)
        if value and not isinstance(value, str):
            raise ValueError(f"{key} must be an ISO date string")
        data[key] = date.fromisoformat(value[:10]) if value else None

    return ImportableEvent(
        title=data['title'],
        start_date=data['start_date'],
        end_date=data['end_date'],
        prefecture=data.get('prefecture'),
        city=data.get('city'),
        venue=data.get('venue'),
        organizer=data.get('organizer'),
        admission_fee=data.get('admission_fee'),
        has_sales=bool(data.get('has_sales', False)),
        description=data.get('description') or '',
        external_url=data.get('external_url'),
        source_region=data.get('source_region', ''),
        source_url=data.get('source_url', ''),
        id=data.get('id', ''),
        is_duplicate=bool(data.get('is_duplicate', False)),
        similar_event_title=data.get('similar_event_title'),
        duplicate_type=data.get('duplicate_type')
    )


def _response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'body': json.dumps(body, ensure_ascii=False)
    }


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function for the event import pipeline.

    The payload's ``action`` selects the operation: ``preview_all``
    (default, used by the scheduled rule), ``preview_region``,
    ``commit_selected`` or ``list_sources``.

    Args:
        event: Invocation payload
        context: Lambda context object

    Returns:
        Response dict with statusCode and JSON body
    """
    # Read configuration from environment variables
    table_name = os.environ.get('TABLE_NAME', 'bonsai-events')
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    timeout_seconds = int(os.environ.get('TIMEOUT_SECONDS', '30'))
    request_delay = float(os.environ.get('REQUEST_DELAY_SECONDS', '0.5'))
    allowed_ids = [
        operator.strip()
        for operator in os.environ.get('ADMIN_OPERATOR_IDS', '').split(',')
        if operator.strip()
    ]

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    action = event.get('action', 'preview_all')
    start_time = time.time()
    logger.info(
        "Lambda execution started",
        extra={'action': action, 'table_name': table_name}
    )

    try:
        store = DynamoDBManager(table_name=table_name)
        service = EventImportService(
            scraper=BonsaiEventScraper(timeout=timeout_seconds, request_delay=request_delay),
            checker=DuplicateChecker(store),
            importer=EventImporter(store),
            authorize=make_authorizer(event.get('operator_id'), allowed_ids)
        )

        if action == 'preview_all':
            result = service.preview_all()
            body = _preview_body(result)
        elif action == 'preview_region':
            result = service.preview_region(event.get('region', ''))
            body = _preview_body(result)
        elif action == 'commit_selected':
            selected = [event_from_payload(item) for item in event.get('events') or []]
            result = service.commit_selected(selected)
            body = {
                'message': 'Import completed',
                'imported_count': result.imported_count,
                'requested_count': result.requested_count
            }
        elif action == 'list_sources':
            body = {'regions': service.list_sources()}
        else:
            return _response(400, {'message': f"Unknown action: {action}"})

    except AuthorizationError as e:
        logger.warning(f"Rejected {action}: {e}")
        return _response(403, {'message': str(e)})

    except SourceNotFoundError as e:
        logger.warning(str(e))
        return _response(404, {'message': 'Region not found', 'region': e.region_id})

    except (NothingSelectedError, KeyError, ValueError) as e:
        logger.warning(f"Invalid {action} request: {e}")
        return _response(400, {'message': 'Invalid request', 'error': str(e)})

    except ClientError as e:
        duration = time.time() - start_time
        logger.error(
            f"DynamoDB error during {action}: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return _response(500, {
            'message': 'Event store unavailable',
            'error': str(e),
            'error_type': type(e).__name__,
            'duration_seconds': round(duration, 2)
        })

    except Exception as e:
        duration = time.time() - start_time
        logger.error(
            f"Lambda execution failed: {str(e)}",
            extra={'duration_seconds': round(duration, 2), 'error_type': type(e).__name__},
            exc_info=True
        )
        return _response(500, {
            'message': 'Import pipeline failed',
            'error': str(e),
            'error_type': type(e).__name__,
            'duration_seconds': round(duration, 2)
        })

    duration = time.time() - start_time
    body['duration_seconds'] = round(duration, 2)
    logger.info(
        "Lambda execution completed successfully",
        extra={'action': action, 'duration_seconds': round(duration, 2)}
    )
    return _response(200, body)


def _preview_body(result) -> Dict[str, Any]:
    if not result.events:
        return {'message': 'No events found', 'events': []}
    return {
        'message': 'Preview ready',
        'events': [event_to_payload(e) for e in result.events],
        'duplicate_count': result.duplicate_count,
        'exact_count': result.exact_count
    }
