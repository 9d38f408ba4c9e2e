"""Date parsing for Japanese event listings."""
import logging
import re
from datetime import date
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

FULL_WIDTH_DIGITS = str.maketrans('０１２３４５６７８９', '0123456789')

RANGE_SEPARATOR = r'[～〜~\-－―]'

# Tried in order, first match wins
CROSS_MONTH_PATTERN = re.compile(
    r'(\d{1,2})月(\d{1,2})日[^～〜~\-－―\d]*' + RANGE_SEPARATOR +
    r'\s*(\d{1,2})月(\d{1,2})日'
)
SAME_MONTH_PATTERN = re.compile(
    r'(\d{1,2})月(\d{1,2})日[^～〜~\-－―\d]*' + RANGE_SEPARATOR +
    r'\s*(\d{1,2})日'
)
SINGLE_DAY_PATTERN = re.compile(r'(\d{1,2})月(\d{1,2})日')

# 2月29日 may be up to 8 years away
MAX_YEAR_LOOKAHEAD = 8

DateRange = Tuple[Optional[date], Optional[date]]


def to_half_width(text: str) -> str:
    """Convert full-width digits to ASCII digits."""
    return text.translate(FULL_WIDTH_DIGITS)


def parse_dates(text: str, today: Optional[date] = None) -> DateRange:
    """
    Parse a start/end date pair from listing text.

    The listings never carry a year, so each date is placed on its nearest
    current-or-future occurrence relative to ``today``.

    Args:
        text: Detail text of an event block
        today: Reference date for year inference (default: date.today())

    Returns:
        Tuple of (start_date, end_date); end_date is None for single-day
        events and both are None when nothing parses
    """
    if not text:
        return None, None

    today = today or date.today()
    normalized = to_half_width(text)

    match = CROSS_MONTH_PATTERN.search(normalized)
    if match:
        start_month, start_day, end_month, end_day = (int(g) for g in match.groups())
        return _resolve_range(start_month, start_day, end_month, end_day, today)

    match = SAME_MONTH_PATTERN.search(normalized)
    if match:
        month, start_day, end_day = (int(g) for g in match.groups())
        start = nearest_occurrence(month, start_day, today)
        if start is None:
            return None, None
        return start, _same_month_end(start, end_day)

    match = SINGLE_DAY_PATTERN.search(normalized)
    if match:
        month, day = (int(g) for g in match.groups())
        start = nearest_occurrence(month, day, today)
        return start, None

    return None, None


def nearest_occurrence(month: int, day: int, today: date) -> Optional[date]:
    """
    Find the first date on or after ``today`` with the given month and day.

    Args:
        month: Month number (1-12)
        day: Day of month

    Returns:
        The matching date, or None if month/day never forms a valid date
    """
    for year in range(today.year, today.year + MAX_YEAR_LOOKAHEAD + 1):
        try:
            candidate = date(year, month, day)
        except ValueError:
            continue
        if candidate >= today:
            return candidate
    return None


def _resolve_range(start_month: int, start_day: int, end_month: int,
                   end_day: int, today: date) -> DateRange:
    start = nearest_occurrence(start_month, start_day, today)
    if start is None:
        logger.debug(f"Invalid start date {start_month}/{start_day}")
        return None, None

    end = nearest_occurrence(end_month, end_day, start)
    if end is None:
        logger.debug(f"Invalid end date {end_month}/{end_day}; keeping start only")
    return start, end


def _same_month_end(start: date, end_day: int) -> Optional[date]:
    """End of a 「M月D日～D2日」 range; a smaller D2 wraps into the next month."""
    year, month = start.year, start.month
    if end_day < start.day:
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    try:
        return date(year, month, end_day)
    except ValueError:
        logger.debug(f"Invalid end day {end_day} after {start}; keeping start only")
        return None
