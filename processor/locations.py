"""Prefecture, city and venue inference from event text."""
import re
from typing import Optional, Sequence

from processor.text import sanitize_description
from scraper.sources import ALL_PREFECTURES

PARENTHESIZED_PATTERN = re.compile(r'[（(]([^）)]+)[）)]')
PARENTHESIZED_CITY_PATTERN = re.compile(r'[（(]([^）)\s]+?[市区町村])[）)]')
CITY_PATTERN = re.compile(r'([^\s（）()、。]+?[市区町村])')
VENUE_PATTERN = re.compile(r'会場[／/：:]\s*([^（(主催連絡☎]+)')


def extract_prefecture(title: str, content: str,
                       prefectures: Sequence[str]) -> Optional[str]:
    """
    Infer the prefecture an event takes place in.

    Precedence: a parenthesized prefecture in the title, then the first
    known prefecture mentioned in the content, then the source's first
    configured prefecture.

    Args:
        title: Event title
        content: Event detail text
        prefectures: Prefectures configured for the source, in order

    Returns:
        Prefecture name, or None only when ``prefectures`` is empty
    """
    known = list(prefectures) + [p for p in ALL_PREFECTURES if p not in prefectures]

    for candidate in PARENTHESIZED_PATTERN.findall(title or ''):
        candidate = candidate.strip()
        if candidate in known:
            return candidate

    if content:
        for prefecture in known:
            if prefecture in content:
                return prefecture

    return prefectures[0] if prefectures else None


def extract_venue(content: str) -> Optional[str]:
    """Return the text following a 会場／ label without contact numbers, if any."""
    match = VENUE_PATTERN.search(content or '')
    if match:
        venue = sanitize_description(match.group(1))
        return venue or None
    return None


def extract_city(content: str, venue: Optional[str] = None) -> Optional[str]:
    """
    Extract a municipality (…市/区/町/村) from the detail text.

    A parenthesized municipality anywhere in the content wins; otherwise the
    venue text is searched. Free text outside the venue is never searched,
    so a resolved prefecture does not imply a city.

    Args:
        content: Event detail text
        venue: Venue text extracted from a 会場／ label

    Returns:
        City name or None
    """
    match = PARENTHESIZED_CITY_PATTERN.search(content or '')
    if match:
        return match.group(1)

    if venue:
        match = PARENTHESIZED_CITY_PATTERN.search(venue) or CITY_PATTERN.search(venue)
        if match:
            return match.group(1)

    return None
