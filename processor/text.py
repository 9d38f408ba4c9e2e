"""Clean-up of scraped description text."""
import re

DIGIT = r'[0-9０-９]'
DASH = r'[-－‐―ー−]'

# Area code, exchange and subscriber groups, e.g. 03-1234-5678 or (03)1234-5678
PHONE_PATTERN = re.compile(
    r'(?:(?:TEL|Tel|tel|電話)\s*[：:.]?\s*)?'
    r'(?<![0-9０-９])'
    r'(?:' + DIGIT + r'{2,5}' + DASH + r'|[（(]' + DIGIT + r'{2,5}[）)])'
    + DIGIT + r'{1,4}' + DASH + DIGIT + r'{3,4}'
    r'(?![0-9０-９])'
)
PHONE_ICON_PATTERN = re.compile(r'&#x0*260[eE];|&#0*9742;|☎|☏')
WHITESPACE_PATTERN = re.compile(r'\s+')


def sanitize_description(text: str) -> str:
    """
    Remove phone numbers and telephone icons from description text.

    Only phone-shaped digit groups are removed; dates, prices and venue
    names stay as they are.

    Args:
        text: Raw detail text

    Returns:
        Cleaned text with whitespace collapsed
    """
    if not text:
        return ''
    text = PHONE_ICON_PATTERN.sub(' ', text)
    text = PHONE_PATTERN.sub(' ', text)
    return WHITESPACE_PATTERN.sub(' ', text).strip()
