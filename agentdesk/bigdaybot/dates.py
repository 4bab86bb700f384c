"""
Date normalization for imported contact dates.

Everything is stored as YYYY-MM-DD. Slash and dash dates are always read
month-first (US style); day-first exports are not detected.
"""

import re
from datetime import datetime
from typing import Optional

import logging

logger = logging.getLogger(__name__)

US_SLASH_DATE = re.compile(r'^(\d{1,2})/(\d{1,2})/(\d{4})$')
ISO_DATE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')
US_DASH_DATE = re.compile(r'^(\d{1,2})-(\d{1,2})-(\d{4})$')

# Last-resort formats, tried in order
FALLBACK_FORMATS = [
    '%Y-%m-%dT%H:%M:%S.%fZ',
    '%Y-%m-%dT%H:%M:%SZ',
    '%Y-%m-%dT%H:%M:%S.%f',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%d %H:%M:%S',
    '%Y/%m/%d',
    '%B %d, %Y',
    '%b %d, %Y',
    '%B %d %Y',
    '%b %d %Y',
    '%d %B %Y',
    '%d %b %Y',
    '%m/%d/%y',
]


def _pad(year: str, month: str, day: str) -> str:
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def normalize_date(value: Optional[str]) -> Optional[str]:
    """
    Normalize a date-like string to YYYY-MM-DD.

    Returns None for blank or unparseable input; never raises.
    """
    if not value or not value.strip():
        return None

    cleaned = value.strip()

    match = US_SLASH_DATE.match(cleaned)
    if match:
        month, day, year = match.groups()
        return _pad(year, month, day)

    if ISO_DATE.match(cleaned):
        return cleaned

    match = US_DASH_DATE.match(cleaned)
    if match:
        month, day, year = match.groups()
        return _pad(year, month, day)

    for fmt in FALLBACK_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).strftime('%Y-%m-%d')
        except ValueError:
            continue

    logger.debug(f"Could not parse date: {cleaned}")
    return None
