"""Best-effort parsing of publication dates shown on listing pages."""
import re

from dateutil import parser as date_parser
from loguru import logger


# Indonesian month names as they appear on the source site
INDONESIAN_MONTHS = {
    "januari": "01",
    "februari": "02",
    "maret": "03",
    "april": "04",
    "mei": "05",
    "juni": "06",
    "juli": "07",
    "agustus": "08",
    "september": "09",
    "oktober": "10",
    "november": "11",
    "desember": "12",
}

_YEAR_PATTERN = re.compile(r"\b(20\d{2})\b")
_DAY_PATTERN = re.compile(r"\b(\d{1,2})\b")


def parse_published_date(date_text: str | None) -> str | None:
    """
    Parse free-form date text into an ISO ``YYYY-MM-DD`` string.

    Strategy:
    1. Generic parsing with dateutil (ISO dates, English month names, ...)
    2. Indonesian month name lookup: when the text contains a month name,
       the first ``20xx`` year and first 1-2 digit number (day) found in
       the same string are combined with the month number

    Args:
        date_text: Raw text from a date-like element

    Returns:
        ``YYYY-MM-DD`` string, or None when neither strategy succeeds
        (callers substitute the current date)

    Example:
        >>> parse_published_date("15 Januari 2024")
        '2024-01-15'
        >>> parse_published_date("unknown") is None
        True
    """
    if not date_text or not date_text.strip():
        return None

    text = date_text.strip()

    try:
        return date_parser.parse(text).date().isoformat()
    except (ValueError, OverflowError):
        logger.debug(f"Generic date parsing failed for {text!r}, trying month names")

    lower_text = text.lower()
    for month_name, month_number in INDONESIAN_MONTHS.items():
        if month_name not in lower_text:
            continue

        year_match = _YEAR_PATTERN.search(text)
        day_match = _DAY_PATTERN.search(text)
        if year_match and day_match:
            day = day_match.group(1).zfill(2)
            return f"{year_match.group(1)}-{month_number}-{day}"

    return None
