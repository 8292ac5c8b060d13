"""
Task Enrichment Utilities

Local heuristics that attach a priority and an optional due date to task
strings returned by the model.
"""

import re
from datetime import date, timedelta
from typing import Optional

URGENT_KEYWORDS = ['urgent', 'asap', 'immediately', 'critical', 'important']
MEDIUM_KEYWORDS = ['soon', 'next', 'later', 'should']

WEEKDAYS = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']

_DAY_FIRST_DATE = re.compile(r'\b(\d{1,2})[/-](\d{1,2})[/-](\d{4})\b')
_ISO_DATE = re.compile(r'\b(\d{4})[/-](\d{1,2})[/-](\d{1,2})\b')
_RELATIVE_DATE = re.compile(r'\b(tomorrow|today|next week|next month)\b', re.IGNORECASE)
_WEEKDAY = re.compile(r'\b(' + '|'.join(WEEKDAYS) + r')\b', re.IGNORECASE)


def analyze_task_priority(text: str) -> str:
    """
    Classify a task as 'High', 'Medium' or 'Low' priority by keyword.

    Urgent keywords win over medium ones; anything else is 'Low'.
    """
    lower_text = text.lower()

    if any(keyword in lower_text for keyword in URGENT_KEYWORDS):
        return 'High'

    if any(keyword in lower_text for keyword in MEDIUM_KEYWORDS):
        return 'Medium'

    return 'Low'


def extract_date_from_text(text: str, today: Optional[date] = None) -> Optional[str]:
    """
    Find a due date mentioned in a task.

    Recognizes, in this order: YYYY-MM-DD (or '/'), DD-MM-YYYY (or '/'),
    today / tomorrow / next week / next month, and weekday names (the next
    occurrence after `today`).

    Args:
        text: Task text
        today: Reference date for relative expressions (defaults to today)

    Returns:
        ISO date string (YYYY-MM-DD), or None if nothing valid was found
    """
    today = today or date.today()

    match = _ISO_DATE.search(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        parsed = _safe_date(year, month, day)
        if parsed:
            return parsed.isoformat()

    match = _DAY_FIRST_DATE.search(text)
    if match:
        day, month, year = (int(part) for part in match.groups())
        parsed = _safe_date(year, month, day)
        if parsed:
            return parsed.isoformat()

    match = _RELATIVE_DATE.search(text)
    if match:
        keyword = match.group(1).lower()
        if keyword == 'today':
            return today.isoformat()
        if keyword == 'tomorrow':
            return (today + timedelta(days=1)).isoformat()
        if keyword == 'next week':
            return (today + timedelta(weeks=1)).isoformat()
        return _add_month(today).isoformat()

    match = _WEEKDAY.search(text)
    if match:
        target = WEEKDAYS.index(match.group(1).lower())
        days_ahead = (target - today.weekday()) % 7 or 7
        return (today + timedelta(days=days_ahead)).isoformat()

    return None


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _add_month(value: date) -> date:
    """Same day next month, clamped to the last day of that month."""
    year = value.year + (1 if value.month == 12 else 0)
    month = 1 if value.month == 12 else value.month + 1
    day = value.day
    while day > 28:
        parsed = _safe_date(year, month, day)
        if parsed:
            return parsed
        day -= 1
    return date(year, month, day)
