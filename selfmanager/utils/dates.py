"""ISO-8601 date helpers.

Dates travel as plain ISO-8601 strings; calendar days are compared on their
``YYYY-MM-DD`` prefix with no timezone handling.
"""

from datetime import date, datetime, timezone


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def today_iso() -> str:
    return date.today().isoformat()


def day_of(value: str | date | datetime | None) -> str | None:
    """Return the ``YYYY-MM-DD`` calendar day of a date, datetime or ISO string."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value[:10]
