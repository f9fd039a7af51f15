"""
Date helpers for record fields and reporting periods.

All record dates are stored as zero-padded ``YYYY-MM-DD`` strings so that
plain string comparison orders them chronologically.
"""

import calendar
import re
from datetime import date, datetime, timezone
from typing import Optional, Union

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[str, date]


def normalize_date(value: DateLike, field_name: str = "date") -> str:
    """
    Convert a date or date string to the canonical ``YYYY-MM-DD`` form.

    Args:
        value: A ``date``/``datetime`` or an ISO date string
        field_name: Name used in error messages

    Returns:
        The zero-padded ISO date string

    Raises:
        ValueError: If the value is not a valid zero-padded ISO date
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        raise ValueError(f"{field_name} must be a YYYY-MM-DD date, got {value!r}")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError(
            f"{field_name} is not a valid calendar date: {value!r}"
        ) from None
    return value


def normalize_optional_date(
    value: Optional[DateLike], field_name: str = "date"
) -> Optional[str]:
    """Like :func:`normalize_date` but maps ``None`` and ``""`` to ``None``."""
    if value is None or value == "":
        return None
    return normalize_date(value, field_name)


def today_iso() -> str:
    """Today's local date as ``YYYY-MM-DD``."""
    return date.today().isoformat()


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 timestamp with millisecond precision."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def month_bounds(for_date: Optional[date] = None) -> tuple[str, str]:
    """
    Get the first and last day of the calendar month containing ``for_date``.

    Args:
        for_date: Any day in the month (defaults to today)

    Returns:
        Tuple of (first_day, last_day) as ISO date strings
    """
    if for_date is None:
        for_date = date.today()
    last_day = calendar.monthrange(for_date.year, for_date.month)[1]
    return (
        date(for_date.year, for_date.month, 1).isoformat(),
        date(for_date.year, for_date.month, last_day).isoformat(),
    )
