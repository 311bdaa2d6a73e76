"""Calendar date helpers for residency accounting.

All arithmetic runs on ``datetime.date``, which carries no time of day or
UTC offset, so day counts are exact.
"""

from datetime import date, datetime, timedelta

ONE_DAY = timedelta(days=1)

ISO_DATE_FORMAT = "%Y-%m-%d"


def parse_iso_date(value: object) -> date | None:
    """Parse a YYYY-MM-DD calendar date.

    Args:
        value: ISO date string, an existing date, or None

    Returns:
        The date, or None when the input is empty, of another type, or not a
        valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return datetime.strptime(text, ISO_DATE_FORMAT).date()
    except ValueError:
        return None


def add_years(d: date, years: int) -> date:
    """Shift a date by whole calendar years.

    Feb 29 shifted into a year without a leap day becomes Mar 1.
    """
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        return date(d.year + years, 3, 1)


def trailing_window(reference: date) -> tuple[date, date]:
    """Return the half-open trailing one-year window ending on ``reference``.

    The window includes the reference day: it starts one calendar year
    earlier plus one day and ends (exclusive) the day after the reference.

    Raises:
        OverflowError, ValueError: If the window falls outside the date range
    """
    window_start = add_years(reference, -1) + ONE_DAY
    window_end_exclusive = reference + ONE_DAY
    return window_start, window_end_exclusive


def days_between(start: date, end: date) -> int:
    """Whole days from start to end."""
    return (end - start).days


def format_dmy(d: date | None) -> str:
    """Format a date as DD.MM.YYYY (empty string for None)."""
    if d is None:
        return ""
    return f"{d.day:02d}.{d.month:02d}.{d.year}"
