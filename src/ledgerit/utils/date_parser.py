"""Date parsing and reporting period utilities."""

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Any, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

YEAR_FIRST = re.compile(r"^\d{4}\D")


def parse_date(date_str: str) -> date:
    """Parse a user-supplied date string into a date object.

    Supports absolute dates ("2026-01-15", "January 15, 2026") and the
    relative phrases "today", "yesterday", "last month", "this month",
    "last year" and "this year" (month/year phrases resolve to the first day).

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_feed_date(value: Any) -> Optional[date]:
    """Parse a date cell from a transaction feed.

    ISO dates and timestamps ("2026-01-05", "2026-01-05T10:15:00Z") are read
    as-is. Other year-leading dates ("2026/01/05", "2026.1.5") are read
    year-month-day; anything else goes through dateutil with day-first
    ordering, the convention of the spreadsheets the feeds come from. Returns
    None when the cell is empty or unparsable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass

    year_first = YEAR_FIRST.match(text) is not None
    try:
        return date_parser.parse(text, yearfirst=year_first, dayfirst=not year_first).date()
    except (ValueError, TypeError, OverflowError):
        return None


def month_range(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def year_range(year: int) -> tuple[date, date]:
    """Return January 1 and December 31 of a year."""
    return date(year, 1, 1), date(year, 12, 31)


def previous_period(start: date, end: date) -> tuple[date, date]:
    """Return the comparison period immediately preceding ``[start, end]``.

    Whole calendar months and years step back by the same number of months;
    any other range steps back by its length in days.
    """
    if start.day == 1 and end == month_range(end.year, end.month)[1]:
        months = (end.year - start.year) * 12 + (end.month - start.month) + 1
        prev_start = start - relativedelta(months=months)
        prev_end = start - timedelta(days=1)
        return prev_start, prev_end

    length = end - start
    prev_end = start - timedelta(days=1)
    return prev_end - length, prev_end


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of this-month, this-year, last-month, last-year, or an
            explicit "YYYY-MM" month or "YYYY" year

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return today.replace(day=1), today
    if period == "this-year":
        return today.replace(month=1, day=1), today
    if period == "last-month":
        last = today - relativedelta(months=1)
        return month_range(last.year, last.month)
    if period == "last-year":
        return year_range(today.year - 1)

    try:
        if len(period) == 7 and period[4] == "-":
            return month_range(int(period[:4]), int(period[5:]))
        if len(period) == 4:
            return year_range(int(period))
    except ValueError:
        pass

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-month, this-year, "
        "last-month, last-year, YYYY-MM, YYYY"
    )
