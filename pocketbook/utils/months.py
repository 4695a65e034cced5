"""Calendar-month helpers used by the budget views.

A month is identified by the pair ``(year, month)`` with ``month`` in 1..12.
Functions that depend on "now" accept an optional ``today`` so callers (and
tests) can pin the clock; by default the application time zone is used.
"""
from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional, Tuple

from dateutil import tz
from dateutil.relativedelta import relativedelta

from ..errors import InvalidArgument

DEFAULT_TIMEZONE = "Asia/Singapore"

Month = Tuple[int, int]


def local_today(tz_name: Optional[str] = None) -> date:
    """Today's date in ``tz_name`` (falls back to the app setting, then SGT)."""
    if tz_name is None:
        try:
            from flask import current_app
            tz_name = current_app.config.get("APP_TIMEZONE", DEFAULT_TIMEZONE)
        except RuntimeError:
            # outside an application context
            tz_name = DEFAULT_TIMEZONE
    zone = tz.gettz(tz_name) or tz.UTC
    return datetime.now(zone).date()


def _whole_number(value) -> int:
    # bools and fractional floats are not months; "3" from a query string is
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidArgument("year and month must be integers")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidArgument("year and month must be integers")


def validate_month(year, month) -> Month:
    """Normalise ``(year, month)`` to ints within 0001-01 .. 9999-12."""
    year, month = _whole_number(year), _whole_number(month)
    if not 1 <= month <= 12:
        raise InvalidArgument(f"month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9999:
        raise InvalidArgument(f"year out of range: {year}")
    return year, month


def previous_month(year: int, month: int) -> Month:
    year, month = validate_month(year, month)
    if month == 1:
        if year == 1:
            raise InvalidArgument("there is no month before January of year 1")
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int, today: Optional[date] = None) -> Optional[Month]:
    """The following month, or ``None`` if that would be in the future."""
    year, month = validate_month(year, month)
    nxt = (year + 1, 1) if month == 12 else (year, month + 1)
    today = today or local_today()
    if nxt > (today.year, today.month):
        return None
    return nxt


def is_current_month(year: int, month: int, today: Optional[date] = None) -> bool:
    today = today or local_today()
    return (year, month) == (today.year, today.month)


def is_past_month(year: int, month: int, today: Optional[date] = None) -> bool:
    today = today or local_today()
    return (year, month) < (today.year, today.month)


def days_in_month(year: int, month: int) -> int:
    year, month = validate_month(year, month)
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First day of the month and first day of the following month."""
    year, month = validate_month(year, month)
    start = date(year, month, 1)
    return start, start + relativedelta(months=1)


def month_name(month: int, fmt: str = "long") -> str:
    if not 1 <= month <= 12:
        raise InvalidArgument(f"month must be between 1 and 12, got {month}")
    return calendar.month_abbr[month] if fmt == "short" else calendar.month_name[month]


def ordinal_suffix(n: int) -> str:
    if 11 <= n % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")


def format_date_range(year: int, month: int) -> str:
    """E.g. ``1st Feb 24 - 29th Feb 24``."""
    last = days_in_month(year, month)
    name = month_name(month, "short")
    short_year = str(year)[-2:]
    return f"1st {name} {short_year} - {last}{ordinal_suffix(last)} {name} {short_year}"


def navigation(year: int, month: int, today: Optional[date] = None) -> dict:
    """Everything a month navigator needs to render itself."""
    year, month = validate_month(year, month)
    today = today or local_today()
    prev = previous_month(year, month) if (year, month) != (1, 1) else None
    nxt = next_month(year, month, today=today)
    return {
        "year": year,
        "month": month,
        "label": f"{month_name(month)} {year}",
        "date_range": format_date_range(year, month),
        "previous": {"year": prev[0], "month": prev[1]} if prev else None,
        "next": {"year": nxt[0], "month": nxt[1]} if nxt else None,
        "is_current_month": is_current_month(year, month, today=today),
        "is_past_month": is_past_month(year, month, today=today),
    }
