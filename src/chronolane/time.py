# SPDX-License-Identifier: MIT

import datetime
from typing import Any, Optional

import pendulum

DATE_FORMAT = "YYYY-MM-DD"


def today_local() -> pendulum.Date:
    return pendulum.today("local").date()


def date_from_str(date_str: str) -> pendulum.Date:
    """Parse 'YYYY-MM-DD' (or a full ISO datetime) into a calendar date."""
    parsed = pendulum.parse(date_str.strip(), exact=True)
    if isinstance(parsed, pendulum.DateTime):
        return parsed.date()
    if isinstance(parsed, pendulum.Date):
        return parsed
    raise ValueError(f"Not a calendar date: {date_str!r}")


def to_date(value: Any) -> pendulum.Date:
    """
    Normalize a loosely-typed date value into a pendulum.Date.

    Accepts strings, pendulum dates/datetimes and standard library
    dates/datetimes. Anything else raises ValueError.
    """
    if isinstance(value, pendulum.DateTime):
        return value.date()
    if isinstance(value, datetime.datetime):
        return pendulum.instance(value).date()
    if isinstance(value, pendulum.Date):
        return value
    if isinstance(value, datetime.date):
        return pendulum.date(value.year, value.month, value.day)
    if isinstance(value, str) and value.strip() != "":
        return date_from_str(value)
    raise ValueError(f"Unsupported date value: {value!r}")


def date_to_str(date: pendulum.Date) -> str:
    return date.format(DATE_FORMAT)


def date_to_display_str(date: pendulum.Date) -> str:
    return date.format("MMM-DD ddd")


def date_key(value: Any) -> Optional[str]:
    """
    Return the normalized 'YYYY-MM-DD' key for a date value, or None when
    the value is missing or cannot be parsed.
    """
    if value is None:
        return None
    try:
        return date_to_str(to_date(value))
    except ValueError:
        return None


def days_between(start: pendulum.Date, end: pendulum.Date) -> int:
    """Signed number of whole days from start to end."""
    return start.diff(end, False).in_days()
