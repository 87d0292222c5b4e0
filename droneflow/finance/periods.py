"""Mini README: Calendar helpers for monthly settlement periods.

Structure:
    * coerce_date - parse ISO strings/date/datetime values, naming bad fields.
    * validate_month - guard month/year pairs before computing bounds.
    * month_bounds - inclusive first/last day of a calendar month.
    * month_key / parse_month_key - the ``"M/YYYY"`` key used by closed months.
    * month_label - human label such as ``"May 2024"``.
    * falls_within - inclusive date range membership.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Tuple

from ..errors import MalformedInputError


def coerce_date(value: object, field: str = "date") -> date:
    """Return ``value`` as a ``date``, raising ``MalformedInputError`` otherwise."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError as error:
            raise MalformedInputError(field, value, "expected an ISO date") from error
    raise MalformedInputError(field, value, "expected an ISO string or date instance")


def validate_month(month: int, year: int) -> Tuple[int, int]:
    """Return the pair as integers, rejecting impossible months and years."""

    try:
        month_number = int(month)
    except (TypeError, ValueError) as error:
        raise MalformedInputError("month", month) from error
    try:
        year_number = int(year)
    except (TypeError, ValueError) as error:
        raise MalformedInputError("year", year) from error
    if not 1 <= month_number <= 12:
        raise MalformedInputError("month", month, "must be between 1 and 12")
    if not 1 <= year_number <= 9999:
        raise MalformedInputError("year", year, "must be between 1 and 9999")
    return month_number, year_number


def month_bounds(month: int, year: int) -> Tuple[date, date]:
    """Return the inclusive (first day, last day) of the month."""

    month, year = validate_month(month, year)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def month_key(month: int, year: int) -> str:
    """Build the ``"M/YYYY"`` key (no zero padding) identifying a settlement."""

    month, year = validate_month(month, year)
    return f"{month}/{year}"


def parse_month_key(key: str) -> Tuple[int, int]:
    """Split a ``"M/YYYY"`` key back into (month, year)."""

    if not isinstance(key, str) or key.count("/") != 1:
        raise MalformedInputError("month_year", key, "expected M/YYYY")
    month_text, year_text = key.strip().split("/")
    try:
        month, year = int(month_text), int(year_text)
    except ValueError as error:
        raise MalformedInputError("month_year", key, "expected M/YYYY") from error
    try:
        return validate_month(month, year)
    except MalformedInputError as error:
        raise MalformedInputError("month_year", key, str(error)) from error


def month_label(month: int, year: int) -> str:
    """Return ``"<Month> <Year>"`` for display and reports."""

    month, year = validate_month(month, year)
    return f"{calendar.month_name[month]} {year}"


def falls_within(value: date, start: date, end: date) -> bool:
    """Inclusive on both ends."""

    return start <= value <= end


def months_elapsed_in_year(today: date) -> int:
    """Number of calendar months from January up to and including ``today``'s month."""

    return today.month
