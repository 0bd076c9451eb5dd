"""Utility functions for call-time and week calculations."""

from __future__ import annotations

import re
from calendar import monthrange
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

TWO_PLACES = Decimal("0.01")
HOURS_IN_DAY = Decimal("24")
LATE_NIGHT_START = Decimal("23")
# Wrap clock values below this are read as after midnight
AFTER_MIDNIGHT_CUTOFF = Decimal("6")
TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})", re.ASCII)


def round2(value: Decimal) -> Decimal:
    """Round to 2 decimal places, halves away from zero."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def parse_time(val: str | None) -> Decimal | None:
    """Parse 'HH:MM' into fractional hours. Returns None for anything unparseable."""
    if not val:
        return None
    match = TIME_PATTERN.fullmatch(val.strip())
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        return None
    return Decimal(hours) + Decimal(minutes) / Decimal(60)


def hours_diff(start: str | None, end: str | None) -> Decimal:
    """Hours from start to end, wrapping past midnight. 0 if either is invalid."""
    start_hours = parse_time(start)
    end_hours = parse_time(end)
    if start_hours is None or end_hours is None:
        return Decimal("0")

    diff = end_hours - start_hours
    if diff < 0:
        diff += HOURS_IN_DAY
    return diff


def late_night_clock(wrap: str | None) -> Decimal | None:
    """Wrap time on a 0-30h clock so 00:30 reads as 24.5 rather than 0.5."""
    wrap_hours = parse_time(wrap)
    if wrap_hours is None:
        return None
    if wrap_hours < AFTER_MIDNIGHT_CUTOFF:
        wrap_hours += HOURS_IN_DAY
    return wrap_hours


def format_hours(value: Decimal) -> str:
    """Format hours for display, e.g. 10.5 -> '10.5h', 0 -> '-'."""
    if not value:
        return "-"
    return f"{float(value):g}h"


def get_week_start(d: date) -> date:
    """Get the Monday that starts the week containing date d."""
    return d - timedelta(days=d.weekday())


def get_weeks_in_month(year: int, month: int) -> list[tuple[date, date]]:
    """Get list of (week_start, week_end) tuples that overlap with the month."""
    first_day = date(year, month, 1)
    last_day = date(year, month, monthrange(year, month)[1])

    weeks = []
    week_start = get_week_start(first_day)

    while week_start <= last_day:
        week_end = week_start + timedelta(days=6)
        weeks.append((week_start, week_end))
        week_start = week_start + timedelta(days=7)

    return weeks


def get_uk_holidays(start: date, end: date) -> dict[date, str]:
    """Get England bank holidays falling between two dates (inclusive)."""
    import holidays
    years = list(range(start.year, end.year + 1))
    uk_holidays = holidays.UK(years=years, subdiv='ENG')  # type: ignore[attr-defined]
    return {d: name for d, name in uk_holidays.items() if start <= d <= end}
