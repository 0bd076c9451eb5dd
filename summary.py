"""Week and month aggregation of per-day calculations."""

from __future__ import annotations

from calendar import monthrange
from collections.abc import Callable, Mapping
from datetime import date, timedelta
from typing import Optional, Union

from calculator import calculate
from models import MonthSummary, PeriodTotals, RateCard, TimesheetEntry, WeekSummary
from utils import get_week_start

EntryLookup = Union[Callable[[date], Optional[TimesheetEntry]], Mapping[date, TimesheetEntry]]


def _lookup_fn(lookup: EntryLookup) -> Callable[[date], TimesheetEntry | None]:
    if isinstance(lookup, Mapping):
        return lookup.get
    return lookup


def _collect(lookup: EntryLookup, start: date, days: int) -> list[tuple[TimesheetEntry, str | None]]:
    """Entries for consecutive dates, each paired with the prior day's wrap.

    The day before start is looked up too so the first day's turnaround can
    be checked.
    """
    get = _lookup_fn(lookup)
    found = []
    previous = get(start - timedelta(days=1))
    for i in range(days):
        entry = get(start + timedelta(days=i))
        if entry is not None:
            found.append((entry, previous.wrap_out if previous else None))
        previous = entry
    return found


def _accumulate(
    totals: PeriodTotals,
    rate_card: RateCard,
    entries: list[tuple[TimesheetEntry, str | None]],
) -> None:
    # Per-day figures are already rounded; totals are their plain sum
    for entry, previous_wrap_out in entries:
        calc = calculate(rate_card, entry, previous_wrap_out)
        totals.entries.append(entry)
        totals.calculations.append(calc)
        totals.days_logged += 1

        totals.total_hours += calc.total_hours
        totals.pre_call_hours += calc.pre_call_hours
        totals.base_hours += calc.base_hours
        totals.ot_hours += calc.ot_hours
        totals.late_night_hours += calc.late_night_hours
        if entry.is_seventh_day:
            totals.seventh_day_hours += calc.total_hours
        elif entry.is_sixth_day:
            totals.sixth_day_hours += calc.total_hours

        totals.pre_call_earnings += calc.pre_call_earnings
        totals.daily_earnings += calc.daily_earnings
        totals.ot_earnings += calc.ot_earnings
        totals.late_night_earnings += calc.late_night_earnings
        totals.sixth_day_bonus += calc.sixth_day_bonus
        totals.seventh_day_bonus += calc.seventh_day_bonus
        totals.total_earnings += calc.total_earnings

        if entry.is_complete:
            totals.days_worked += 1
            totals.kit_rental_total += calc.kit_rental
        if calc.broken_lunch:
            totals.broken_lunches += 1
        if calc.broken_turnaround:
            totals.broken_turnarounds += 1


def week_summary(rate_card: RateCard, anchor: date, lookup: EntryLookup) -> WeekSummary:
    """Summarise the Monday-to-Sunday week containing anchor.

    lookup is either a callable returning the entry for a date (or None) or a
    mapping keyed by date. The Sunday before the week is read for Monday's
    turnaround check but is not counted.
    """
    start = get_week_start(anchor)
    summary = WeekSummary(start_date=start, end_date=start + timedelta(days=6))
    _accumulate(summary, rate_card, _collect(lookup, start, 7))
    return summary


def month_summary(rate_card: RateCard, year: int, month: int, lookup: EntryLookup) -> MonthSummary:
    """Summarise every logged day in a calendar month."""
    summary = MonthSummary(year=year, month=month)
    _accumulate(summary, rate_card, _collect(lookup, date(year, month, 1), monthrange(year, month)[1]))
    return summary
