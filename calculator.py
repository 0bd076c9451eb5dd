"""Day-rate calculation for a single timesheet entry.

``calculate`` is a pure function of a rate card and one day's entry. It never
raises: missing or malformed times contribute zero hours, unknown day types
are treated as SWD, and an entry without both unit call and wrap comes back
as an all-zero calculation.
"""

from __future__ import annotations

from decimal import Decimal

from models import DAY_TYPE_CWD, RateCard, TimesheetCalculation, TimesheetEntry
from rules import get_lunch_deduction, get_ot_threshold
from utils import LATE_NIGHT_START, hours_diff, late_night_clock, parse_time, round2

ZERO = Decimal("0")
ONE = Decimal("1")
# Lunch must be called within this many hours of unit call
BROKEN_LUNCH_HOURS = Decimal("6")
# Minimum rest between wrap and the next call
MINIMUM_TURNAROUND_HOURS = Decimal("11")


def empty_calculation() -> TimesheetCalculation:
    """Calculation for an incomplete entry."""
    return TimesheetCalculation()


def get_hourly_rate(rate_card: RateCard) -> Decimal:
    if rate_card.base_day_hours <= 0:
        return ZERO
    return rate_card.daily_rate / rate_card.base_day_hours


def is_broken_lunch(entry: TimesheetEntry) -> bool:
    """True when the call-sheet lunch falls less than 6 hours after unit call.

    Continuous days have no fixed lunch break, so they never flag.
    """
    if entry.day_type == DAY_TYPE_CWD:
        return False
    if parse_time(entry.call_sheet_lunch) is None or parse_time(entry.unit_call) is None:
        return False
    return hours_diff(entry.unit_call, entry.call_sheet_lunch) < BROKEN_LUNCH_HOURS


def get_turnaround_hours(entry: TimesheetEntry, previous_wrap_out: str | None) -> Decimal | None:
    """Rest between the previous day's wrap and this day's first call.

    The first call is pre-call when there is one, otherwise unit call.
    Returns None when either end is missing or unparseable.
    """
    call = entry.pre_call if parse_time(entry.pre_call) is not None else entry.unit_call
    if parse_time(previous_wrap_out) is None or parse_time(call) is None:
        return None
    return hours_diff(previous_wrap_out, call)


def is_broken_turnaround(entry: TimesheetEntry, previous_wrap_out: str | None) -> bool:
    turnaround = get_turnaround_hours(entry, previous_wrap_out)
    return turnaround is not None and turnaround < MINIMUM_TURNAROUND_HOURS


def get_late_night_hours(wrap_out: str | None) -> Decimal:
    """Hours worked past 23:00, reading early-morning wraps as next day."""
    wrap_clock = late_night_clock(wrap_out)
    if wrap_clock is None:
        return ZERO
    return max(ZERO, wrap_clock - LATE_NIGHT_START)


def calculate(
    rate_card: RateCard,
    entry: TimesheetEntry,
    previous_wrap_out: str | None = None,
) -> TimesheetCalculation:
    """Work out hours and earnings for one day.

    previous_wrap_out is the prior calendar day's wrap, used only for the
    turnaround check; it never changes pay.
    """
    if not entry.is_complete:
        return empty_calculation()

    hourly_rate = get_hourly_rate(rate_card)

    pre_call_hours = hours_diff(entry.pre_call, entry.unit_call) if entry.pre_call else ZERO
    pre_call_earnings = pre_call_hours * hourly_rate * rate_card.pre_call_multiplier

    raw_working_hours = hours_diff(entry.unit_call, entry.wrap_out)
    lunch_deduction = get_lunch_deduction(entry.day_type)
    working_hours = max(ZERO, raw_working_hours - lunch_deduction)

    broken_lunch = is_broken_lunch(entry)
    late_night_hours = get_late_night_hours(entry.wrap_out)

    ot_threshold = get_ot_threshold(entry.day_type, rate_card.base_day_hours)
    base_hours = max(ZERO, min(working_hours, ot_threshold))
    # Late night hours come out of the OT pool so they are paid once
    ot_hours = max(ZERO, working_hours - ot_threshold - late_night_hours)
    total_hours = pre_call_hours + working_hours

    daily_earnings = base_hours * hourly_rate
    ot_earnings = ot_hours * hourly_rate * rate_card.ot_multiplier
    late_night_earnings = late_night_hours * hourly_rate * rate_card.late_night_multiplier

    base_earnings = pre_call_earnings + daily_earnings + ot_earnings + late_night_earnings
    sixth_day_bonus = ZERO
    seventh_day_bonus = ZERO
    if entry.is_seventh_day:
        seventh_day_bonus = base_earnings * (rate_card.seventh_day_multiplier - ONE)
    elif entry.is_sixth_day:
        sixth_day_bonus = base_earnings * (rate_card.sixth_day_multiplier - ONE)

    turnaround_hours = get_turnaround_hours(entry, previous_wrap_out)

    pre_call_earnings = round2(pre_call_earnings)
    daily_earnings = round2(daily_earnings)
    ot_earnings = round2(ot_earnings)
    late_night_earnings = round2(late_night_earnings)
    sixth_day_bonus = round2(sixth_day_bonus)
    seventh_day_bonus = round2(seventh_day_bonus)
    kit_rental = round2(rate_card.kit_rental)
    # Total is exactly the sum of the rounded components
    total_earnings = (
        pre_call_earnings + daily_earnings + ot_earnings + late_night_earnings
        + sixth_day_bonus + seventh_day_bonus + kit_rental
    )

    return TimesheetCalculation(
        pre_call_hours=round2(pre_call_hours),
        pre_call_earnings=pre_call_earnings,
        raw_working_hours=round2(raw_working_hours),
        lunch_deduction=round2(lunch_deduction),
        working_hours=round2(working_hours),
        ot_threshold=round2(ot_threshold),
        base_hours=round2(base_hours),
        ot_hours=round2(ot_hours),
        late_night_hours=round2(late_night_hours),
        total_hours=round2(total_hours),
        hourly_rate=round2(hourly_rate),
        daily_earnings=daily_earnings,
        ot_earnings=ot_earnings,
        late_night_earnings=late_night_earnings,
        sixth_day_bonus=sixth_day_bonus,
        seventh_day_bonus=seventh_day_bonus,
        kit_rental=kit_rental,
        total_earnings=total_earnings,
        broken_lunch=broken_lunch,
        turnaround_hours=round2(turnaround_hours) if turnaround_hours is not None else ZERO,
        broken_turnaround=is_broken_turnaround(entry, previous_wrap_out),
    )
