from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

ZERO = Decimal("0")

DAY_TYPE_SWD = "SWD"
DAY_TYPE_SCWD = "SCWD"
DAY_TYPE_CWD = "CWD"

ENTRY_STATUSES = ("draft", "pending", "approved")


def _blank_to_none(val: str | None) -> str | None:
    if val is None:
        return None
    val = val.strip()
    return val or None


@dataclass
class RateCard:
    daily_rate: Decimal = Decimal("0")
    base_day_hours: Decimal = Decimal("11")
    ot_multiplier: Decimal = Decimal("1.5")
    pre_call_multiplier: Decimal = Decimal("1.5")
    late_night_multiplier: Decimal = Decimal("2.0")
    sixth_day_multiplier: Decimal = Decimal("1.5")
    seventh_day_multiplier: Decimal = Decimal("2.0")
    kit_rental: Decimal = Decimal("0")
    currency: str = "GBP"

    MULTIPLIER_FIELDS = (
        "ot_multiplier",
        "pre_call_multiplier",
        "late_night_multiplier",
        "sixth_day_multiplier",
        "seventh_day_multiplier",
    )

    def problems(self) -> list[str]:
        """List the ways this card breaks its invariants (empty when valid)."""
        found = []
        if self.base_day_hours <= 0:
            found.append("base_day_hours must be greater than 0")
        for name in self.MULTIPLIER_FIELDS:
            if getattr(self, name) < 1:
                found.append(f"{name} must be at least 1.0")
        if self.daily_rate < 0:
            found.append("daily_rate cannot be negative")
        if self.kit_rental < 0:
            found.append("kit_rental cannot be negative")
        return found


@dataclass
class TimesheetEntry:
    date: date
    unit_call: str | None = None
    wrap_out: str | None = None
    pre_call: str | None = None
    day_type: str = DAY_TYPE_SWD
    is_sixth_day: bool = False
    is_seventh_day: bool = False
    call_sheet_lunch: str | None = None
    production_day: int | None = None
    notes: str | None = None
    status: str = "draft"
    auto_filled_from: str | None = None

    def __post_init__(self):
        # "" means absent, never a time
        self.unit_call = _blank_to_none(self.unit_call)
        self.wrap_out = _blank_to_none(self.wrap_out)
        self.pre_call = _blank_to_none(self.pre_call)
        self.call_sheet_lunch = _blank_to_none(self.call_sheet_lunch)

    @property
    def day_of_week(self) -> str:
        return self.date.strftime("%a")

    @property
    def is_complete(self) -> bool:
        """True when the shift has both a unit call and a wrap."""
        return self.unit_call is not None and self.wrap_out is not None


@dataclass(frozen=True)
class TimesheetCalculation:
    """Hours and earnings breakdown for one day. Derived, never stored."""

    pre_call_hours: Decimal = ZERO
    pre_call_earnings: Decimal = ZERO
    raw_working_hours: Decimal = ZERO
    lunch_deduction: Decimal = ZERO
    working_hours: Decimal = ZERO
    ot_threshold: Decimal = ZERO
    base_hours: Decimal = ZERO
    ot_hours: Decimal = ZERO
    late_night_hours: Decimal = ZERO
    total_hours: Decimal = ZERO
    hourly_rate: Decimal = ZERO
    daily_earnings: Decimal = ZERO
    ot_earnings: Decimal = ZERO
    late_night_earnings: Decimal = ZERO
    sixth_day_bonus: Decimal = ZERO
    seventh_day_bonus: Decimal = ZERO
    kit_rental: Decimal = ZERO
    total_earnings: Decimal = ZERO
    broken_lunch: bool = False
    turnaround_hours: Decimal = ZERO
    broken_turnaround: bool = False


@dataclass
class PeriodTotals:
    """Summed per-day figures shared by week and month summaries."""

    total_hours: Decimal = ZERO
    pre_call_hours: Decimal = ZERO
    base_hours: Decimal = ZERO
    ot_hours: Decimal = ZERO
    late_night_hours: Decimal = ZERO
    sixth_day_hours: Decimal = ZERO
    seventh_day_hours: Decimal = ZERO
    pre_call_earnings: Decimal = ZERO
    daily_earnings: Decimal = ZERO
    ot_earnings: Decimal = ZERO
    late_night_earnings: Decimal = ZERO
    sixth_day_bonus: Decimal = ZERO
    seventh_day_bonus: Decimal = ZERO
    kit_rental_total: Decimal = ZERO
    total_earnings: Decimal = ZERO
    days_logged: int = 0
    days_worked: int = 0
    broken_lunches: int = 0
    broken_turnarounds: int = 0
    entries: list[TimesheetEntry] = field(default_factory=list)
    calculations: list[TimesheetCalculation] = field(default_factory=list)


@dataclass
class WeekSummary(PeriodTotals):
    start_date: date | None = None
    end_date: date | None = None


@dataclass
class MonthSummary(PeriodTotals):
    year: int = 0
    month: int = 0


@dataclass
class CallSheet:
    """Already-normalised call sheet record handed over by an importer."""

    id: str
    date: date
    unit_call_time: str | None = None
    lunch_time: str | None = None
    wrap_estimate: str | None = None
    production_day: int | None = None
    day_type: str | None = None
