"""Tests for calculator.py - single-day hours and earnings."""

from dataclasses import fields, replace
from datetime import date
from decimal import Decimal

import pytest

from calculator import (
    calculate,
    get_hourly_rate,
    get_late_night_hours,
    get_turnaround_hours,
    is_broken_lunch,
    is_broken_turnaround,
)
from models import RateCard, TimesheetCalculation, TimesheetEntry


def make_entry(**kwargs) -> TimesheetEntry:
    kwargs.setdefault("date", date(2026, 1, 26))
    return TimesheetEntry(**kwargs)


class TestStandardDay:
    """A 12 hour SWD with an hour of pre-call."""

    def test_hours(self, rate_card, standard_entry):
        calc = calculate(rate_card, standard_entry)

        assert calc.pre_call_hours == Decimal("1.00")
        assert calc.raw_working_hours == Decimal("12.00")
        assert calc.lunch_deduction == Decimal("1.00")
        assert calc.working_hours == Decimal("11.00")
        assert calc.ot_threshold == Decimal("10.00")
        assert calc.base_hours == Decimal("10.00")
        assert calc.ot_hours == Decimal("1.00")
        assert calc.late_night_hours == Decimal("0")
        assert calc.total_hours == Decimal("12.00")

    def test_earnings(self, rate_card, standard_entry):
        calc = calculate(rate_card, standard_entry)

        assert calc.hourly_rate == Decimal("30.00")
        assert calc.pre_call_earnings == Decimal("30.00")
        assert calc.daily_earnings == Decimal("300.00")
        assert calc.ot_earnings == Decimal("45.00")
        assert calc.late_night_earnings == Decimal("0")
        assert calc.sixth_day_bonus == Decimal("0")
        assert calc.seventh_day_bonus == Decimal("0")
        assert calc.kit_rental == Decimal("20.00")
        assert calc.total_earnings == Decimal("395.00")

    def test_total_is_sum_of_components(self, rate_card, standard_entry):
        calc = calculate(rate_card, standard_entry)
        assert calc.total_earnings == (
            calc.pre_call_earnings + calc.daily_earnings + calc.ot_earnings
            + calc.late_night_earnings + calc.sixth_day_bonus
            + calc.seventh_day_bonus + calc.kit_rental
        )

    def test_no_broken_lunch_without_call_sheet_lunch(self, rate_card, standard_entry):
        assert calculate(rate_card, standard_entry).broken_lunch is False

    def test_idempotent(self, rate_card, standard_entry):
        """Same inputs, identical output."""
        assert calculate(rate_card, standard_entry) == calculate(rate_card, standard_entry)

    def test_does_not_mutate_inputs(self, rate_card, standard_entry):
        card_before = replace(rate_card)
        entry_before = replace(standard_entry)
        calculate(rate_card, standard_entry)
        assert rate_card == card_before
        assert standard_entry == entry_before

    def test_unknown_day_type_treated_as_standard(self, rate_card, standard_entry):
        odd = replace(standard_entry, day_type="NIGHTS")
        assert calculate(rate_card, odd) == calculate(rate_card, standard_entry)


class TestLateNight:
    """Hours past 23:00."""

    def test_wrap_before_midnight(self, rate_card):
        calc = calculate(rate_card, make_entry(unit_call="07:00", wrap_out="23:45"))

        assert calc.raw_working_hours == Decimal("16.75")
        assert calc.working_hours == Decimal("15.75")
        assert calc.late_night_hours == Decimal("0.75")
        assert calc.ot_hours == Decimal("5.00")
        assert calc.base_hours == Decimal("10.00")
        assert calc.late_night_earnings == Decimal("45.00")
        assert calc.ot_earnings == Decimal("225.00")
        assert calc.total_earnings == Decimal("590.00")

    def test_buckets_partition_working_hours(self, rate_card):
        """Late night hours are carved out of OT, never paid twice."""
        calc = calculate(rate_card, make_entry(unit_call="07:00", wrap_out="23:45"))
        assert calc.base_hours + calc.ot_hours + calc.late_night_hours == calc.working_hours

    def test_wrap_after_midnight(self, rate_card):
        calc = calculate(rate_card, make_entry(unit_call="12:00", wrap_out="01:30"))

        assert calc.raw_working_hours == Decimal("13.50")
        assert calc.working_hours == Decimal("12.50")
        assert calc.late_night_hours == Decimal("3.50")
        assert calc.base_hours == Decimal("10.00")
        assert calc.ot_hours == Decimal("0")

    def test_late_night_only_counted_from_23(self):
        assert get_late_night_hours("22:59") == Decimal("0")
        assert get_late_night_hours("23:00") == Decimal("0")
        assert get_late_night_hours("02:00") == Decimal("3")

    def test_invalid_wrap_has_no_late_night(self):
        assert get_late_night_hours("soon") == Decimal("0")

    def test_ot_never_negative(self, rate_card):
        calc = calculate(rate_card, make_entry(unit_call="18:00", wrap_out="02:00"))

        assert calc.working_hours == Decimal("7.00")
        assert calc.late_night_hours == Decimal("3.00")
        assert calc.ot_hours == Decimal("0")
        assert calc.base_hours == Decimal("7.00")
        assert calc.total_earnings == Decimal("410.00")


class TestDayTypes:
    """SCWD and CWD lunch and thresholds."""

    def test_short_continuous(self, rate_card):
        calc = calculate(rate_card, make_entry(unit_call="07:00", wrap_out="17:30", day_type="SCWD"))

        assert calc.lunch_deduction == Decimal("0.50")
        assert calc.working_hours == Decimal("10.00")
        assert calc.ot_threshold == Decimal("9.50")
        assert calc.base_hours == Decimal("9.50")
        assert calc.ot_hours == Decimal("0.50")
        assert calc.daily_earnings == Decimal("285.00")
        assert calc.ot_earnings == Decimal("22.50")

    def test_continuous(self, rate_card):
        calc = calculate(rate_card, make_entry(unit_call="07:00", wrap_out="17:00", day_type="CWD"))

        assert calc.lunch_deduction == Decimal("0")
        assert calc.working_hours == Decimal("10.00")
        assert calc.ot_threshold == Decimal("9.00")
        assert calc.base_hours == Decimal("9.00")
        assert calc.ot_hours == Decimal("1.00")
        assert calc.total_earnings == Decimal("335.00")

    def test_shift_shorter_than_lunch(self, rate_card):
        calc = calculate(rate_card, make_entry(unit_call="07:00", wrap_out="07:30"))
        assert calc.working_hours == Decimal("0")
        assert calc.base_hours == Decimal("0")


class TestBrokenLunch:
    """Lunch called within 6 hours of unit call."""

    @pytest.mark.parametrize("day_type", ["SWD", "SCWD"])
    def test_early_lunch_flags(self, rate_card, day_type):
        entry = make_entry(unit_call="07:00", wrap_out="19:00", call_sheet_lunch="12:00", day_type=day_type)
        assert calculate(rate_card, entry).broken_lunch is True

    def test_continuous_day_never_flags(self, rate_card):
        entry = make_entry(unit_call="07:00", wrap_out="19:00", call_sheet_lunch="12:00", day_type="CWD")
        assert calculate(rate_card, entry).broken_lunch is False

    def test_lunch_at_six_hours_does_not_flag(self):
        entry = make_entry(unit_call="07:00", wrap_out="19:00", call_sheet_lunch="13:00")
        assert is_broken_lunch(entry) is False

    def test_invalid_lunch_does_not_flag(self):
        entry = make_entry(unit_call="07:00", wrap_out="19:00", call_sheet_lunch="lunch")
        assert is_broken_lunch(entry) is False

    def test_flag_does_not_change_pay(self, rate_card, standard_entry):
        flagged = replace(standard_entry, call_sheet_lunch="12:00")
        plain = calculate(rate_card, standard_entry)
        calc = calculate(rate_card, flagged)

        assert calc.broken_lunch is True
        assert calc.total_earnings == plain.total_earnings


class TestPremiumDays:
    """6th and 7th day bonuses."""

    def test_sixth_day(self, rate_card, standard_entry):
        calc = calculate(rate_card, replace(standard_entry, is_sixth_day=True))

        assert calc.sixth_day_bonus == Decimal("187.50")
        assert calc.seventh_day_bonus == Decimal("0")
        assert calc.total_earnings == Decimal("582.50")

    def test_seventh_day(self, rate_card, standard_entry):
        calc = calculate(rate_card, replace(standard_entry, is_seventh_day=True))

        assert calc.seventh_day_bonus == Decimal("375.00")
        assert calc.total_earnings == Decimal("770.00")

    def test_seventh_day_takes_precedence(self, rate_card, standard_entry):
        both = replace(standard_entry, is_sixth_day=True, is_seventh_day=True)
        calc = calculate(rate_card, both)

        assert calc.sixth_day_bonus == Decimal("0")
        assert calc.seventh_day_bonus == Decimal("375.00")

    def test_kit_rental_not_multiplied(self, rate_card, standard_entry):
        calc = calculate(rate_card, replace(standard_entry, is_seventh_day=True))
        assert calc.kit_rental == Decimal("20.00")


class TestDegradedInput:
    """The calculator never raises."""

    def test_missing_wrap_is_all_zero(self, rate_card, incomplete_entry):
        assert calculate(rate_card, incomplete_entry) == TimesheetCalculation()

    def test_missing_unit_call_is_all_zero(self, rate_card):
        calc = calculate(rate_card, make_entry(wrap_out="19:00", is_seventh_day=True))
        for f in fields(calc):
            assert not getattr(calc, f.name), f.name

    def test_blank_strings_are_absent(self, rate_card):
        entry = make_entry(unit_call="", wrap_out="", pre_call="")
        assert entry.unit_call is None
        assert calculate(rate_card, entry).total_earnings == Decimal("0")

    def test_malformed_times_contribute_zero_hours(self, rate_card):
        calc = calculate(rate_card, make_entry(unit_call="07:00", wrap_out="25:00", pre_call="xx"))

        assert calc.pre_call_hours == Decimal("0")
        assert calc.working_hours == Decimal("0")
        assert calc.late_night_hours == Decimal("0")
        assert calc.total_earnings == Decimal("20.00")

    def test_zero_base_day_hours(self, standard_entry):
        card = RateCard(daily_rate=Decimal("300"), base_day_hours=Decimal("0"))
        assert get_hourly_rate(card) == Decimal("0")
        calc = calculate(card, standard_entry)
        assert calc.hourly_rate == Decimal("0")

    def test_no_hours_field_is_negative(self, rate_card):
        for wrap in ("00:00", "03:00", "07:00", "07:30", "12:00", "23:59"):
            calc = calculate(rate_card, make_entry(pre_call="06:30", unit_call="07:00", wrap_out=wrap))
            for name in ("pre_call_hours", "working_hours", "base_hours", "ot_hours",
                         "late_night_hours", "total_hours"):
                assert getattr(calc, name) >= 0


class TestRounding:
    """Each field is rounded to 2 places at return."""

    def test_eleven_hour_base(self):
        card = RateCard(daily_rate=Decimal("300"), base_day_hours=Decimal("11"), kit_rental=Decimal("0"))
        calc = calculate(card, make_entry(unit_call="07:00", wrap_out="18:00"))

        assert calc.hourly_rate == Decimal("27.27")
        assert calc.daily_earnings == Decimal("272.73")
        assert calc.total_earnings == Decimal("272.73")

    def test_fractional_minutes(self, rate_card):
        calc = calculate(rate_card, make_entry(unit_call="07:00", wrap_out="18:20"))
        assert calc.working_hours == Decimal("10.33")
        assert calc.ot_hours == Decimal("0.33")
        assert calc.ot_earnings == Decimal("15.00")

    @pytest.mark.parametrize("pre_call, wrap, total", [
        ("06:20", "19:40", Decimal("354.54")),
        ("06:40", "19:10", Decimal("320.46")),
    ])
    def test_total_reconciles_with_rounded_components(self, pre_call, wrap, total):
        """Each component rounds on its own and the total is their sum."""
        card = RateCard(
            daily_rate=Decimal("300"),
            base_day_hours=Decimal("11"),
            pre_call_multiplier=Decimal("1.5"),
            kit_rental=Decimal("0"),
        )
        calc = calculate(card, make_entry(pre_call=pre_call, unit_call="07:00", wrap_out=wrap))

        assert calc.total_earnings == total
        assert calc.total_earnings == (
            calc.pre_call_earnings + calc.daily_earnings + calc.ot_earnings
            + calc.late_night_earnings + calc.sixth_day_bonus
            + calc.seventh_day_bonus + calc.kit_rental
        )

    def test_components_reconcile_across_ten_minute_steps(self):
        card = RateCard(
            daily_rate=Decimal("300"),
            base_day_hours=Decimal("11"),
            pre_call_multiplier=Decimal("1.5"),
        )
        for pre_minutes in range(0, 60, 10):
            for wrap_hour in (18, 19, 20):
                for wrap_minutes in range(0, 60, 10):
                    entry = make_entry(
                        pre_call=f"06:{pre_minutes:02d}",
                        unit_call="07:00",
                        wrap_out=f"{wrap_hour}:{wrap_minutes:02d}",
                        is_sixth_day=True,
                    )
                    calc = calculate(card, entry)
                    assert calc.total_earnings == (
                        calc.pre_call_earnings + calc.daily_earnings + calc.ot_earnings
                        + calc.late_night_earnings + calc.sixth_day_bonus
                        + calc.seventh_day_bonus + calc.kit_rental
                    ), (entry.pre_call, entry.wrap_out)


class TestBrokenTurnaround:
    """Less than 11 hours between the previous wrap and today's first call."""

    def test_late_wrap_then_early_call_flags(self, rate_card):
        calc = calculate(rate_card, make_entry(unit_call="07:00", wrap_out="19:00"), "23:00")

        assert calc.turnaround_hours == Decimal("8.00")
        assert calc.broken_turnaround is True

    def test_full_rest_does_not_flag(self, rate_card):
        calc = calculate(rate_card, make_entry(unit_call="07:00", wrap_out="19:00"), "19:00")

        assert calc.turnaround_hours == Decimal("12.00")
        assert calc.broken_turnaround is False

    def test_exactly_eleven_hours_does_not_flag(self):
        entry = make_entry(unit_call="07:00", wrap_out="19:00")
        assert is_broken_turnaround(entry, "20:00") is False

    def test_pre_call_counts_as_first_call(self, standard_entry):
        # Wrap 20:00, pre-call 06:00 is 10h even though unit call is 11h away
        assert get_turnaround_hours(standard_entry, "20:00") == Decimal("10")
        assert is_broken_turnaround(standard_entry, "20:00") is True

    def test_wrap_after_midnight(self):
        entry = make_entry(unit_call="07:00", wrap_out="19:00")
        assert get_turnaround_hours(entry, "01:30") == Decimal("5.5")

    def test_no_previous_wrap(self, rate_card, standard_entry):
        calc = calculate(rate_card, standard_entry)

        assert calc.turnaround_hours == Decimal("0")
        assert calc.broken_turnaround is False

    def test_invalid_previous_wrap(self, standard_entry):
        assert get_turnaround_hours(standard_entry, "late") is None
        assert is_broken_turnaround(standard_entry, "late") is False

    def test_incomplete_day_never_flags(self, rate_card, incomplete_entry):
        assert calculate(rate_card, incomplete_entry, "23:00").broken_turnaround is False

    def test_flag_does_not_change_pay(self, rate_card, standard_entry):
        rested = calculate(rate_card, standard_entry, "18:00")
        tired = calculate(rate_card, standard_entry, "23:30")

        assert tired.broken_turnaround is True
        assert tired.total_earnings == rested.total_earnings
        assert replace(tired, turnaround_hours=rested.turnaround_hours, broken_turnaround=False) == rested
