"""Custom widgets for the crew timesheet application."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from textual.widgets import Static
from rich.text import Text

from models import RateCard, TimesheetCalculation, TimesheetEntry, WeekSummary

CURRENCY_SYMBOLS = {"GBP": "£", "EUR": "€", "USD": "$"}


def money(value: Decimal, currency: str = "GBP") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    return f"{symbol}{value:,.2f}"


class WeekHeader(Static):
    """Shows the week range on the left and navigation arrows on the right."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.left_arrow_pos = 0
        self.right_arrow_pos = 0

    def update_display(self, week_start: date, week_end: date):
        title = f"WEEK COMMENCING {week_start.strftime('%a %d %B %Y').upper()}"
        week_nav = f"◄ {week_start.strftime('%b %d')} - {week_end.strftime('%b %d')} ►"

        target_end_col = 74
        week_nav_start = target_end_col - len(week_nav)
        self.left_arrow_pos = week_nav_start
        self.right_arrow_pos = week_nav_start + len(week_nav) - 1

        text = Text()
        text.append(title, style="bold")
        spacing = week_nav_start - len(title)
        text.append(" " * spacing if spacing > 0 else "  ")
        text.append(week_nav, style="bold")

        self.update(text)

    def on_click(self, event) -> None:
        """Handle clicks on the arrows for week navigation."""
        click_col = event.x
        if self.left_arrow_pos <= click_col < self.left_arrow_pos + 2:
            self.app.action_prev_week()  # type: ignore[attr-defined]
        elif self.right_arrow_pos <= click_col < self.right_arrow_pos + 2:
            self.app.action_next_week()  # type: ignore[attr-defined]


class WeeklySummary(Static):
    """Shows weekly hours by bucket and the earnings total."""

    def update_display(self, summary: WeekSummary, rate_card: RateCard):
        text = Text()

        def line(label: str, hours: Decimal, dim_if_zero: bool = True):
            style = "dim" if dim_if_zero and not hours else ""
            text.append(f"{label:>40}  {float(hours):>7g}h\n", style=style)

        line("Pre-call", summary.pre_call_hours)
        line("Base", summary.base_hours, dim_if_zero=False)
        line("Overtime", summary.ot_hours)
        line("Late night", summary.late_night_hours)
        line("6th day", summary.sixth_day_hours)
        line("7th day", summary.seventh_day_hours)
        line("TOTAL", summary.total_hours, dim_if_zero=False)

        text.append(f"{'Days worked':>40}  {summary.days_worked:>7} of {summary.days_logged} logged\n")
        if summary.broken_lunches:
            text.append(f"{'Broken lunches':>40}  {summary.broken_lunches:>7}\n", style="bold yellow")
        if summary.broken_turnarounds:
            text.append(f"{'Broken turnarounds':>40}  {summary.broken_turnarounds:>7}\n", style="bold yellow")
        text.append(f"{'Kit rental':>40}  {money(summary.kit_rental_total, rate_card.currency):>8}\n")
        text.append(
            f"{'EARNINGS':>40}  {money(summary.total_earnings, rate_card.currency):>8}",
            style="bold",
        )

        self.update(text)


class DayBreakdown(Static):
    """Shows the full calculation for the selected day."""

    def update_display(self, entry: TimesheetEntry, calc: TimesheetCalculation, rate_card: RateCard):
        text = Text()
        text.append(f"{entry.date.strftime('%A %d %B')}  ", style="bold")
        text.append(f"{entry.day_type}")
        if entry.is_seventh_day:
            text.append("  7th day", style="bold magenta")
        elif entry.is_sixth_day:
            text.append("  6th day", style="bold magenta")
        text.append("\n")

        if not entry.is_complete:
            text.append("Incomplete - needs unit call and wrap", style="dim")
            self.update(text)
            return

        cur = rate_card.currency
        text.append(
            f"Hourly {money(calc.hourly_rate, cur)}   "
            f"Working {float(calc.working_hours):g}h (raw {float(calc.raw_working_hours):g}h, "
            f"lunch -{float(calc.lunch_deduction):g}h)   OT after {float(calc.ot_threshold):g}h\n"
        )
        text.append(
            f"Pre-call {money(calc.pre_call_earnings, cur)}  "
            f"Daily {money(calc.daily_earnings, cur)}  "
            f"OT {money(calc.ot_earnings, cur)}  "
            f"Late {money(calc.late_night_earnings, cur)}  "
            f"Bonus {money(calc.sixth_day_bonus + calc.seventh_day_bonus, cur)}  "
            f"Kit {money(calc.kit_rental, cur)}\n"
        )
        text.append(f"Day total {money(calc.total_earnings, cur)}", style="bold")
        if calc.broken_lunch:
            text.append("   BROKEN LUNCH", style="bold yellow")
        if calc.broken_turnaround:
            text.append(f"   BROKEN TURNAROUND ({float(calc.turnaround_hours):g}h rest)", style="bold yellow")

        self.update(text)
