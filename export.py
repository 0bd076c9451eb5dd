"""Payroll export: camelCase JSON and an Excel workbook per period."""

from __future__ import annotations

import json
import logging
from dataclasses import fields
from decimal import Decimal
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from models import MonthSummary, PeriodTotals, RateCard, TimesheetCalculation, TimesheetEntry, WeekSummary

logger = logging.getLogger(__name__)

PERIOD_TOTAL_FIELDS = [
    f.name for f in fields(PeriodTotals) if f.name not in ("entries", "calculations")
]


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _plain(value):
    if isinstance(value, Decimal):
        return float(value)
    return value


def calculation_to_dict(calc: TimesheetCalculation) -> dict:
    return {_camel(f.name): _plain(getattr(calc, f.name)) for f in fields(calc)}


def entry_to_dict(entry: TimesheetEntry) -> dict:
    data = {_camel(f.name): getattr(entry, f.name) for f in fields(entry)}
    data["date"] = entry.date.isoformat()
    return data


def _totals_to_dict(summary: PeriodTotals, include_calculations: bool) -> dict:
    data = {_camel(name): _plain(getattr(summary, name)) for name in PERIOD_TOTAL_FIELDS}
    days = []
    for entry, calc in zip(summary.entries, summary.calculations):
        day = entry_to_dict(entry)
        if include_calculations:
            day["calculation"] = calculation_to_dict(calc)
        days.append(day)
    data["entries"] = days
    return data


def week_summary_to_dict(summary: WeekSummary, include_calculations: bool = False) -> dict:
    """Encode a week summary, optionally with each day's calculation."""
    data = _totals_to_dict(summary, include_calculations)
    data["startDate"] = summary.start_date.isoformat() if summary.start_date else None
    data["endDate"] = summary.end_date.isoformat() if summary.end_date else None
    return data


def month_summary_to_dict(summary: MonthSummary, include_calculations: bool = False) -> dict:
    data = _totals_to_dict(summary, include_calculations)
    data["year"] = summary.year
    data["month"] = summary.month
    return data


def export_json(rate_card: RateCard, summary: WeekSummary | MonthSummary, path: Path) -> None:
    """Write a week or month summary as JSON for payroll."""
    if isinstance(summary, WeekSummary):
        data = week_summary_to_dict(summary, include_calculations=True)
    else:
        data = month_summary_to_dict(summary, include_calculations=True)
    data["currency"] = rate_card.currency

    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    logger.info("Exported %d days to %s", len(summary.entries), path)


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=8, max_width=30):
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = max((len(str(c.value)) for c in ws[letter] if c.value is not None), default=0)
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


DAY_COLUMNS = [
    ("Date", None),
    ("Type", None),
    ("Pre-call", None),
    ("Unit call", None),
    ("Wrap", None),
    ("Pre-call h", "pre_call_hours"),
    ("Working h", "working_hours"),
    ("Base h", "base_hours"),
    ("OT h", "ot_hours"),
    ("Late h", "late_night_hours"),
    ("Pre-call", "pre_call_earnings"),
    ("Daily", "daily_earnings"),
    ("OT", "ot_earnings"),
    ("Late night", "late_night_earnings"),
    ("6th day", "sixth_day_bonus"),
    ("7th day", "seventh_day_bonus"),
    ("Kit", "kit_rental"),
    ("Total", "total_earnings"),
    ("Broken lunch", None),
    ("Short turnaround h", None),
]


def export_workbook(rate_card: RateCard, summary: WeekSummary | MonthSummary, path: Path) -> None:
    """Write a period to an .xlsx workbook: one row per day plus totals."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Timesheet"

    ws.append([label for label, _ in DAY_COLUMNS])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"

    for entry, calc in zip(summary.entries, summary.calculations):
        row = [
            entry.date.isoformat(),
            entry.day_type,
            entry.pre_call or "",
            entry.unit_call or "",
            entry.wrap_out or "",
        ]
        row += [float(getattr(calc, name)) for _, name in DAY_COLUMNS if name]
        row.append("Yes" if calc.broken_lunch else "")
        row.append(float(calc.turnaround_hours) if calc.broken_turnaround else "")
        ws.append(row)

    ws.append([])
    ws.append(["TOTALS"])
    ws.cell(ws.max_row, 1).font = Font(bold=True)
    for label, name in [
        ("Days worked", "days_worked"),
        ("Total hours", "total_hours"),
        ("OT hours", "ot_hours"),
        ("Late night hours", "late_night_hours"),
        ("Broken lunches", "broken_lunches"),
        ("Broken turnarounds", "broken_turnarounds"),
        ("Kit rental", "kit_rental_total"),
        (f"Total ({rate_card.currency})", "total_earnings"),
    ]:
        value = getattr(summary, name)
        ws.append([label, float(value) if isinstance(value, Decimal) else value])
        ws.cell(ws.max_row, 2).number_format = "0.00"

    _autosize_columns(ws)
    wb.save(path)
    logger.info("Exported workbook %s", path)
