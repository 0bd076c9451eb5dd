#!/usr/bin/env python3
"""Crew timesheet TUI application."""

from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Static, Footer, DataTable
from textual.coordinate import Coordinate
from rich.text import Text

import storage
from calculator import calculate
from export import export_json, export_workbook
from models import RateCard, TimesheetEntry
from screens import ConfirmScreen, EditDayScreen, RateCardScreen
from summary import month_summary, week_summary
from utils import format_hours, get_uk_holidays, get_week_start
from widgets import DayBreakdown, WeekHeader, WeeklySummary, money


class TimesheetDataTable(DataTable):
    """DataTable that hands left/right to the app for week navigation."""

    def on_key(self, event) -> None:
        if event.key == "left":
            if hasattr(self.app, 'action_prev_week'):
                self.app.action_prev_week()  # type: ignore[attr-defined]
            event.prevent_default()
            event.stop()
        elif event.key == "right":
            if hasattr(self.app, 'action_next_week'):
                self.app.action_next_week()  # type: ignore[attr-defined]
            event.prevent_default()
            event.stop()


class TimesheetApp(App):
    """Main crew timesheet application."""

    CSS = """
    Screen {
        background: $surface;
    }

    #week-header {
        height: auto;
        background: $primary;
        color: $text;
        padding: 0 1;
        text-style: bold;
    }

    #week-table {
        height: 1fr;
        margin: 1 2;
    }

    #day-breakdown {
        height: auto;
        padding: 0 2;
        color: $text;
    }

    #weekly-summary {
        height: auto;
        padding: 1 2;
        color: $text;
    }

    #month-total {
        height: auto;
        padding: 0 2;
        color: $text;
        text-style: bold;
    }

    DataTable {
        height: 100%;
    }

    DataTable > .datatable--cursor {
        background: $secondary;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("e", "edit_day", "Edit"),
        Binding("d", "delete_day", "Delete"),
        Binding("r", "edit_rate_card", "Rates"),
        Binding("t", "goto_today", "Today"),
        Binding("x", "export_week", "Export"),
    ]

    def __init__(self):
        super().__init__()
        storage.init_db()

        today = date.today()
        self.week_start = get_week_start(today)
        self.rate_card: RateCard = storage.get_rate_card()
        self.entries: dict[date, TimesheetEntry] = {}
        self.holidays: dict[date, str] = {}

    def compose(self) -> ComposeResult:
        yield WeekHeader(id="week-header")
        yield Container(TimesheetDataTable(id="week-table"), id="week-table-container")
        yield DayBreakdown(id="day-breakdown")
        yield WeeklySummary(id="weekly-summary")
        yield Static(id="month-total")
        yield Footer()

    def on_mount(self):
        self._setup_week_table()
        self._load_week_data()
        self._refresh_display()
        self._select_date(date.today())
        self.query_one("#week-table", DataTable).focus()

    def _setup_week_table(self):
        table = self.query_one("#week-table", DataTable)
        table.cursor_type = "row"
        table.add_column("Day", width=4)
        table.add_column("Date", width=7)
        table.add_column("Type", width=5)
        table.add_column("Pre", width=6)
        table.add_column("Call", width=6)
        table.add_column("Wrap", width=6)
        table.add_column("Work", width=6)
        table.add_column("OT", width=5)
        table.add_column("Late", width=5)
        table.add_column("Pay", width=10)
        table.add_column("Notes", width=30)

    @property
    def week_end(self) -> date:
        return self.week_start + timedelta(days=6)

    def _load_week_data(self):
        """Load the current week's entries and bank holidays into memory."""
        # Includes the Sunday before for Monday's turnaround
        entries = storage.get_entries_range(self.week_start - timedelta(days=1), self.week_end)
        self.entries = {e.date: e for e in entries}
        self.holidays = get_uk_holidays(self.week_start, self.week_end)

    def _get_or_create_entry(self, d: date) -> TimesheetEntry:
        """Get entry for date or create empty one."""
        return self.entries.get(d) or TimesheetEntry(date=d)

    def _calculate(self, entry: TimesheetEntry):
        previous = self.entries.get(entry.date - timedelta(days=1))
        return calculate(self.rate_card, entry, previous.wrap_out if previous else None)

    def _refresh_display(self):
        header = self.query_one("#week-header", WeekHeader)
        header.update_display(self.week_start, self.week_end)

        summary = week_summary(self.rate_card, self.week_start, self.entries)
        self.query_one("#weekly-summary", WeeklySummary).update_display(summary, self.rate_card)

        table = self.query_one("#week-table", DataTable)
        cursor_row = table.cursor_row
        table.clear()

        for i in range(7):
            d = self.week_start + timedelta(days=i)
            entry = self._get_or_create_entry(d)
            calc = self._calculate(entry)

            pay_str = money(calc.total_earnings, self.rate_card.currency) if entry.is_complete else "-"
            notes = []
            if calc.broken_lunch:
                notes.append("Broken lunch")
            if calc.broken_turnaround:
                notes.append(f"Turnaround {float(calc.turnaround_hours):g}h")
            if entry.is_seventh_day:
                notes.append("7th day")
            elif entry.is_sixth_day:
                notes.append("6th day")
            if d in self.holidays:
                notes.append(self.holidays[d])
            if entry.notes:
                notes.append(entry.notes)
            notes_str = "; ".join(notes)
            if len(notes_str) > 28:
                notes_str = notes_str[:27] + "…"

            style = "dim" if d not in self.entries else ""
            warn = calc.broken_lunch or calc.broken_turnaround
            table.add_row(
                Text(entry.day_of_week, style=style),
                Text(d.strftime("%b %d"), style=style),
                Text(entry.day_type if d in self.entries else "", style=style),
                Text(entry.pre_call or "-", style=style),
                Text(entry.unit_call or "-", style=style),
                Text(entry.wrap_out or "-", style=style),
                Text(format_hours(calc.working_hours), style=style),
                Text(format_hours(calc.ot_hours), style=style),
                Text(format_hours(calc.late_night_hours), style=style),
                Text(pay_str, style=style),
                Text(notes_str, style="bold yellow" if warn else style),
                key=d.isoformat(),
            )

        table.move_cursor(row=min(cursor_row, 6))
        self._refresh_month_total()
        self._refresh_day_breakdown()

    def _refresh_month_total(self):
        # Month of the Thursday, so a week belongs to the month holding most of it
        anchor = self.week_start + timedelta(days=3)
        totals = month_summary(self.rate_card, anchor.year, anchor.month, storage.get_entry)
        text = Text()
        text.append(
            f"{anchor.strftime('%B %Y')}: {totals.days_worked} days, "
            f"{float(totals.total_hours):g}h, "
            f"{money(totals.total_earnings, self.rate_card.currency)}"
        )
        self.query_one("#month-total", Static).update(text)

    def _refresh_day_breakdown(self):
        selected = self._get_selected_date()
        if not selected:
            return
        entry = self._get_or_create_entry(selected)
        self.query_one("#day-breakdown", DayBreakdown).update_display(
            entry, self._calculate(entry), self.rate_card
        )

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        self._refresh_day_breakdown()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self.action_edit_day()

    def _get_selected_date(self) -> date | None:
        """Get the currently selected date from the table."""
        table = self.query_one("#week-table", DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key(Coordinate(table.cursor_row, 0)).row_key
        if row_key:
            return date.fromisoformat(str(row_key.value))
        return None

    def _select_date(self, target: date):
        """Move cursor to the row for a specific date."""
        offset = (target - self.week_start).days
        if 0 <= offset < 7:
            self.query_one("#week-table", DataTable).move_cursor(row=offset)

    def _show_week(self, week_start: date):
        self.week_start = week_start
        self._load_week_data()
        self._refresh_display()

    def action_prev_week(self):
        self._show_week(self.week_start - timedelta(days=7))

    def action_next_week(self):
        self._show_week(self.week_start + timedelta(days=7))

    def action_goto_today(self):
        today = date.today()
        self._show_week(get_week_start(today))
        self._select_date(today)

    def action_edit_day(self):
        """Open edit modal for selected day."""
        selected = self._get_selected_date()
        if selected:
            self.push_screen(EditDayScreen(self._get_or_create_entry(selected)), self._on_edit_complete)

    def _on_edit_complete(self, result: TimesheetEntry | None) -> None:
        if result:
            storage.save_entry(result)
            self.entries[result.date] = result
            self._refresh_display()

    def action_delete_day(self):
        selected = self._get_selected_date()
        if not selected or selected not in self.entries:
            self.notify("Nothing to delete")
            return

        def do_delete(confirmed: bool | None) -> None:
            if not confirmed:
                return
            storage.delete_entry(selected)
            self.entries.pop(selected, None)
            self._refresh_display()
            self.notify(f"Deleted {selected.strftime('%b %d')}")

        self.push_screen(ConfirmScreen(f"Delete entry for {selected.strftime('%b %d')}?"), do_delete)

    def action_edit_rate_card(self):
        self.push_screen(RateCardScreen(self.rate_card), self._on_rate_card_complete)

    def _on_rate_card_complete(self, result: RateCard | None) -> None:
        if result:
            storage.save_rate_card(result)
            self.rate_card = result
            self._refresh_display()
            self.notify("Rate card saved")

    def action_export_week(self):
        """Write the current week to JSON and xlsx in the working directory."""
        summary = week_summary(self.rate_card, self.week_start, self.entries)
        stem = Path.cwd() / f"timesheet-{self.week_start.isoformat()}"
        export_json(self.rate_card, summary, stem.with_suffix(".json"))
        export_workbook(self.rate_card, summary, stem.with_suffix(".xlsx"))
        self.notify(f"Exported {stem.name}.json and .xlsx")


def main():
    import sys
    if len(sys.argv) > 1 and sys.argv[1] == "--db-info":
        from datetime import datetime
        db_path = storage.DB_PATH
        print(f"Database: {db_path}")
        if db_path.exists():
            mtime = datetime.fromtimestamp(db_path.stat().st_mtime)
            size = db_path.stat().st_size
            print(f"Modified: {mtime.strftime('%Y-%m-%d %H:%M:%S')}")
            print(f"Size: {size:,} bytes")
        else:
            print("Status: Does not exist (will be created on first run)")
        return

    app = TimesheetApp()
    app.run()


if __name__ == "__main__":
    main()
