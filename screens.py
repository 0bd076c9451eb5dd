"""Modal screens for the crew timesheet application."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal, InvalidOperation

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Checkbox, Input, Label, Select
from textual.screen import ModalScreen

from models import RateCard, TimesheetEntry
from rules import DAY_TYPES, normalize_day_type
from utils import parse_time

DIALOG_CSS = """
    .field-group {
        width: 1fr;
        height: auto;
        margin: 0 1 0 0;
    }

    .field-label {
        height: 1;
        margin-bottom: 0;
        color: $text-muted;
    }

    .field-row {
        width: 100%;
        height: auto;
        margin-bottom: 1;
    }

    .field-row Input, .field-row Select {
        width: 100%;
    }

    .dialog-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    .dialog-buttons Button {
        width: auto;
        min-width: 12;
        margin: 0 2;
    }
"""


class ConfirmScreen(ModalScreen[bool]):
    """Simple confirmation dialog."""

    CSS = """
    ConfirmScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $warning;
    }

    #confirm-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
    }

    #confirm-buttons Button {
        width: 1fr;
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("y", "confirm", "Yes"),
        Binding("n", "cancel", "No"),
    ]

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label(self.message)
            with Horizontal(id="confirm-buttons"):
                yield Button("Yes (Y)", variant="warning", id="yes")
                yield Button("No (N)", variant="default", id="no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


def validate_time_field(val: str) -> str | None:
    """Return a cleaned HH:MM string, None for blank. Raises ValueError if unparseable."""
    val = val.strip()
    if not val:
        return None
    if parse_time(val) is None:
        raise ValueError(f"'{val}' is not a valid HH:MM time")
    hours, minutes = val.split(":")
    return f"{int(hours):02d}:{int(minutes):02d}"


class EditDayScreen(ModalScreen[TimesheetEntry | None]):
    """Modal screen for editing a day's call times."""

    CSS = """
    EditDayScreen {
        align: center middle;
    }

    #edit-dialog {
        width: 76;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #edit-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #notes-group {
        width: 2fr;
    }
    """ + DIALOG_CSS

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    # Field order for Enter key navigation
    FIELD_ORDER = ["pre-call", "unit-call", "wrap-out", "lunch", "production-day", "notes"]

    DAY_TYPE_OPTIONS = [(label, tag) for tag, label in DAY_TYPES]

    TIME_FIELDS = {
        "pre-call": "pre_call",
        "unit-call": "unit_call",
        "wrap-out": "wrap_out",
        "lunch": "call_sheet_lunch",
    }

    def __init__(self, entry: TimesheetEntry):
        super().__init__()
        self.entry = entry

    def compose(self) -> ComposeResult:
        with Vertical(id="edit-dialog"):
            yield Label(
                f"Edit {self.entry.day_of_week} {self.entry.date.strftime('%b %d, %Y')}",
                id="edit-title"
            )

            # Row 1: Pre-call, Unit call, Wrap, Day type
            with Horizontal(classes="field-row"):
                with Vertical(classes="field-group"):
                    yield Label("Pre-call", classes="field-label")
                    yield Input(value=self.entry.pre_call or "", placeholder="06:00", id="pre-call")
                with Vertical(classes="field-group"):
                    yield Label("Unit call", classes="field-label")
                    yield Input(value=self.entry.unit_call or "", placeholder="07:00", id="unit-call")
                with Vertical(classes="field-group"):
                    yield Label("Wrap", classes="field-label")
                    yield Input(value=self.entry.wrap_out or "", placeholder="19:00", id="wrap-out")
                with Vertical(classes="field-group"):
                    yield Label("Type", classes="field-label")
                    yield Select(
                        self.DAY_TYPE_OPTIONS,
                        value=normalize_day_type(self.entry.day_type),
                        allow_blank=False,
                        id="day-type",
                    )

            # Row 2: Call sheet lunch, production day, notes
            with Horizontal(classes="field-row"):
                with Vertical(classes="field-group"):
                    yield Label("Lunch called", classes="field-label")
                    yield Input(value=self.entry.call_sheet_lunch or "", placeholder="13:00", id="lunch")
                with Vertical(classes="field-group"):
                    yield Label("Prod day", classes="field-label")
                    yield Input(
                        value=str(self.entry.production_day) if self.entry.production_day is not None else "",
                        placeholder="",
                        id="production-day",
                    )
                with Vertical(classes="field-group", id="notes-group"):
                    yield Label("Notes", classes="field-label")
                    yield Input(value=self.entry.notes or "", id="notes")

            with Horizontal(classes="field-row"):
                yield Checkbox("6th day", self.entry.is_sixth_day, id="sixth-day")
                yield Checkbox("7th day", self.entry.is_seventh_day, id="seventh-day")

            with Horizontal(classes="dialog-buttons"):
                yield Button("Save", variant="primary", id="save")
                yield Button("Cancel", variant="default", id="cancel")

    def on_mount(self) -> None:
        """Focus the unit call field on mount."""
        self.query_one("#unit-call", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Move to next field on Enter, or save if on last field."""
        current_id = event.input.id
        if current_id in self.FIELD_ORDER:
            current_idx = self.FIELD_ORDER.index(current_id)
            if current_idx < len(self.FIELD_ORDER) - 1:
                next_id = self.FIELD_ORDER[current_idx + 1]
                self.query_one(f"#{next_id}", Input).focus()
            else:
                self._save_entry()

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        """6th and 7th day are exclusive."""
        if not event.value:
            return
        other = "#seventh-day" if event.checkbox.id == "sixth-day" else "#sixth-day"
        self.query_one(other, Checkbox).value = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "save":
            self._save_entry()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _save_entry(self) -> None:
        times = {}
        try:
            for input_id, field_name in self.TIME_FIELDS.items():
                times[field_name] = validate_time_field(self.query_one(f"#{input_id}", Input).value)
        except ValueError as e:
            self.app.notify(str(e), severity="error")
            return

        prod_val = self.query_one("#production-day", Input).value.strip()
        try:
            production_day = int(prod_val) if prod_val else None
        except ValueError:
            self.app.notify("Production day must be a number", severity="error")
            return

        updated = replace(
            self.entry,
            day_type=self.query_one("#day-type", Select).value,
            is_sixth_day=self.query_one("#sixth-day", Checkbox).value,
            is_seventh_day=self.query_one("#seventh-day", Checkbox).value,
            production_day=production_day,
            notes=self.query_one("#notes", Input).value.strip() or None,
            **times,
        )
        self.dismiss(updated)


class RateCardScreen(ModalScreen[RateCard | None]):
    """Modal screen for editing the rate card."""

    CSS = """
    RateCardScreen {
        align: center middle;
    }

    #rate-dialog {
        width: 70;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #rate-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }
    """ + DIALOG_CSS

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    # (input id, RateCard field, label) laid out three per row
    FIELDS = [
        ("daily-rate", "daily_rate", "Day rate"),
        ("base-day-hours", "base_day_hours", "Base hours"),
        ("kit-rental", "kit_rental", "Kit rental"),
        ("ot-multiplier", "ot_multiplier", "OT x"),
        ("pre-call-multiplier", "pre_call_multiplier", "Pre-call x"),
        ("late-night-multiplier", "late_night_multiplier", "Late night x"),
        ("sixth-day-multiplier", "sixth_day_multiplier", "6th day x"),
        ("seventh-day-multiplier", "seventh_day_multiplier", "7th day x"),
    ]

    def __init__(self, rate_card: RateCard):
        super().__init__()
        self.rate_card = rate_card

    def compose(self) -> ComposeResult:
        with Vertical(id="rate-dialog"):
            yield Label("Rate Card", id="rate-title")
            for i in range(0, len(self.FIELDS), 3):
                with Horizontal(classes="field-row"):
                    for input_id, field_name, label in self.FIELDS[i:i + 3]:
                        with Vertical(classes="field-group"):
                            yield Label(label, classes="field-label")
                            yield Input(value=str(getattr(self.rate_card, field_name)), id=input_id)
            with Horizontal(classes="dialog-buttons"):
                yield Button("Save", variant="primary", id="save")
                yield Button("Cancel", variant="default", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#daily-rate", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "save":
            self._save_rate_card()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _save_rate_card(self) -> None:
        values = {}
        for input_id, field_name, label in self.FIELDS:
            raw = self.query_one(f"#{input_id}", Input).value.strip()
            try:
                values[field_name] = Decimal(raw)
                if not values[field_name].is_finite():
                    raise InvalidOperation
            except InvalidOperation:
                self.app.notify(f"{label}: '{raw}' is not a number", severity="error")
                return

        updated = replace(self.rate_card, **values)
        problems = updated.problems()
        if problems:
            self.app.notify(problems[0], severity="error")
            return
        self.dismiss(updated)
