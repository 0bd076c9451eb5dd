from __future__ import annotations

import logging
import os
import sqlite3
from calendar import monthrange
from dataclasses import fields, replace
from datetime import date
from decimal import Decimal
from pathlib import Path

from models import RateCard, TimesheetEntry

logger = logging.getLogger(__name__)


def _get_db_path() -> Path:
    """Get database path from environment variable or default location."""
    if env_path := os.environ.get("CREWSHEET_DB"):
        return Path(env_path)
    return Path(__file__).parent / "data" / "crewsheet.db"


DB_PATH = _get_db_path()


def get_connection() -> sqlite3.Connection:
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_db():
    """Create tables if they don't exist."""
    conn = get_connection()
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS timesheet_entries (
            date TEXT PRIMARY KEY,
            pre_call TEXT,
            unit_call TEXT,
            wrap_out TEXT,
            day_type TEXT NOT NULL DEFAULT 'SWD',
            is_sixth_day INTEGER DEFAULT 0,
            is_seventh_day INTEGER DEFAULT 0,
            call_sheet_lunch TEXT,
            production_day INTEGER,
            notes TEXT,
            status TEXT NOT NULL DEFAULT 'draft',
            auto_filled_from TEXT
        );

        CREATE TABLE IF NOT EXISTS config (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_entries_date ON timesheet_entries(date);
    """)
    conn.commit()
    conn.close()


def _row_to_entry(row: sqlite3.Row) -> TimesheetEntry:
    return TimesheetEntry(
        date=date.fromisoformat(row["date"]),
        pre_call=row["pre_call"],
        unit_call=row["unit_call"],
        wrap_out=row["wrap_out"],
        day_type=row["day_type"],
        is_sixth_day=bool(row["is_sixth_day"]),
        is_seventh_day=bool(row["is_seventh_day"]),
        call_sheet_lunch=row["call_sheet_lunch"],
        production_day=row["production_day"],
        notes=row["notes"],
        status=row["status"],
        auto_filled_from=row["auto_filled_from"],
    )


def save_entry(entry: TimesheetEntry):
    """Insert or replace the entry for its date (last writer wins)."""
    conn = get_connection()
    conn.execute("""
        INSERT OR REPLACE INTO timesheet_entries
        (date, pre_call, unit_call, wrap_out, day_type, is_sixth_day, is_seventh_day,
         call_sheet_lunch, production_day, notes, status, auto_filled_from)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    """, (
        entry.date.isoformat(),
        entry.pre_call,
        entry.unit_call,
        entry.wrap_out,
        entry.day_type,
        int(entry.is_sixth_day),
        int(entry.is_seventh_day),
        entry.call_sheet_lunch,
        entry.production_day,
        entry.notes,
        entry.status,
        entry.auto_filled_from,
    ))
    conn.commit()
    conn.close()
    logger.debug("Saved entry for %s", entry.date.isoformat())


def get_entry(d: date) -> TimesheetEntry | None:
    """Get a single entry by date."""
    conn = get_connection()
    row = conn.execute(
        "SELECT * FROM timesheet_entries WHERE date = ?",
        (d.isoformat(),)
    ).fetchone()
    conn.close()

    if row:
        return _row_to_entry(row)
    return None


def get_entry_or_empty(d: date) -> TimesheetEntry:
    """Get the entry for a date, or a blank draft if none is stored."""
    return get_entry(d) or TimesheetEntry(date=d)


def delete_entry(d: date) -> bool:
    """Delete the entry for a date. Returns False if there was none."""
    conn = get_connection()
    cursor = conn.execute("DELETE FROM timesheet_entries WHERE date = ?", (d.isoformat(),))
    conn.commit()
    conn.close()
    return cursor.rowcount > 0


def get_entries_range(start: date, end: date) -> list[TimesheetEntry]:
    """Get entries between two dates (inclusive)."""
    conn = get_connection()
    rows = conn.execute(
        "SELECT * FROM timesheet_entries WHERE date >= ? AND date <= ? ORDER BY date",
        (start.isoformat(), end.isoformat())
    ).fetchall()
    conn.close()

    return [_row_to_entry(row) for row in rows]


def get_month_entries(year: int, month: int) -> list[TimesheetEntry]:
    """Get all entries for a calendar month."""
    start = date(year, month, 1)
    end = date(year, month, monthrange(year, month)[1])
    return get_entries_range(start, end)


# --- Rate Card Functions ---


_RATE_CARD_DECIMALS = [f.name for f in fields(RateCard) if f.name != "currency"]


def get_rate_card() -> RateCard:
    """Load the rate card, falling back to defaults for missing keys."""
    conn = get_connection()
    rows = conn.execute("SELECT key, value FROM config").fetchall()
    conn.close()

    card = RateCard()
    for row in rows:
        if row["key"] in _RATE_CARD_DECIMALS:
            setattr(card, row["key"], Decimal(row["value"]))
        elif row["key"] == "currency":
            card.currency = row["value"]

    return card


def save_rate_card(card: RateCard):
    """Save the rate card. Raises ValueError if it breaks its invariants."""
    problems = card.problems()
    if problems:
        raise ValueError("; ".join(problems))

    conn = get_connection()
    for name in _RATE_CARD_DECIMALS:
        conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                     (name, str(getattr(card, name))))
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                 ("currency", card.currency))
    conn.commit()
    conn.close()
    logger.debug("Saved rate card: %s", card)


def update_rate_card(**changes) -> RateCard:
    """Apply a partial update to the stored rate card and return the result."""
    card = replace(get_rate_card(), **changes)
    save_rate_card(card)
    return card
