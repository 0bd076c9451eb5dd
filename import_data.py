#!/usr/bin/env python3
"""Auto-fill timesheet entries from already-normalised call sheet records."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path

import storage
from models import CallSheet, TimesheetEntry
from rules import normalize_day_type
from utils import parse_time

logger = logging.getLogger(__name__)


def _clean_time(val) -> str | None:
    """Keep a value only if it is a usable HH:MM string."""
    if not isinstance(val, str) or parse_time(val) is None:
        return None
    return val.strip()


def _parse_int(val) -> int | None:
    if val is None or val == "":
        return None
    try:
        return int(val)
    except (TypeError, ValueError):
        return None


def parse_call_sheet(data: dict) -> CallSheet | None:
    """Build a CallSheet from a JSON record. Returns None without a usable date."""
    try:
        sheet_date = date.fromisoformat(str(data["date"])[:10])
    except (KeyError, TypeError, ValueError):
        logger.warning("Skipping call sheet without a valid date: %r", data.get("id"))
        return None

    return CallSheet(
        id=str(data.get("id") or f"callsheet-{sheet_date.isoformat()}"),
        date=sheet_date,
        unit_call_time=_clean_time(data.get("unitCallTime")),
        lunch_time=_clean_time(data.get("lunchTime")),
        wrap_estimate=_clean_time(data.get("wrapEstimate")),
        production_day=_parse_int(data.get("productionDay")),
        day_type=data.get("dayType"),
    )


def auto_fill_from_call_sheet(entry: TimesheetEntry, call_sheet: CallSheet) -> TimesheetEntry:
    """Return a copy of entry with the call sheet's times filled in.

    Times the call sheet doesn't carry keep the entry's own values.
    """
    day_type = normalize_day_type(call_sheet.day_type) if call_sheet.day_type else entry.day_type
    return replace(
        entry,
        unit_call=call_sheet.unit_call_time or entry.unit_call,
        wrap_out=call_sheet.wrap_estimate or entry.wrap_out,
        call_sheet_lunch=call_sheet.lunch_time or entry.call_sheet_lunch,
        production_day=call_sheet.production_day if call_sheet.production_day is not None else entry.production_day,
        day_type=day_type,
        auto_filled_from=call_sheet.id,
    )


def import_from_json(json_path: Path) -> int:
    """Merge every call sheet in a JSON file into the stored entries."""
    with open(json_path) as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("callSheets", [])

    storage.init_db()

    count = 0
    for record in data:
        if not isinstance(record, dict):
            logger.warning("Skipping non-object call sheet record: %r", record)
            continue
        call_sheet = parse_call_sheet(record)
        if call_sheet is None:
            continue

        entry = storage.get_entry_or_empty(call_sheet.date)
        if entry.status == "approved":
            logger.info("Entry for %s is approved, not overwriting", call_sheet.date)
            continue

        storage.save_entry(auto_fill_from_call_sheet(entry, call_sheet))
        count += 1

    logger.info("Imported %d call sheets from %s", count, json_path)
    return count


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    if len(sys.argv) != 2:
        print("Usage: import_data.py CALL_SHEETS.json")
        sys.exit(1)
    total = import_from_json(Path(sys.argv[1]))
    print(f"Total: {total} entries auto-filled")
