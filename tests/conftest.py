"""Shared fixtures for tests."""

from __future__ import annotations

import os
import sqlite3
import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Generator

import pytest

# Set up test database before importing storage
_test_db_fd, _test_db_path = tempfile.mkstemp(suffix=".db")
os.environ["CREWSHEET_DB"] = _test_db_path


@pytest.fixture(scope="session", autouse=True)
def setup_test_db() -> Generator[Path, None, None]:
    """Set up a test database for the entire test session."""
    import storage

    # Reinitialise storage module with test db path
    storage.DB_PATH = Path(_test_db_path)
    storage.init_db()

    yield Path(_test_db_path)

    # Cleanup
    os.close(_test_db_fd)
    os.unlink(_test_db_path)


@pytest.fixture
def db_connection(setup_test_db: Path) -> Generator[sqlite3.Connection, None, None]:
    """Provide a database connection for tests."""
    import storage

    conn = storage.get_connection()
    yield conn
    conn.close()


@pytest.fixture
def clean_db(setup_test_db: Path) -> Generator[None, None, None]:
    """Clean database tables before each test."""
    import storage

    storage.DB_PATH = setup_test_db
    storage.init_db()
    conn = storage.get_connection()
    conn.execute("DELETE FROM timesheet_entries")
    conn.execute("DELETE FROM config")
    conn.commit()
    conn.close()

    yield


@pytest.fixture
def rate_card():
    """The reference rate card: 300/day over a 10 hour base."""
    from models import RateCard

    return RateCard(
        daily_rate=Decimal("300"),
        base_day_hours=Decimal("10"),
        ot_multiplier=Decimal("1.5"),
        pre_call_multiplier=Decimal("1.0"),
        late_night_multiplier=Decimal("2.0"),
        sixth_day_multiplier=Decimal("1.5"),
        seventh_day_multiplier=Decimal("2.0"),
        kit_rental=Decimal("20"),
    )


@pytest.fixture
def standard_entry():
    """A complete SWD entry with an hour of pre-call."""
    from models import TimesheetEntry

    return TimesheetEntry(
        date=date(2026, 1, 26),
        pre_call="06:00",
        unit_call="07:00",
        wrap_out="19:00",
        day_type="SWD",
    )


@pytest.fixture
def incomplete_entry():
    """An entry with a unit call but no wrap yet."""
    from models import TimesheetEntry

    return TimesheetEntry(
        date=date(2026, 1, 27),
        unit_call="07:00",
        day_type="SWD",
    )
