# tests/conftest.py
from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from workplan.calendar import WorkdayCalendar


# -----------------------------
# Calendar helpers
# -----------------------------
@pytest.fixture
def weekday_calendar() -> WorkdayCalendar:
    """Calendar with no holiday data and no overtime: Mon-Fri only."""
    return WorkdayCalendar()


@pytest.fixture(scope="session")
def monday() -> date:
    """2024-06-03, a Monday with no public holiday around it."""
    return date(2024, 6, 3)


# -----------------------------
# Path helpers
# -----------------------------
@pytest.fixture(scope="session")
def project_root() -> Path:
    """Repository root (where pyproject.toml lives)."""
    return Path(__file__).resolve().parents[1]
