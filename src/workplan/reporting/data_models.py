from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class UtilizationSummary:
    """Totals over the emitted days of one allocation run."""

    days: int
    allocated_hours: float
    capacity_hours: float
    utilization: float  # allocated / capacity, 0.0 when there is no capacity
    overloaded_days: int  # allocated_hours > max_hours
    overtime_days: int
    forced_days: int  # at least one last-chance allocation


@dataclass(frozen=True)
class BookingStatus:
    """Dates with little or no room left once a given task is ignored."""

    fully_booked: set[date] = field(default_factory=set)
    nearly_full: set[date] = field(default_factory=set)
