# workplan/result_types.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

import pandas as pd

DAY_COLUMNS = [
    "date",
    "developer_id",
    "developer_name",
    "allocated_hours",
    "max_hours",
    "available_hours",
    "is_overtime",
    "is_forced",
    "task_count",
]
TASK_COLUMNS = [
    "date",
    "developer_id",
    "task_id",
    "task_name",
    "daily_hours",
    "forced",
]


@dataclass(frozen=True)
class WorkloadTask:
    task_id: int
    task_name: str
    daily_hours: float
    forced: bool = False  # last-chance allocation that ignored capacity


@dataclass(frozen=True)
class WorkloadDay:
    """One developer's load on one working day."""

    date: date
    allocated_hours: float
    max_hours: float
    available_hours: float
    is_overtime: bool
    tasks: tuple[WorkloadTask, ...] = ()
    developer_id: Optional[int] = None
    developer_name: Optional[str] = None

    @property
    def is_forced(self) -> bool:
        return any(t.forced for t in self.tasks)

    @property
    def is_overloaded(self) -> bool:
        return self.allocated_hours > self.max_hours


@dataclass(frozen=True)
class UnreachableDeadline:
    """A slot whose effort could not be fully consumed inside its window."""

    task_id: int
    task_name: str
    remaining_hours: float
    original_hours: float
    window_start: date
    window_end: date
    reason: str


@dataclass
class AllocationResult:
    """Structured output of one allocation run."""

    days: list[WorkloadDay]
    diagnostics: list[UnreachableDeadline] = field(default_factory=list)
    remaining: dict[int, float] = field(default_factory=dict)
    simulation_start: Optional[date] = None

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def task_totals(self) -> dict[int, float]:
        """Hours allocated per task across the emitted days."""
        totals: dict[int, float] = {}
        for day in self.days:
            for t in day.tasks:
                totals[t.task_id] = totals.get(t.task_id, 0.0) + t.daily_hours
        return totals

    def with_developer(self, developer_id: int, developer_name: str) -> "AllocationResult":
        return replace(
            self,
            days=[
                replace(d, developer_id=developer_id, developer_name=developer_name)
                for d in self.days
            ],
        )

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {
                "date": d.date.isoformat(),
                "developer_id": d.developer_id,
                "developer_name": d.developer_name,
                "allocated_hours": d.allocated_hours,
                "max_hours": d.max_hours,
                "available_hours": d.available_hours,
                "is_overtime": d.is_overtime,
                "is_forced": d.is_forced,
                "task_count": len(d.tasks),
            }
            for d in self.days
        ]
        if not rows:
            return pd.DataFrame(columns=DAY_COLUMNS)
        return pd.DataFrame(rows, columns=DAY_COLUMNS)

    def tasks_frame(self) -> pd.DataFrame:
        rows = [
            {
                "date": d.date.isoformat(),
                "developer_id": d.developer_id,
                "task_id": t.task_id,
                "task_name": t.task_name,
                "daily_hours": t.daily_hours,
                "forced": t.forced,
            }
            for d in self.days
            for t in d.tasks
        ]
        if not rows:
            return pd.DataFrame(columns=TASK_COLUMNS)
        return pd.DataFrame(rows, columns=TASK_COLUMNS)
