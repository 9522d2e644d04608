from __future__ import annotations

from typing import Mapping, Optional, Sequence

import pandas as pd

from workplan.config import cfg
from workplan.result_types import AllocationResult, WorkloadDay

from .data_models import BookingStatus, UtilizationSummary


def workload_frame(days: Sequence[WorkloadDay]) -> pd.DataFrame:
    """One row per emitted day."""
    return AllocationResult(days=list(days)).to_frame()


def task_frame(days: Sequence[WorkloadDay]) -> pd.DataFrame:
    """One row per (day, task) allocation."""
    return AllocationResult(days=list(days)).tasks_frame()


def utilization_summary(result: AllocationResult) -> UtilizationSummary:
    df = result.to_frame()
    if df.empty:
        return UtilizationSummary(
            days=0,
            allocated_hours=0.0,
            capacity_hours=0.0,
            utilization=0.0,
            overloaded_days=0,
            overtime_days=0,
            forced_days=0,
        )
    allocated = float(df["allocated_hours"].sum())
    capacity = float(df["max_hours"].sum())
    return UtilizationSummary(
        days=int(len(df)),
        allocated_hours=allocated,
        capacity_hours=capacity,
        utilization=allocated / capacity if capacity > 0 else 0.0,
        overloaded_days=int((df["allocated_hours"] > df["max_hours"]).sum()),
        overtime_days=int(df["is_overtime"].astype(bool).sum()),
        forced_days=int(df["is_forced"].astype(bool).sum()),
    )


def booking_status(
    days: Sequence[WorkloadDay],
    exclude_task_id: Optional[int] = None,
    nearly_full_hours: Optional[float] = None,
) -> BookingStatus:
    """
    Classify dates by room left for other work, ignoring `exclude_task_id` so
    that task can still be rescheduled onto days it already occupies.
    `nearly_full_hours` defaults to `cfg.NEARLY_FULL_HOURS`.
    """
    if nearly_full_hours is None:
        nearly_full_hours = cfg.NEARLY_FULL_HOURS
    fully: set = set()
    nearly: set = set()
    for day in days:
        other = sum(t.daily_hours for t in day.tasks if t.task_id != exclude_task_id)
        remaining = day.max_hours - other
        if remaining <= 0:
            fully.add(day.date)
        elif remaining < nearly_full_hours:
            nearly.add(day.date)
    return BookingStatus(fully_booked=fully, nearly_full=nearly)


def team_load_frame(results: Mapping[int, AllocationResult]) -> pd.DataFrame:
    """Allocated hours pivoted to (date x developer_id); missing days are 0."""
    frames = [res.to_frame() for res in results.values()]
    frames = [f for f in frames if not f.empty]
    if not frames:
        return pd.DataFrame()
    df = pd.concat(frames, ignore_index=True)
    df["date"] = pd.to_datetime(df["date"])
    return df.pivot_table(
        index="date",
        columns="developer_id",
        values="allocated_hours",
        aggfunc="sum",
        fill_value=0.0,
    ).sort_index()
