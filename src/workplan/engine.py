# workplan/engine.py
from __future__ import annotations

import logging
import math
from bisect import bisect_left, bisect_right
from dataclasses import replace
from datetime import date
from typing import Any, Iterable, Optional

from workplan.calendar import DayKind, WorkdayCalendar, iter_dates
from workplan.config import cfg
from workplan.errors import InvalidInputError
from workplan.result_types import (
    AllocationResult,
    UnreachableDeadline,
    WorkloadDay,
    WorkloadTask,
)
from workplan.tasks import TaskSlot, parse_date

logger = logging.getLogger(__name__)

# Residues below this are float noise, not unallocated effort.
EPSILON = 1e-9

REASON_NO_WORKDAYS = "no_workdays_in_window"
REASON_UNCONSUMED = "effort_not_consumed"


def require_date(value: Any, label: str) -> date:
    parsed = parse_date(value)
    if parsed is None:
        raise InvalidInputError(f"{label} is not a valid date: {value!r}")
    return parsed


def validate_request(
    capacity: float, report_start: Any, report_end: Any
) -> tuple[date, date]:
    """Reject malformed requests before any simulation happens."""
    start = require_date(report_start, "report_start")
    end = require_date(report_end, "report_end")
    if start > end:
        raise InvalidInputError(
            f"report_start {start.isoformat()} is after report_end {end.isoformat()}"
        )
    try:
        cap = float(capacity)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"capacity must be a number; got {capacity!r}") from exc
    if not math.isfinite(cap) or cap <= 0.0:
        raise InvalidInputError(f"capacity must be > 0; got {capacity!r}")
    return start, end


def validate_span(
    sim_start: date, horizon_end: date, max_span_days: Optional[int] = None
) -> None:
    """Reject simulations longer than `max_span_days` (default `Config.MAX_SPAN_DAYS`)."""
    limit = max_span_days if max_span_days is not None else cfg.MAX_SPAN_DAYS
    span = (horizon_end - sim_start).days + 1
    if span > limit:
        raise InvalidInputError(
            f"Date range {sim_start.isoformat()}..{horizon_end.isoformat()} spans "
            f"{span} days; the limit is {limit}."
        )


def overtime_days(slots: Iterable[TaskSlot], calendar: WorkdayCalendar) -> set[date]:
    """Non-working dates inside any slot window, to be worked as overtime."""
    out: set[date] = set()
    for slot in slots:
        for d in iter_dates(slot.window_start, slot.window_end):
            if d not in out and not calendar.is_workday(d):
                out.add(d)
    return out


class _EffectiveDays:
    """Sorted working + overtime days with O(log n) inclusive range counts."""

    def __init__(self, days: list[date]):
        self.days = days

    def count(self, start: date, end: date) -> int:
        if start > end:
            return 0
        return bisect_right(self.days, end) - bisect_left(self.days, start)

    def until(self, end: date) -> list[date]:
        return self.days[: bisect_right(self.days, end)]


def allocate(
    capacity: float,
    slots: Iterable[TaskSlot],
    report_start: date | str,
    report_end: date | str,
    calendar: WorkdayCalendar,
    *,
    include_overtime: bool = False,
    max_span_days: Optional[int] = None,
) -> AllocationResult:
    """
    Earliest-deadline-first, front-loaded allocation of task effort onto days.

    Simulation starts at the earliest slot start (or report_start, whichever
    is earlier) so that effort consumed before the report window is accounted
    for; only days from report_start onward are emitted. On a slot's last
    effective workday its whole remainder is allocated even when that pushes
    the day past `capacity`.

    Parameters
    ----------
    capacity:
        Daily capacity in hours (> 0).
    slots:
        Task slots. They are copied; the caller's objects are never mutated.
    report_start, report_end:
        Inclusive reporting window (date or ISO string).
    calendar:
        Workday calendar consulted for every simulated date.
    include_overtime:
        Treat non-working dates inside any slot window as overtime workdays.
    max_span_days:
        Upper bound on simulated days; defaults to `Config.MAX_SPAN_DAYS`.

    Returns
    -------
    AllocationResult
        Emitted days in date order plus unreachable-deadline diagnostics.
    """
    start, end = validate_request(capacity, report_start, report_end)
    max_hours = float(capacity)
    work = [replace(s) for s in slots]

    sim_start = min([start] + [s.window_start for s in work])
    horizon_end = max([end] + [s.window_end for s in work])
    validate_span(sim_start, horizon_end, max_span_days)

    extra = overtime_days(work, calendar) if include_overtime else set()
    effective = _EffectiveDays(
        [
            d
            for d in iter_dates(sim_start, horizon_end)
            if d in extra or calendar.is_workday(d)
        ]
    )

    days: list[WorkloadDay] = []
    for current in effective.until(end):
        active = sorted(
            (s for s in work if s.is_active(current)), key=lambda s: s.window_end
        )

        capacity_left = max_hours
        entries: list[WorkloadTask] = []
        for slot in active:
            forced = effective.count(current, slot.window_end) <= 1
            if forced:
                alloc = slot.remaining_hours
            else:
                alloc = min(slot.remaining_hours, max(capacity_left, 0.0))
                if slot.remaining_hours - alloc <= EPSILON:
                    alloc = slot.remaining_hours

            if alloc > 0.0:
                slot.remaining_hours -= alloc
                capacity_left -= alloc
                entries.append(
                    WorkloadTask(
                        task_id=slot.task_id,
                        task_name=slot.task_name,
                        daily_hours=alloc,
                        forced=forced,
                    )
                )

        if current >= start:
            total = sum((t.daily_hours for t in entries), 0.0)
            days.append(
                WorkloadDay(
                    date=current,
                    allocated_hours=total,
                    max_hours=max_hours,
                    available_hours=max(max_hours - total, 0.0),
                    is_overtime=current in extra
                    or calendar.day_kind(current) is DayKind.OVERTIME,
                    tasks=tuple(entries),
                )
            )

    diagnostics: list[UnreachableDeadline] = []
    for slot in work:
        if slot.remaining_hours <= EPSILON:
            continue
        # Windows without a single workday can never be met; others only
        # count once their deadline has been simulated.
        if effective.count(slot.window_start, slot.window_end) == 0:
            reason = REASON_NO_WORKDAYS
        elif slot.window_end <= end:
            reason = REASON_UNCONSUMED
        else:
            continue
        logger.warning(
            "Task %s (%s) cannot finish %.2fh by its deadline %s: %s",
            slot.task_id,
            slot.task_name,
            slot.remaining_hours,
            slot.window_end.isoformat(),
            reason,
        )
        diagnostics.append(
            UnreachableDeadline(
                task_id=slot.task_id,
                task_name=slot.task_name,
                remaining_hours=slot.remaining_hours,
                original_hours=slot.original_hours,
                window_start=slot.window_start,
                window_end=slot.window_end,
                reason=reason,
            )
        )

    return AllocationResult(
        days=days,
        diagnostics=diagnostics,
        remaining={s.task_id: s.remaining_hours for s in work},
        simulation_start=sim_start,
    )
