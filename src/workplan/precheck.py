# workplan/precheck.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Sequence

from workplan.calendar import WorkdayCalendar, iter_dates
from workplan.tasks import TaskSlot


@dataclass(frozen=True)
class SlotDemand:
    task_id: int
    task_name: str
    hours: float
    workdays: int  # floored at 1
    daily_average: float
    overloaded: bool  # average alone exceeds daily capacity


@dataclass(frozen=True)
class PrecheckReport:
    capacity: float
    total_demand_hours: float
    total_capacity_hours: float
    slots: list[SlotDemand] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.total_demand_hours <= self.total_capacity_hours and not any(
            s.overloaded for s in self.slots
        )

    @property
    def overloaded(self) -> list[SlotDemand]:
        return [s for s in self.slots if s.overloaded]


def precheck_capacity(
    capacity: float, slots: Sequence[TaskSlot], calendar: WorkdayCalendar
) -> PrecheckReport:
    """
    Loose demand vs capacity check before allocating.

    Each slot's average daily demand is its effort spread over the working
    days of its window. Total capacity is `capacity` times the working days
    in the union of all windows. Ignores ordering and overtime, so a passing
    precheck does not promise a capacity-respecting allocation.
    """
    demands: list[SlotDemand] = []
    covered: set[date] = set()
    for slot in slots:
        workdays = calendar.count_workdays(slot.window_start, slot.window_end)
        avg = slot.remaining_hours / workdays
        demands.append(
            SlotDemand(
                task_id=slot.task_id,
                task_name=slot.task_name,
                hours=slot.remaining_hours,
                workdays=workdays,
                daily_average=avg,
                overloaded=avg > capacity,
            )
        )
        covered.update(
            d
            for d in iter_dates(slot.window_start, slot.window_end)
            if calendar.is_workday(d)
        )

    return PrecheckReport(
        capacity=capacity,
        total_demand_hours=sum(s.remaining_hours for s in slots),
        total_capacity_hours=capacity * len(covered),
        slots=demands,
    )
