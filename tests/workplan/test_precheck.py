from __future__ import annotations

from datetime import date

from workplan.calendar import WorkdayCalendar
from workplan.precheck import precheck_capacity
from workplan.tasks import TaskSlot


def test_feasible_load_passes(weekday_calendar: WorkdayCalendar, monday: date) -> None:
    slots = [
        TaskSlot(1, "a", 12.0, monday, date(2024, 6, 5)),
        TaskSlot(2, "b", 8.0, date(2024, 6, 4), date(2024, 6, 7)),
    ]

    report = precheck_capacity(8.0, slots, weekday_calendar)

    assert report.ok
    assert report.total_demand_hours == 20.0
    assert report.total_capacity_hours == 40.0
    assert [s.workdays for s in report.slots] == [3, 4]
    assert report.slots[0].daily_average == 4.0


def test_overloaded_slot_is_flagged(
    weekday_calendar: WorkdayCalendar, monday: date
) -> None:
    slots = [TaskSlot(1, "crunch", 20.0, monday, date(2024, 6, 4))]

    report = precheck_capacity(8.0, slots, weekday_calendar)

    assert not report.ok
    assert [s.task_id for s in report.overloaded] == [1]


def test_weekend_only_window_counts_one_workday(
    weekday_calendar: WorkdayCalendar,
) -> None:
    sat, sun = date(2024, 6, 8), date(2024, 6, 9)

    report = precheck_capacity(8.0, [TaskSlot(1, "w", 6.0, sat, sun)], weekday_calendar)

    (demand,) = report.slots
    assert demand.workdays == 1
    assert demand.daily_average == 6.0
    assert report.total_capacity_hours == 0.0
    assert not report.ok


def test_no_slots(weekday_calendar: WorkdayCalendar) -> None:
    report = precheck_capacity(8.0, [], weekday_calendar)
    assert report.ok
    assert report.slots == []
