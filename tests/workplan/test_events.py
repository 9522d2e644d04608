from __future__ import annotations

from datetime import date

from workplan.events import (
    DEFAULT_EVENT_COLOR,
    calendar_events,
    calendar_resources,
    task_type_color,
)
from workplan.tasks import Developer, TaskRecord


def test_event_fields_and_exclusive_end() -> None:
    task = TaskRecord(
        7,
        "Login API",
        12,
        "2024-06-03",
        "2024-06-05",
        owner_id=1,
        owner_name="Ada",
        task_type="代码开发",
        priority="high",
        sprint_id=3,
        sprint_name="S3",
    )

    (event,) = calendar_events([task])

    assert event.id == "task-7"
    assert event.title == "Login API [Ada]"
    assert event.start == "2024-06-03"
    assert event.end == "2024-06-06"
    assert event.resource_id == "1"
    assert event.color == "#52c41a"
    assert event.ext_props.planned_hours == 12
    assert event.ext_props.sprint_name == "S3"


def test_end_crosses_month_boundary() -> None:
    (event,) = calendar_events([TaskRecord(1, "x", 1, "2024-02-27", "2024-02-29")])
    assert event.end == "2024-03-01"


def test_missing_or_unparsable_dates_pass_through() -> None:
    undated, garbled = calendar_events(
        [TaskRecord(1, "undated"), TaskRecord(2, "garbled", 1, "soon", "later")]
    )
    assert undated.start == ""
    assert undated.end is None
    assert undated.resource_id is None
    assert garbled.start == "soon"
    assert garbled.end == "later"


def test_unknown_task_type_uses_default_color() -> None:
    assert task_type_color(None) == DEFAULT_EVENT_COLOR
    assert task_type_color("meeting") == DEFAULT_EVENT_COLOR
    assert task_type_color("JIRA BUG") == "#f5222d"


def test_range_and_owner_filters() -> None:
    tasks = [
        TaskRecord(1, "a", 4, "2024-06-03", "2024-06-04", owner_id=1),
        TaskRecord(2, "b", 4, "2024-06-03", "2024-06-04", owner_id=2),
        TaskRecord(3, "c", 4, "2024-07-01", "2024-07-02", owner_id=1),
    ]

    in_june = calendar_events(tasks, date(2024, 6, 1), date(2024, 6, 30))
    assert [e.id for e in in_june] == ["task-1", "task-2"]

    mine = calendar_events(tasks, developer_id=1)
    assert [e.id for e in mine] == ["task-1", "task-3"]


def test_resources_skip_inactive_developers() -> None:
    resources = calendar_resources(
        [
            Developer(1, "Ada", avatar_color="#f00"),
            Developer(2, "Linus", is_active=False),
        ]
    )
    assert [(r.id, r.title, r.avatar_color) for r in resources] == [("1", "Ada", "#f00")]
