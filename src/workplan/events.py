from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from workplan.tasks import Developer, TaskRecord, parse_date, tasks_in_range

DEFAULT_EVENT_COLOR = "#1890ff"

TASK_TYPE_COLORS: dict[str, str] = {
    "需求澄清": "#1890ff",
    "技术预研": "#722ed1",
    "产品设计": "#13c2c2",
    "UE设计": "#eb2f96",
    "架构设计": "#fa8c16",
    "详细设计": "#a0d911",
    "代码开发": "#52c41a",
    "代码检查": "#2f54eb",
    "演示": "#fadb14",
    "用例设计": "#f5222d",
    "测试执行": "#faad14",
    "应用检查": "#ff7a45",
    "JIRA BUG": "#f5222d",
}


@dataclass(frozen=True)
class CalendarEventProps:
    task_id: int
    task_type: Optional[str]
    priority: Optional[str]
    status: Optional[str]
    owner_id: Optional[int]
    owner_name: Optional[str]
    planned_hours: Optional[float]
    sprint_id: Optional[int]
    sprint_name: Optional[str]


@dataclass(frozen=True)
class CalendarEvent:
    """A task rendered as a generic calendar event. `end` is exclusive."""

    id: str
    title: str
    start: str
    end: Optional[str]
    resource_id: Optional[str]
    color: str
    ext_props: CalendarEventProps


@dataclass(frozen=True)
class CalendarResource:
    id: str
    title: str
    avatar_color: Optional[str] = None


def task_type_color(task_type: Optional[str]) -> str:
    if task_type is None:
        return DEFAULT_EVENT_COLOR
    return TASK_TYPE_COLORS.get(task_type, DEFAULT_EVENT_COLOR)


def _as_text(value: object) -> str:
    parsed = parse_date(value)
    if parsed is not None:
        return parsed.isoformat()
    return "" if value is None else str(value)


def _exclusive_end(value: object) -> Optional[str]:
    if value is None:
        return None
    parsed = parse_date(value)
    if parsed is None:
        return str(value)
    return (parsed + timedelta(days=1)).isoformat()


def calendar_events(
    tasks: Iterable[TaskRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
    developer_id: Optional[int] = None,
) -> list[CalendarEvent]:
    """
    Project tasks into calendar events. With `start` and `end` only tasks whose
    window intersects the range are kept; `developer_id` limits to one owner.
    """
    if start is not None and end is not None:
        tasks = tasks_in_range(tasks, start, end, developer_id=developer_id)
    events: list[CalendarEvent] = []
    for task in tasks:
        if developer_id is not None and task.owner_id != developer_id:
            continue
        owner = f" [{task.owner_name}]" if task.owner_name else ""
        events.append(
            CalendarEvent(
                id=f"task-{task.id}",
                title=f"{task.name}{owner}",
                start=_as_text(task.planned_start),
                end=_exclusive_end(task.planned_end),
                resource_id=str(task.owner_id) if task.owner_id is not None else None,
                color=task_type_color(task.task_type),
                ext_props=CalendarEventProps(
                    task_id=task.id,
                    task_type=task.task_type,
                    priority=task.priority,
                    status=task.status,
                    owner_id=task.owner_id,
                    owner_name=task.owner_name,
                    planned_hours=task.planned_hours,
                    sprint_id=task.sprint_id,
                    sprint_name=task.sprint_name,
                ),
            )
        )
    return events


def calendar_resources(developers: Iterable[Developer]) -> list[CalendarResource]:
    return [
        CalendarResource(id=str(d.id), title=d.name, avatar_color=d.avatar_color)
        for d in developers
        if d.is_active
    ]
