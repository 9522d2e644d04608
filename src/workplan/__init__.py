from .calendar import DayKind, HolidayCache, WorkdayCalendar
from .config import Config, OvertimeConfig, cfg, parse_overtime_config
from .engine import allocate
from .errors import InvalidInputError, SourceUnavailableError, WorkplanError
from .holidays import HttpHolidaySource, StaticHolidaySource, WorkdayFact
from .main import developer_workload, team_workload
from .result_types import AllocationResult, UnreachableDeadline, WorkloadDay
from .tasks import Developer, TaskRecord, TaskSlot, build_task_slots

__all__ = [
    "AllocationResult",
    "Config",
    "DayKind",
    "Developer",
    "HolidayCache",
    "HttpHolidaySource",
    "InvalidInputError",
    "OvertimeConfig",
    "SourceUnavailableError",
    "StaticHolidaySource",
    "TaskRecord",
    "TaskSlot",
    "UnreachableDeadline",
    "WorkdayCalendar",
    "WorkdayFact",
    "WorkloadDay",
    "WorkplanError",
    "allocate",
    "build_task_slots",
    "cfg",
    "developer_workload",
    "parse_overtime_config",
    "team_workload",
]
