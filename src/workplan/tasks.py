from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


def parse_date(value: Any) -> Optional[date]:
    """
    Best-effort conversion to a date. Accepts date/datetime objects and ISO
    strings (a trailing time part is ignored). Returns None when unparsable.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


@dataclass(slots=True)
class Developer:
    """A developer as supplied by the developer store."""

    id: int
    name: str
    max_hours_per_day: float = 8.0
    is_active: bool = True
    avatar_color: Optional[str] = None


@dataclass(slots=True)
class TaskRecord:
    """
    A task as supplied by the task store. Dates and effort may be missing or
    malformed; projection decides what is usable.
    """

    id: int
    name: str
    planned_hours: Optional[float] = None
    planned_start: Optional[date | str] = None
    planned_end: Optional[date | str] = None
    owner_id: Optional[int] = None
    owner_name: Optional[str] = None
    task_type: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    sprint_id: Optional[int] = None
    sprint_name: Optional[str] = None

    @property
    def start_date(self) -> Optional[date]:
        return parse_date(self.planned_start)

    @property
    def end_date(self) -> Optional[date]:
        return parse_date(self.planned_end)


@dataclass(slots=True)
class TaskSlot:
    """Allocation state for one task within a single run."""

    task_id: int
    task_name: str
    remaining_hours: float
    window_start: date
    window_end: date
    original_hours: float = 0.0

    def __post_init__(self) -> None:
        if not self.original_hours:
            self.original_hours = self.remaining_hours

    def is_active(self, day: date) -> bool:
        return (
            self.remaining_hours > 0.0 and self.window_start <= day <= self.window_end
        )


def build_task_slots(tasks: Iterable[TaskRecord]) -> list[TaskSlot]:
    """
    Project task records into fresh slots, dropping records that cannot be
    allocated (no positive effort, missing/unparsable dates, inverted window).
    """
    slots: list[TaskSlot] = []
    for task in tasks:
        hours = task.planned_hours
        if hours is None or not math.isfinite(hours) or hours <= 0:
            logger.debug("Skipping task %s: no positive effort", task.id)
            continue
        start, end = task.start_date, task.end_date
        if start is None or end is None:
            logger.debug("Skipping task %s: missing or invalid dates", task.id)
            continue
        if start > end:
            logger.debug("Skipping task %s: window ends before it starts", task.id)
            continue
        slots.append(
            TaskSlot(
                task_id=task.id,
                task_name=task.name,
                remaining_hours=float(hours),
                window_start=start,
                window_end=end,
            )
        )
    return slots


def tasks_in_range(
    tasks: Iterable[TaskRecord],
    start: date,
    end: date,
    developer_id: Optional[int] = None,
) -> list[TaskRecord]:
    """Tasks (optionally owned by `developer_id`) whose window intersects [start, end]."""
    out: list[TaskRecord] = []
    for task in tasks:
        if developer_id is not None and task.owner_id != developer_id:
            continue
        ts, te = task.start_date, task.end_date
        if ts is None or te is None:
            continue
        if ts <= end and te >= start:
            out.append(task)
    return out


def _load_entries(path: str | Path, keys: Sequence[str]) -> list[Mapping[str, Any]]:
    file_path = Path(path).expanduser()
    if file_path.suffix.lower() != ".json":
        raise ValueError("Expected a path to a .json file.")
    if not file_path.exists():
        raise FileNotFoundError(f"JSON file not found: {file_path}")

    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {file_path}") from exc

    if isinstance(data, Mapping):
        entries = next((data[k] for k in keys if k in data), None)
        if entries is None:
            raise ValueError(
                f"JSON file must contain a list or one of the keys {list(keys)}."
            )
    else:
        entries = data

    if isinstance(entries, (str, bytes, bytearray)) or not isinstance(
        entries, Sequence
    ):
        raise TypeError("JSON file must contain a list of objects.")
    for raw in entries:
        if not isinstance(raw, Mapping):
            raise TypeError("Each entry must be an object/dict.")
    return list(entries)


def _opt_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _opt_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def tasks_from_json(path: str | Path) -> list[TaskRecord]:
    """
    Load task records from a JSON file holding a list of task objects or an
    object with a top-level `tasks` array. Bad effort values load as None and
    are dropped later by `build_task_slots`.
    """
    records: list[TaskRecord] = []
    for raw in _load_entries(path, ("tasks",)):
        if "id" not in raw:
            raise ValueError("Each task entry needs an 'id'.")
        records.append(
            TaskRecord(
                id=int(raw["id"]),
                name=str(raw.get("name") or f"Task {raw['id']}"),
                planned_hours=_opt_float(raw.get("planned_hours")),
                planned_start=_opt_str(raw.get("planned_start")),
                planned_end=_opt_str(raw.get("planned_end")),
                owner_id=_opt_int(raw.get("owner_id")),
                owner_name=_opt_str(raw.get("owner_name")),
                task_type=_opt_str(raw.get("task_type")),
                priority=_opt_str(raw.get("priority")),
                status=_opt_str(raw.get("status")),
                sprint_id=_opt_int(raw.get("sprint_id")),
                sprint_name=_opt_str(raw.get("sprint_name")),
            )
        )
    return records


def developers_from_json(
    path: str | Path, default_max_hours: float = 8.0
) -> list[Developer]:
    """Load developers from a JSON list or an object with a `developers` array."""
    developers: list[Developer] = []
    for raw in _load_entries(path, ("developers",)):
        if "id" not in raw:
            raise ValueError("Each developer entry needs an 'id'.")
        max_hours = _opt_float(raw.get("max_hours_per_day"))
        developers.append(
            Developer(
                id=int(raw["id"]),
                name=str(raw.get("name") or f"Developer {raw['id']}"),
                max_hours_per_day=max_hours if max_hours else default_max_hours,
                is_active=bool(raw.get("is_active", True)),
                avatar_color=_opt_str(raw.get("avatar_color")),
            )
        )
    return developers
