from __future__ import annotations

from .data_models import BookingStatus, UtilizationSummary
from .metrics import (
    booking_status,
    task_frame,
    team_load_frame,
    utilization_summary,
    workload_frame,
)
from .reporter import Reporter

__all__ = [
    "Reporter",
    "BookingStatus",
    "UtilizationSummary",
    "booking_status",
    "task_frame",
    "team_load_frame",
    "utilization_summary",
    "workload_frame",
]
