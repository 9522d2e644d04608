from __future__ import annotations

from typing import Optional

from workplan.precheck import PrecheckReport
from workplan.result_types import AllocationResult

from .metrics import utilization_summary


def _fmt_float(x: float | None, nd: int = 2, as_pct: bool = False) -> str:
    if x is None:
        return "nan"
    try:
        return f"{float(100 * x):.{nd}f}%" if as_pct else f"{float(x):.{nd}f}"
    except (TypeError, ValueError):
        return "nan"


def render_precheck(report: PrecheckReport) -> None:
    print("\nPre-check: effort vs capacity")
    print(
        f"  demand={_fmt_float(report.total_demand_hours)}h "
        f"capacity={_fmt_float(report.total_capacity_hours)}h "
        f"(at {_fmt_float(report.capacity)}h/day)"
    )
    for s in report.overloaded:
        print(
            f"  ! task {s.task_id} '{s.task_name}' needs "
            f"{_fmt_float(s.daily_average)}h/day over {s.workdays} workday(s)"
        )
    if report.ok:
        print("  OK")


def render_text_report(
    result: AllocationResult, title: Optional[str] = None, show_tasks: bool = True
) -> None:
    """Print a day-by-day table, a utilisation summary and any diagnostics."""
    if title is None:
        names = {d.developer_name for d in result.days if d.developer_name}
        title = f"Workload: {', '.join(sorted(names))}" if names else "Workload"
    print(f"\n{title}")

    if not result.days:
        print("  (no working days in range)")
    for day in result.days:
        flags = ""
        if day.is_overtime:
            flags += " [overtime]"
        if day.is_overloaded:
            flags += " [over capacity]"
        print(
            f"  {day.date.isoformat()} {day.date.strftime('%a')}  "
            f"{_fmt_float(day.allocated_hours):>6}/{_fmt_float(day.max_hours)}h  "
            f"free={_fmt_float(day.available_hours)}h{flags}"
        )
        if show_tasks:
            for t in day.tasks:
                forced = " (deadline)" if t.forced else ""
                print(
                    f"      - #{t.task_id} {t.task_name}: "
                    f"{_fmt_float(t.daily_hours)}h{forced}"
                )

    summary = utilization_summary(result)
    print(
        f"\nUtilisation: {_fmt_float(summary.utilization, as_pct=True)} "
        f"({_fmt_float(summary.allocated_hours)}h of "
        f"{_fmt_float(summary.capacity_hours)}h) | "
        f"over capacity: {summary.overloaded_days} day(s) | "
        f"overtime: {summary.overtime_days} day(s)"
    )

    if result.diagnostics:
        print("\nUnreachable deadlines:")
        for diag in result.diagnostics:
            print(
                f"  task {diag.task_id} '{diag.task_name}' "
                f"{diag.window_start.isoformat()}..{diag.window_end.isoformat()}: "
                f"{_fmt_float(diag.remaining_hours)}h of "
                f"{_fmt_float(diag.original_hours)}h left ({diag.reason})"
            )
