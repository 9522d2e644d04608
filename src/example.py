"""
Module with example code for running the workload allocator.

There are three ways to run the code:

1. A single developer with two overlapping tasks, weekday calendar only.
2. The same tasks over a week containing a public holiday and a Saturday
    overtime setting.
3. A small team loaded from JSON files, one independent simulation per
    developer.

Usage via cli:
    python3 -m src.example --option 1
"""

from __future__ import annotations

import argparse
from datetime import date
from pathlib import Path

from workplan import (
    Developer,
    HolidayCache,
    OvertimeConfig,
    TaskRecord,
    WorkdayCalendar,
    WorkdayFact,
    cfg,
    developer_workload,
    team_workload,
)
from workplan.reporting import Reporter
from workplan.reporting.plots import plot_team_load
from workplan.reporting.text_report import render_text_report
from workplan.tasks import developers_from_json, tasks_from_json

DEV = Developer(id=1, name="Ada", max_hours_per_day=8.0)
TASKS = [
    TaskRecord(
        id=1,
        name="Login API",
        planned_hours=12,
        planned_start="2024-06-03",
        planned_end="2024-06-05",
        owner_id=1,
    ),
    TaskRecord(
        id=2,
        name="Login UI",
        planned_hours=12,
        planned_start="2024-06-03",
        planned_end="2024-06-05",
        owner_id=1,
    ),
    TaskRecord(
        id=3,
        name="Release notes",
        planned_hours=6,
        planned_start="2024-06-06",
        planned_end="2024-06-08",
        owner_id=1,
    ),
]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run workload examples.")
    parser.add_argument(
        "--option",
        type=int,
        default=1,
        choices=(1, 2, 3),
        help="Example scenario to run (default: 1).",
    )
    return parser.parse_args()


def run_option(option: int) -> None:
    print(f"Running example code with option {option}")

    if option == 1:
        developer_workload(
            DEV,
            TASKS,
            date(2024, 6, 3),
            date(2024, 6, 9),
            WorkdayCalendar(),
            reporter=Reporter(cfg),
        )

    elif option == 2:
        # Friday off, Saturday worked.
        calendar = WorkdayCalendar(
            cache=HolidayCache([WorkdayFact(date(2024, 6, 7), is_holiday=True)]),
            overtime=OvertimeConfig(weekend_mode="saturday"),
        )
        developer_workload(
            DEV,
            TASKS,
            date(2024, 6, 3),
            date(2024, 6, 9),
            calendar,
            reporter=Reporter(cfg, enable_plots=True),
        )

    elif option == 3:
        root = Path(__file__).resolve().parent
        results = team_workload(
            developers_from_json(root / "example_developers.json"),
            tasks_from_json(root / "example_tasks.json"),
            date(2024, 6, 3),
            date(2024, 6, 14),
            WorkdayCalendar(),
        )
        for res in results.values():
            render_text_report(res, show_tasks=False)
        plot_team_load(results, out_dir=cfg.OUTPUT_DIR)


if __name__ == "__main__":
    args = parse_args()
    run_option(args.option)
