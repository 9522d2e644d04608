from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Iterable, Sequence

from workplan.calendar import HolidayCache, WorkdayCalendar
from workplan.config import Config, cfg, parse_overtime_config
from workplan.engine import allocate, validate_request, validate_span
from workplan.errors import InvalidInputError, SourceUnavailableError
from workplan.holidays import HttpHolidaySource
from workplan.precheck import precheck_capacity
from workplan.reporting import Reporter
from workplan.result_types import AllocationResult
from workplan.tasks import (
    Developer,
    TaskRecord,
    build_task_slots,
    developers_from_json,
    tasks_from_json,
    tasks_in_range,
)

logger = logging.getLogger(__name__)


def developer_workload(
    developer: Developer,
    tasks: Iterable[TaskRecord],
    start: date | str,
    end: date | str,
    calendar: WorkdayCalendar,
    include_overtime: bool = False,
    config: Config | None = None,
    reporter: Reporter | None = None,
) -> AllocationResult:
    """
    Day-by-day workload for one developer over [start, end].

    Parameters
    ----------
    developer:
        Supplies the daily capacity (`max_hours_per_day`) and the owner id used
        to select tasks.
    tasks:
        Task records from the store; only the developer's tasks whose window
        intersects the range are used.
    calendar:
        Workday calendar. Holiday facts are synced for every year the
        simulation touches when missing.
    include_overtime:
        Work non-working dates inside task windows as overtime.
    config:
        Defaults to `workplan.config.cfg`.
    reporter:
        Optional reporter receiving the precheck and the result.

    Returns
    -------
    AllocationResult
        Days stamped with the developer's id and name.
    """
    cfg_obj = config or cfg
    capacity = developer.max_hours_per_day or cfg_obj.DEFAULT_MAX_HOURS_PER_DAY
    view_start, view_end = validate_request(capacity, start, end)

    selected = tasks_in_range(tasks, view_start, view_end, developer_id=developer.id)
    slots = build_task_slots(selected)

    process_start = min([view_start] + [s.window_start for s in slots])
    latest_end = max([view_end] + [s.window_end for s in slots])
    validate_span(process_start, latest_end, cfg_obj.MAX_SPAN_DAYS)
    calendar.ensure_cached(process_start, latest_end)

    if reporter is not None:
        reporter.pre_allocate(precheck_capacity(capacity, slots, calendar))

    result = allocate(
        capacity,
        slots,
        view_start,
        view_end,
        calendar,
        include_overtime=include_overtime,
        max_span_days=cfg_obj.MAX_SPAN_DAYS,
    ).with_developer(developer.id, developer.name)

    if reporter is not None:
        reporter.post_allocate(result)
    return result


def team_workload(
    developers: Iterable[Developer],
    tasks: Sequence[TaskRecord],
    start: date | str,
    end: date | str,
    calendar: WorkdayCalendar,
    include_overtime: bool = False,
    config: Config | None = None,
) -> dict[int, AllocationResult]:
    """Independent simulation per active developer, keyed by developer id."""
    return {
        dev.id: developer_workload(
            dev,
            tasks,
            start,
            end,
            calendar,
            include_overtime=include_overtime,
            config=config,
        )
        for dev in developers
        if dev.is_active
    }


def _build_calendar(
    config: Config, cache_path: Path | None, overtime_blob: str | None
) -> WorkdayCalendar:
    cache = HolidayCache.load(cache_path) if cache_path else HolidayCache()
    return WorkdayCalendar(
        cache=cache,
        overtime=parse_overtime_config(overtime_blob),
        source=HttpHolidaySource.from_config(config),
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="workplan", description="Developer workload allocation."
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level.")
    parser.add_argument(
        "--holidays-cache",
        type=Path,
        default=None,
        help="JSON file used to load and store synced holiday facts.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    wl = sub.add_parser("workload", help="Print a developer's daily workload.")
    wl.add_argument("--tasks", type=Path, required=True, help="Tasks JSON file.")
    wl.add_argument(
        "--developers", type=Path, required=True, help="Developers JSON file."
    )
    wl.add_argument("--developer-id", type=int, required=True)
    wl.add_argument("--start", required=True, help="Report start (YYYY-MM-DD).")
    wl.add_argument("--end", required=True, help="Report end (YYYY-MM-DD).")
    wl.add_argument(
        "--overtime-config",
        default=None,
        help='Overtime settings JSON, e.g. \'{"weekend": "saturday"}\'.',
    )
    wl.add_argument("--include-overtime", action="store_true")
    wl.add_argument("--plot", action="store_true", help="Save a daily load chart.")

    sync = sub.add_parser("sync", help="Sync holiday facts for one year.")
    sync.add_argument("year", type=int)
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    cfg.validate()

    overtime_blob = getattr(args, "overtime_config", None)
    calendar = _build_calendar(cfg, args.holidays_cache, overtime_blob)

    if args.command == "sync":
        try:
            count = calendar.sync(args.year)
        except SourceUnavailableError as exc:
            print(f"Holiday sync failed: {exc}", file=sys.stderr)
            return 1
        if args.holidays_cache:
            calendar.cache.save(args.holidays_cache)
        print(f"Synced {count} holiday entries for {args.year}")
        return 0

    developers = {
        d.id: d
        for d in developers_from_json(
            args.developers, default_max_hours=cfg.DEFAULT_MAX_HOURS_PER_DAY
        )
    }
    developer = developers.get(args.developer_id)
    if developer is None:
        print(f"Developer {args.developer_id} not found", file=sys.stderr)
        return 2

    try:
        developer_workload(
            developer,
            tasks_from_json(args.tasks),
            args.start,
            args.end,
            calendar,
            include_overtime=args.include_overtime,
            config=cfg,
            reporter=Reporter(cfg, enable_plots=args.plot),
        )
    except InvalidInputError as exc:
        print(f"Invalid request: {exc}", file=sys.stderr)
        return 2

    if args.holidays_cache:
        calendar.cache.save(args.holidays_cache)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
