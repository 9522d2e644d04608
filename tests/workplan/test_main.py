from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

import workplan.main as main_mod
from workplan.calendar import HolidayCache, WorkdayCalendar
from workplan.errors import InvalidInputError
from workplan.holidays import StaticHolidaySource, WorkdayFact
from workplan.main import developer_workload, main, team_workload
from workplan.tasks import Developer, TaskRecord

ADA = Developer(1, "Ada", max_hours_per_day=8.0)
TASKS = [
    TaskRecord(1, "API", 12, "2024-06-03", "2024-06-05", owner_id=1),
    TaskRecord(2, "UI", 12, "2024-06-03", "2024-06-05", owner_id=1),
    TaskRecord(3, "Docs", 4, "2024-06-03", "2024-06-03", owner_id=2),
]


class RecordingReporter:
    def __init__(self) -> None:
        self.prechecks: list = []
        self.results: list = []

    def pre_allocate(self, precheck) -> None:
        self.prechecks.append(precheck)

    def post_allocate(self, result) -> None:
        self.results.append(result)


def test_developer_workload_uses_only_own_tasks(
    weekday_calendar: WorkdayCalendar,
) -> None:
    reporter = RecordingReporter()

    res = developer_workload(
        ADA, TASKS, "2024-06-03", "2024-06-07", weekday_calendar, reporter=reporter  # type: ignore[arg-type]
    )

    assert set(res.task_totals()) == {1, 2}
    assert all(d.developer_id == 1 and d.developer_name == "Ada" for d in res.days)
    assert len(res.days) == 5
    assert reporter.prechecks[0].total_demand_hours == 24.0
    assert reporter.results == [res]


def test_developer_workload_syncs_missing_years() -> None:
    source = StaticHolidaySource([WorkdayFact(date(2024, 6, 4), is_holiday=True)])
    calendar = WorkdayCalendar(source=source)

    res = developer_workload(ADA, TASKS, "2024-06-03", "2024-06-07", calendar)

    assert source.calls == [2024]
    assert date(2024, 6, 4) not in [d.date for d in res.days]
    assert res.task_totals() == {1: 12.0, 2: 12.0}


def test_developer_without_capacity_uses_default(
    weekday_calendar: WorkdayCalendar,
) -> None:
    dev = Developer(1, "Ada", max_hours_per_day=0.0)
    res = developer_workload(dev, TASKS, "2024-06-03", "2024-06-03", weekday_calendar)
    assert res.days[0].max_hours == 8.0


def test_developer_workload_rejects_inverted_range(
    weekday_calendar: WorkdayCalendar,
) -> None:
    with pytest.raises(InvalidInputError):
        developer_workload(ADA, TASKS, "2024-06-07", "2024-06-03", weekday_calendar)


def test_team_workload_skips_inactive(weekday_calendar: WorkdayCalendar) -> None:
    team = [ADA, Developer(2, "Grace", 6.0), Developer(3, "Linus", is_active=False)]

    results = team_workload(team, TASKS, "2024-06-03", "2024-06-07", weekday_calendar)

    assert sorted(results) == [1, 2]
    assert results[2].task_totals() == {3: 4.0}
    assert results[2].days[0].max_hours == 6.0


# -----------------------------
# CLI
# -----------------------------
@pytest.fixture
def offline_source(monkeypatch: pytest.MonkeyPatch) -> StaticHolidaySource:
    source = StaticHolidaySource(
        [WorkdayFact(date(2024, 10, 1), is_holiday=True, name="National Day")]
    )

    class FakeHttpSource:
        @classmethod
        def from_config(cls, config, transport=None):
            return source

    monkeypatch.setattr(main_mod, "HttpHolidaySource", FakeHttpSource)
    return source


@pytest.fixture
def data_files(tmp_path: Path) -> tuple[Path, Path]:
    tasks = tmp_path / "tasks.json"
    tasks.write_text(
        json.dumps(
            {
                "tasks": [
                    {
                        "id": t.id,
                        "name": t.name,
                        "planned_hours": t.planned_hours,
                        "planned_start": t.planned_start,
                        "planned_end": t.planned_end,
                        "owner_id": t.owner_id,
                    }
                    for t in TASKS
                ]
            }
        ),
        encoding="utf-8",
    )
    devs = tmp_path / "developers.json"
    devs.write_text(json.dumps([{"id": 1, "name": "Ada"}]), encoding="utf-8")
    return tasks, devs


def test_cli_workload_prints_report(
    offline_source, data_files, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    tasks, devs = data_files
    cache_path = tmp_path / "holidays.json"

    code = main(
        [
            "--holidays-cache",
            str(cache_path),
            "workload",
            "--tasks",
            str(tasks),
            "--developers",
            str(devs),
            "--developer-id",
            "1",
            "--start",
            "2024-06-03",
            "--end",
            "2024-06-07",
        ]
    )

    assert code == 0
    out = capsys.readouterr().out
    assert "Workload: Ada" in out
    assert "#1 API" in out
    assert HolidayCache.load(cache_path).years() == [2024]


def test_cli_unknown_developer(offline_source, data_files) -> None:
    tasks, devs = data_files
    args = ["workload", "--tasks", str(tasks), "--developers", str(devs)]
    args += ["--developer-id", "9", "--start", "2024-06-03", "--end", "2024-06-07"]
    assert main(args) == 2


def test_cli_invalid_range(offline_source, data_files) -> None:
    tasks, devs = data_files
    args = ["workload", "--tasks", str(tasks), "--developers", str(devs)]
    args += ["--developer-id", "1", "--start", "2024-06-07", "--end", "2024-06-03"]
    assert main(args) == 2


def test_cli_sync_saves_cache(
    offline_source, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cache_path = tmp_path / "holidays.json"

    assert main(["--holidays-cache", str(cache_path), "sync", "2024"]) == 0

    assert "Synced 1 holiday entries for 2024" in capsys.readouterr().out
    assert HolidayCache.load(cache_path).count_for_year(2024) == 1


def test_cli_sync_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    class Unreachable:
        def fetch_year(self, year: int):
            raise OSError("no route to host")

    class FakeHttpSource:
        @classmethod
        def from_config(cls, config, transport=None):
            return Unreachable()

    monkeypatch.setattr(main_mod, "HttpHolidaySource", FakeHttpSource)
    assert main(["sync", "2024"]) == 1


def test_oversized_span_is_rejected_before_syncing() -> None:
    source = StaticHolidaySource()
    calendar = WorkdayCalendar(source=source)
    tasks = [TaskRecord(1, "forever", 8, "2024-06-03", "2100-01-01", owner_id=1)]

    with pytest.raises(InvalidInputError, match="limit"):
        developer_workload(ADA, tasks, "2024-06-03", "2024-06-07", calendar)

    assert source.calls == []
    assert calendar.cache.years() == []
