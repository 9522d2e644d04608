from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import matplotlib
import pytest

matplotlib.use("Agg", force=True)
from workplan.precheck import PrecheckReport
from workplan.reporting.reporter import Reporter
from workplan.result_types import AllocationResult, WorkloadDay, WorkloadTask


def make_result() -> AllocationResult:
    return AllocationResult(
        days=[
            WorkloadDay(
                date(2024, 6, 3),
                allocated_hours=6.0,
                max_hours=8.0,
                available_hours=2.0,
                is_overtime=False,
                tasks=(WorkloadTask(1, "API", 6.0),),
            )
        ]
    ).with_developer(1, "Ada")


def test_reporter_prints_precheck_and_report(
    capsys: pytest.CaptureFixture[str],
) -> None:
    reporter = Reporter(SimpleNamespace(OUTPUT_DIR="unused"), show_tasks=False)

    reporter.pre_allocate(PrecheckReport(8.0, 6.0, 8.0))
    reporter.post_allocate(make_result())
    out = capsys.readouterr().out

    assert "Pre-check: effort vs capacity" in out
    assert "OK" in out
    assert "Workload: Ada" in out
    assert "#1 API" not in out
    assert reporter.last_plot is None


def test_reporter_saves_chart_when_enabled(
    tmp_path, capsys: pytest.CaptureFixture[str]
) -> None:
    reporter = Reporter(SimpleNamespace(OUTPUT_DIR=str(tmp_path)), enable_plots=True)

    reporter.post_allocate(make_result())

    assert reporter.last_plot == tmp_path / "daily_load_1.png"
    assert reporter.last_plot.exists()
    assert "Saved chart to" in capsys.readouterr().out
