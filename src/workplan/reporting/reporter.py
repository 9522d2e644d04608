from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from workplan.precheck import PrecheckReport
from workplan.result_types import AllocationResult

from .plots import plot_daily_load
from .text_report import render_precheck, render_text_report


class Reporter:
    """High-level orchestrator: prints the precheck and renders workload reports."""

    def __init__(
        self,
        cfg: Any,
        enable_plots: bool = False,
        show_tasks: bool = True,
    ) -> None:
        """
        cfg must expose OUTPUT_DIR.
        """
        self.cfg = cfg
        self.enable_plots = enable_plots
        self.show_tasks = show_tasks
        self.last_plot: Optional[Path] = None

    def pre_allocate(self, precheck: PrecheckReport) -> None:
        render_precheck(precheck)

    def post_allocate(self, result: AllocationResult) -> None:
        render_text_report(result, show_tasks=self.show_tasks)
        if self.enable_plots:
            self.last_plot = plot_daily_load(
                result, out_dir=getattr(self.cfg, "OUTPUT_DIR", "outputs")
            )
            if self.last_plot is not None:
                print(f"\nSaved chart to {self.last_plot}")
