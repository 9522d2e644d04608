from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional

import matplotlib.dates as mdates
import matplotlib.pyplot as plt
from matplotlib.patches import Patch

from workplan.result_types import AllocationResult

from .metrics import team_load_frame

_OK_COLOR = "#52c41a"
_BUSY_COLOR = "#faad14"
_OVER_COLOR = "#ff4d4f"
_OVERTIME_COLOR = "#fa8c16"


def _save(fig: plt.Figure, out_dir: Path, filename: str, show: bool) -> Path:
    """Persist the plot under out_dir and optionally show it."""
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / filename
    fig.savefig(path, dpi=fig.dpi, bbox_inches="tight")
    if show:
        plt.show()
    plt.close(fig)
    return path


def _bar_color(allocated: float, max_hours: float, is_overtime: bool) -> str:
    if is_overtime:
        return _OVERTIME_COLOR
    if allocated > max_hours:
        return _OVER_COLOR
    if allocated > 0.8 * max_hours:
        return _BUSY_COLOR
    return _OK_COLOR


def plot_daily_load(
    result: AllocationResult,
    out_dir: str | Path = "outputs",
    filename: Optional[str] = None,
    show: bool = False,
) -> Optional[Path]:
    """Bar chart of allocated hours per day against the daily capacity."""
    if not result.days:
        return None

    dates = [mdates.date2num(d.date) for d in result.days]
    allocated = [d.allocated_hours for d in result.days]
    colors = [
        _bar_color(d.allocated_hours, d.max_hours, d.is_overtime) for d in result.days
    ]

    fig, ax = plt.subplots(figsize=(max(6.0, 0.35 * len(dates)), 3.5), dpi=150)
    bars = ax.bar(dates, allocated, width=0.8, color=colors, zorder=3)
    for bar, day in zip(bars, result.days):
        if day.is_overtime:
            bar.set_hatch("///")
            bar.set_edgecolor("white")

    ax.step(
        dates,
        [d.max_hours for d in result.days],
        where="mid",
        color="0.4",
        linestyle="--",
        linewidth=1,
        zorder=4,
        label="capacity",
    )

    name = result.days[0].developer_name or "developer"
    ax.set_title(f"Daily load: {name}", fontsize=11)
    ax.set_ylabel("Hours")
    ax.xaxis_date()
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%b %d\n%a"))
    for spine in ("top", "right"):
        ax.spines[spine].set_visible(False)

    ax.legend(
        handles=[
            Patch(facecolor=_OK_COLOR, label="within capacity"),
            Patch(facecolor=_BUSY_COLOR, label="> 80%"),
            Patch(facecolor=_OVER_COLOR, label="over capacity"),
            Patch(facecolor=_OVERTIME_COLOR, hatch="///", label="overtime"),
        ],
        loc="upper center",
        bbox_to_anchor=(0.5, 1.3),
        ncol=4,
        frameon=False,
        fontsize=8,
    )
    fig.tight_layout()

    dev_id = result.days[0].developer_id
    fname = filename or (
        f"daily_load_{dev_id}.png" if dev_id is not None else "daily_load.png"
    )
    return _save(fig, Path(out_dir), fname, show)


def plot_team_load(
    results: Mapping[int, AllocationResult],
    out_dir: str | Path = "outputs",
    filename: str = "team_load.png",
    show: bool = False,
) -> Optional[Path]:
    """Heatmap of allocated hours, developers on the y-axis and dates on the x-axis."""
    pivot = team_load_frame(results)
    if pivot.empty:
        return None

    names: dict[int, str] = {}
    for dev_id, res in results.items():
        for day in res.days:
            if day.developer_name:
                names[dev_id] = day.developer_name
                break

    grid = pivot.T
    fig, ax = plt.subplots(
        figsize=(max(6.0, 0.35 * grid.shape[1]), 1.5 + 0.4 * grid.shape[0]), dpi=150
    )
    im = ax.imshow(grid.values, aspect="auto", cmap="YlOrRd", vmin=0)
    ax.set_yticks(range(grid.shape[0]), [names.get(i, str(i)) for i in grid.index])
    ax.set_xticks(
        range(grid.shape[1]), [d.strftime("%m-%d") for d in grid.columns], rotation=90
    )
    ax.set_title("Allocated hours per developer and day", fontsize=11)
    fig.colorbar(im, ax=ax, label="Hours")
    fig.tight_layout()
    return _save(fig, Path(out_dir), filename, show)
