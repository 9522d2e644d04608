from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from datetime import date, timedelta
from enum import Enum
from pathlib import Path
from types import MappingProxyType

from workplan.config import OvertimeConfig
from workplan.errors import SourceUnavailableError
from workplan.holidays import HolidaySource, WorkdayFact

logger = logging.getLogger(__name__)

_FRIDAY = 4
_EMPTY: Mapping[date, WorkdayFact] = MappingProxyType({})


class DayKind(str, Enum):
    """Which calendar rule decided a date's status."""

    HOLIDAY = "holiday"
    MAKEUP = "makeup"
    OVERTIME = "overtime"
    WEEKDAY = "weekday"
    WEEKEND = "weekend"

    @property
    def is_workday(self) -> bool:
        return self in (DayKind.MAKEUP, DayKind.OVERTIME, DayKind.WEEKDAY)


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


class HolidayCache:
    """
    Per-year store of workday facts.

    Each year maps to an immutable snapshot. Writers build a new mapping and
    swap it in under a lock, so readers never observe a half-written year.
    """

    def __init__(self, facts: Iterable[WorkdayFact] = ()):
        self._lock = threading.Lock()
        self._years: dict[int, Mapping[date, WorkdayFact]] = {}
        by_year: dict[int, list[WorkdayFact]] = {}
        for fact in facts:
            by_year.setdefault(fact.year, []).append(fact)
        for year, items in by_year.items():
            self.replace_year(year, items)

    def replace_year(self, year: int, facts: Iterable[WorkdayFact]) -> int:
        """Drop every cached fact for `year` and store `facts` instead."""
        snapshot = {f.day: f for f in facts if f.year == year}
        with self._lock:
            years = dict(self._years)
            years[year] = MappingProxyType(snapshot)
            self._years = years
        return len(snapshot)

    def get(self, day: date) -> WorkdayFact | None:
        return self._years.get(day.year, _EMPTY).get(day)

    def count_for_year(self, year: int) -> int:
        return len(self._years.get(year, _EMPTY))

    def facts_for_year(self, year: int) -> list[WorkdayFact]:
        facts = self._years.get(year, _EMPTY)
        return [facts[d] for d in sorted(facts)]

    def years(self) -> list[int]:
        return sorted(self._years)

    def save(self, path: str | Path) -> Path:
        """Persist all cached years as JSON."""
        file_path = Path(path).expanduser()
        file_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            str(year): [
                {
                    "date": f.day.isoformat(),
                    "is_holiday": f.is_holiday,
                    "is_makeup_workday": f.is_makeup_workday,
                    "name": f.name,
                }
                for f in self.facts_for_year(year)
            ]
            for year in self.years()
        }
        with file_path.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, ensure_ascii=False)
        return file_path

    @classmethod
    def load(cls, path: str | Path) -> "HolidayCache":
        """Load a cache written by `save`. A missing file yields an empty cache."""
        file_path = Path(path).expanduser()
        cache = cls()
        if not file_path.exists():
            return cache
        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {file_path}") from exc
        if not isinstance(data, Mapping):
            raise TypeError("Holiday cache file must contain a JSON object.")
        for year_key, rows in data.items():
            year = int(year_key)
            cache.replace_year(
                year,
                (
                    WorkdayFact(
                        day=date.fromisoformat(row["date"]),
                        is_holiday=bool(row.get("is_holiday")),
                        is_makeup_workday=bool(row.get("is_makeup_workday")),
                        name=str(row.get("name") or ""),
                    )
                    for row in rows
                ),
            )
        return cache


class WorkdayCalendar:
    """
    Answers whether a date is a working day.

    Precedence, highest first:
      1. cached holiday          -> not a workday
      2. cached make-up workday  -> workday
      3. configured overtime     -> workday
      4. Monday..Friday          -> workday
    """

    def __init__(
        self,
        cache: HolidayCache | None = None,
        overtime: OvertimeConfig | None = None,
        source: HolidaySource | None = None,
    ):
        self.cache = cache if cache is not None else HolidayCache()
        self.overtime = overtime or OvertimeConfig()
        self.source = source

    def day_kind(self, day: date) -> DayKind:
        fact = self.cache.get(day)
        if fact is not None:
            if fact.is_holiday:
                return DayKind.HOLIDAY
            if fact.is_makeup_workday:
                return DayKind.MAKEUP
        if self.overtime.is_overtime(day):
            return DayKind.OVERTIME
        return DayKind.WEEKDAY if day.weekday() <= _FRIDAY else DayKind.WEEKEND

    def is_workday(self, day: date) -> bool:
        return self.day_kind(day).is_workday

    def workdays(self, start: date, end: date) -> list[date]:
        return [d for d in iter_dates(start, end) if self.is_workday(d)]

    def count_workdays(self, start: date, end: date) -> int:
        """
        Inclusive count of working days, never less than 1.

        The floor keeps callers that divide by this count safe on ranges with
        no working day at all.
        """
        return max(len(self.workdays(start, end)), 1)

    def sync(self, year: int) -> int:
        """Refresh every cached fact for `year` from the holiday source."""
        if self.source is None:
            raise SourceUnavailableError("No holiday source configured.")
        try:
            facts = self.source.fetch_year(year)
        except SourceUnavailableError:
            raise
        except Exception as exc:
            raise SourceUnavailableError(
                f"Holiday source failed for {year}: {exc}"
            ) from exc
        return self.cache.replace_year(year, facts)

    def ensure_cached(self, start: date, end: date) -> None:
        """Sync every year in the range that has no cached facts yet."""
        if self.source is None:
            logger.debug("No holiday source configured; using cached facts only")
            return
        for year in range(start.year, end.year + 1):
            if self.cache.count_for_year(year) > 0:
                continue
            try:
                count = self.sync(year)
            except SourceUnavailableError as exc:
                logger.warning("Failed to sync holidays for %s: %s", year, exc)
                continue
            logger.info("Synced %d holiday entries for year %s", count, year)
