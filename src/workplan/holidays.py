from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from time import sleep
from typing import Any, Protocol

import httpx

from workplan.config import Config
from workplan.errors import SourceUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WorkdayFact:
    """Authoritative calendar fact for one date: a day off or a make-up workday."""

    day: date
    is_holiday: bool = False
    is_makeup_workday: bool = False
    name: str = ""

    @property
    def year(self) -> int:
        return self.day.year


class HolidaySource(Protocol):
    """Yearly provider of holiday / make-up workday facts."""

    def fetch_year(self, year: int) -> list[WorkdayFact]: ...


class HttpHolidaySource:
    """Client for the yearly holiday endpoint (`/api/holiday/year/{year}`).

    The payload maps "MM-DD" keys to entries of the form
    ``{"holiday": bool, "name": str, "date": "YYYY-MM-DD"}`` where
    ``holiday: true`` is a day off and ``false`` a make-up workday.
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout_s: float = 10.0,
        retries: int = 2,
        backoff_s: float = 1.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.retries = max(1, retries)
        self.backoff_s = backoff_s
        self._transport = transport

    @classmethod
    def from_config(
        cls, config: Config, transport: httpx.BaseTransport | None = None
    ) -> "HttpHolidaySource":
        return cls(
            base_url=config.HOLIDAY_API_BASE_URL,
            timeout_s=config.HTTP_TIMEOUT_SEC,
            retries=config.HTTP_RETRIES,
            transport=transport,
        )

    def _get(self, url: str) -> httpx.Response:
        last_exc: Exception | None = None
        with httpx.Client(
            timeout=self.timeout_s,
            transport=self._transport,
            headers={"Accept": "application/json"},
        ) as client:
            for attempt in range(self.retries):
                try:
                    resp = client.get(url)
                    if resp.status_code >= 500 and attempt < self.retries - 1:
                        logger.debug(
                            "Holiday API %s returned %s, retrying",
                            url,
                            resp.status_code,
                        )
                        sleep(self.backoff_s * 2**attempt)
                        continue
                    resp.raise_for_status()
                    return resp
                except (httpx.TimeoutException, httpx.ConnectError) as exc:
                    last_exc = exc
                    if attempt < self.retries - 1:
                        logger.debug("Holiday API %s failed (%s), retrying", url, exc)
                        sleep(self.backoff_s * 2**attempt)
                        continue
                    raise
        if last_exc:
            raise last_exc
        raise RuntimeError("request failed without an explicit exception")

    def fetch_year(self, year: int) -> list[WorkdayFact]:
        url = f"{self.base_url}/api/holiday/year/{year}"
        try:
            payload = self._get(url).json()
        except httpx.HTTPError as exc:
            raise SourceUnavailableError(
                f"Holiday request for {year} failed: {exc}"
            ) from exc
        except ValueError as exc:
            raise SourceUnavailableError(
                f"Holiday response for {year} is not valid JSON"
            ) from exc
        return parse_holiday_payload(payload, year)


def parse_holiday_payload(payload: Any, year: int) -> list[WorkdayFact]:
    """Convert a holiday API payload into facts, sorted by date."""
    if not isinstance(payload, Mapping):
        raise SourceUnavailableError("Holiday response must be a JSON object.")
    code = payload.get("code")
    if code != 0:
        raise SourceUnavailableError(f"Holiday API returned error code: {code}")

    entries = payload.get("holiday") or {}
    if not isinstance(entries, Mapping):
        raise SourceUnavailableError("Holiday response 'holiday' must be an object.")

    facts: dict[date, WorkdayFact] = {}
    for key, entry in entries.items():
        if not isinstance(entry, Mapping):
            raise SourceUnavailableError(f"Malformed holiday entry for {key!r}.")
        raw_date = entry.get("date")
        try:
            day = date.fromisoformat(str(raw_date))
        except ValueError as exc:
            raise SourceUnavailableError(
                f"Malformed holiday date {raw_date!r} for {key!r}."
            ) from exc
        if day.year != year:
            continue
        is_holiday = bool(entry.get("holiday"))
        facts[day] = WorkdayFact(
            day=day,
            is_holiday=is_holiday,
            is_makeup_workday=not is_holiday,
            name=str(entry.get("name") or ""),
        )
    return [facts[d] for d in sorted(facts)]


class StaticHolidaySource:
    """Serves facts from memory; useful offline and in tests."""

    def __init__(self, facts: Iterable[WorkdayFact] = ()):
        self._by_year: dict[int, list[WorkdayFact]] = {}
        for fact in facts:
            self._by_year.setdefault(fact.year, []).append(fact)
        self.calls: list[int] = []

    def fetch_year(self, year: int) -> list[WorkdayFact]:
        self.calls.append(year)
        return sorted(self._by_year.get(year, []), key=lambda f: f.day)
