from __future__ import annotations

import json
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Literal, TypeAlias, get_args

from workplan.errors import InvalidInputError

WeekendMode: TypeAlias = Literal["none", "saturday", "sunday", "both"]


_SATURDAY = 5
_SUNDAY = 6


@dataclass
class Config:

    # Holiday source
    HOLIDAY_API_BASE_URL: str = field(
        default_factory=lambda: os.getenv(
            "WORKPLAN_HOLIDAY_API_URL", "https://timor.tech"
        ).rstrip("/")
    )
    HTTP_TIMEOUT_SEC: float = 10.0
    HTTP_RETRIES: int = 2

    # Upper bound on the number of simulated days per allocation call
    MAX_SPAN_DAYS: int = 1100

    # Capacity used when a developer record carries none
    DEFAULT_MAX_HOURS_PER_DAY: float = 8.0

    # Booking status: less than this many hours left marks a day nearly full
    NEARLY_FULL_HOURS: float = 2.0

    OUTPUT_DIR: str = "outputs"

    def validate(self) -> None:
        """
        Validate the Config object has sensible values before allocating.
        """
        if not self.HOLIDAY_API_BASE_URL:
            raise ValueError("HOLIDAY_API_BASE_URL must not be empty.")
        if self.HTTP_TIMEOUT_SEC <= 0.0:
            raise ValueError("HTTP_TIMEOUT_SEC must be > 0.")
        if self.HTTP_RETRIES <= 0:
            raise ValueError("HTTP_RETRIES must be > 0.")
        if self.MAX_SPAN_DAYS <= 0:
            raise ValueError("MAX_SPAN_DAYS must be > 0.")
        if self.DEFAULT_MAX_HOURS_PER_DAY <= 0.0:
            raise ValueError("DEFAULT_MAX_HOURS_PER_DAY must be > 0.")
        if self.NEARLY_FULL_HOURS < 0.0:
            raise ValueError("NEARLY_FULL_HOURS must be non-negative.")


def _normalize_date_set(values: Iterable[Any]) -> set[date]:
    out: set[date] = set()
    for val in values:
        if isinstance(val, datetime):
            out.add(val.date())
        elif isinstance(val, date):
            out.add(val)
        elif isinstance(val, str):
            try:
                out.add(date.fromisoformat(val.strip()[:10]))
            except ValueError as exc:
                raise InvalidInputError(f"Invalid overtime date '{val}'.") from exc
        else:
            raise InvalidInputError(
                "Overtime dates must be ISO strings or date/datetime objects."
            )
    return out


@dataclass(frozen=True)
class OvertimeConfig:
    """
    Installation-wide overtime settings: which weekend days are worked and any
    extra individual dates.
    """

    weekend_mode: WeekendMode = "none"
    custom_dates: frozenset[date] = frozenset()

    def __post_init__(self) -> None:
        if self.weekend_mode not in get_args(WeekendMode):
            raise InvalidInputError(
                f"weekend_mode must be one of {get_args(WeekendMode)}; "
                f"got {self.weekend_mode!r}"
            )
        object.__setattr__(
            self, "custom_dates", frozenset(_normalize_date_set(self.custom_dates))
        )

    def is_overtime(self, day: date) -> bool:
        if day in self.custom_dates:
            return True
        weekday = day.weekday()
        if weekday == _SATURDAY:
            return self.weekend_mode in ("saturday", "both")
        if weekday == _SUNDAY:
            return self.weekend_mode in ("sunday", "both")
        return False

    def to_json(self) -> str:
        return json.dumps(
            {
                "weekend": self.weekend_mode,
                "custom_dates": sorted(d.isoformat() for d in self.custom_dates),
            }
        )


def parse_overtime_config(blob: str | Mapping[str, Any] | None) -> OvertimeConfig:
    """
    Build an OvertimeConfig from the settings blob stored under
    `schedule.overtime_days`. Missing or unreadable blobs fall back to the
    default (no overtime).
    """
    if blob is None:
        return OvertimeConfig()
    if isinstance(blob, str):
        if not blob.strip():
            return OvertimeConfig()
        try:
            parsed = json.loads(blob)
        except json.JSONDecodeError:
            return OvertimeConfig()
    else:
        parsed = blob

    if not isinstance(parsed, Mapping):
        return OvertimeConfig()

    try:
        return OvertimeConfig(
            weekend_mode=parsed.get("weekend") or "none",
            custom_dates=frozenset(
                _normalize_date_set(parsed.get("custom_dates") or [])
            ),
        )
    except InvalidInputError:
        return OvertimeConfig()


cfg = Config()
