from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from workplan.config import Config, OvertimeConfig, parse_overtime_config
from workplan.errors import InvalidInputError


def test_default_config_is_valid() -> None:
    Config().validate()


@pytest.mark.parametrize(
    "field_name, value",
    [
        ("HOLIDAY_API_BASE_URL", ""),
        ("HTTP_TIMEOUT_SEC", 0.0),
        ("HTTP_RETRIES", 0),
        ("MAX_SPAN_DAYS", 0),
        ("DEFAULT_MAX_HOURS_PER_DAY", -1.0),
        ("NEARLY_FULL_HOURS", -0.5),
    ],
)
def test_validate_rejects_bad_values(field_name: str, value) -> None:
    with pytest.raises(ValueError, match=field_name):
        replace(Config(), **{field_name: value}).validate()


def test_base_url_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WORKPLAN_HOLIDAY_API_URL", "http://localhost:9000/")
    assert Config().HOLIDAY_API_BASE_URL == "http://localhost:9000"


def test_overtime_blob_is_parsed() -> None:
    blob = '{"weekend": "saturday", "custom_dates": ["2024-06-09", "2024-06-16"]}'
    ot = parse_overtime_config(blob)

    assert ot.weekend_mode == "saturday"
    assert ot.custom_dates == {date(2024, 6, 9), date(2024, 6, 16)}
    assert ot.is_overtime(date(2024, 6, 8))
    assert ot.is_overtime(date(2024, 6, 9))
    assert not ot.is_overtime(date(2024, 6, 23))


@pytest.mark.parametrize(
    "blob",
    [None, "", "   ", "{not json", "[1, 2]", '{"weekend": "holidays"}', {"weekend": None}],
)
def test_unreadable_overtime_blob_means_no_overtime(blob) -> None:
    assert parse_overtime_config(blob) == OvertimeConfig()


def test_overtime_blob_round_trips_through_json() -> None:
    ot = OvertimeConfig(weekend_mode="both", custom_dates=frozenset({date(2024, 5, 1)}))
    assert parse_overtime_config(ot.to_json()) == ot


def test_custom_dates_are_normalized() -> None:
    ot = OvertimeConfig(
        custom_dates=frozenset({"2024-06-09T00:00:00", datetime(2024, 6, 10, 9)})  # type: ignore[arg-type]
    )
    assert ot.custom_dates == {date(2024, 6, 9), date(2024, 6, 10)}


def test_invalid_overtime_values_raise() -> None:
    with pytest.raises(InvalidInputError):
        OvertimeConfig(weekend_mode="weekdays")  # type: ignore[arg-type]
    with pytest.raises(InvalidInputError):
        OvertimeConfig(custom_dates=frozenset({"someday"}))  # type: ignore[arg-type]
