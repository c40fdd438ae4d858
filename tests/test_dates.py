"""Tests for utils.dates."""

from datetime import date, datetime

import pytest

from utils.dates import end_exclusive, month_bounds, shift_month, start_of_day


@pytest.mark.parametrize("year, month, last", [
    (2024, 2, date(2024, 2, 29)),
    (2023, 2, date(2023, 2, 28)),
    (2024, 4, date(2024, 4, 30)),
    (2024, 12, date(2024, 12, 31)),
])
def test_month_bounds(year, month, last) -> None:
    assert month_bounds(year, month) == (date(year, month, 1), last)


@pytest.mark.parametrize("delta, expected", [
    (0, (2024, 1)),
    (-1, (2023, 12)),
    (-13, (2022, 12)),
    (11, (2024, 12)),
    (12, (2025, 1)),
])
def test_shift_month(delta, expected) -> None:
    assert shift_month(2024, 1, delta) == expected


def test_day_boundaries() -> None:
    assert start_of_day(date(2024, 2, 29)) == datetime(2024, 2, 29, 0, 0)
    assert end_exclusive(date(2024, 2, 29)) == datetime(2024, 3, 1, 0, 0)
    assert end_exclusive(date(2024, 12, 31)) == datetime(2025, 1, 1, 0, 0)
