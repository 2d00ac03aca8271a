"""Tests for dashboard metric helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from src.modules.analytics.metrics import (
    build_user_trend,
    calculate_growth_rate,
    default_range,
    format_percentage,
    percentage,
    previous_period,
    role_percentages,
    to_date,
)


@pytest.mark.parametrize(
    "current,previous,expected",
    [
        (150, 100, 50.0),
        (50, 100, -50.0),
        (100, 100, 0.0),
        (5, 0, 100.0),
        (0, 0, 0.0),
    ],
)
def test_calculate_growth_rate(current, previous, expected):
    assert calculate_growth_rate(current, previous) == pytest.approx(expected)


def test_percentage_of_empty_total():
    assert percentage(3, 0) == 0.0
    assert percentage(1, 4) == 25.0


@pytest.mark.parametrize(
    "value,include_sign,expected",
    [
        (12.345, False, "12.3%"),
        (12.345, True, "+12.3%"),
        (-4.0, True, "-4.0%"),
        (0.0, True, "0.0%"),
    ],
)
def test_format_percentage(value, include_sign, expected):
    assert format_percentage(value, include_sign=include_sign) == expected


def test_previous_period_has_equal_length():
    start = datetime(2026, 3, 10, tzinfo=timezone.utc)
    end = datetime(2026, 3, 17, tzinfo=timezone.utc)

    assert previous_period(start, end) == (
        datetime(2026, 3, 3, tzinfo=timezone.utc),
        start,
    )


def test_default_range_fills_missing_bounds():
    end = datetime(2026, 5, 1, tzinfo=timezone.utc)

    start, resolved_end = default_range(end=end, days=14)

    assert resolved_end == end
    assert end - start == timedelta(days=14)


def test_build_user_trend_is_cumulative():
    trend = build_user_trend(
        [(date(2026, 1, 1), 2), (date(2026, 1, 2), 0), (date(2026, 1, 3), 3)],
        starting_total=10,
    )

    assert [point["cumulative_users"] for point in trend] == [12, 12, 15]
    assert trend[0] == {"date": "2026-01-01", "new_users": 2, "cumulative_users": 12}


def test_role_percentages_include_empty_roles():
    shares = role_percentages({"USER": 3, "ADMIN": 1}, total=4)

    assert shares["USER"] == {"count": 3, "percentage": 75.0}
    assert shares["ADMIN"] == {"count": 1, "percentage": 25.0}
    assert shares["EDITOR"] == {"count": 0, "percentage": 0.0}


@pytest.mark.parametrize(
    "value",
    ["2026-02-14", date(2026, 2, 14), datetime(2026, 2, 14, 9, 30)],
)
def test_to_date(value):
    assert to_date(value) == date(2026, 2, 14)
