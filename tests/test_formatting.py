from datetime import datetime, timedelta, timezone

import pytest

from ospm.formatting import (
    format_number,
    format_percent_change,
    format_price_change,
    format_probability,
    format_time_ago,
)


@pytest.mark.parametrize("p,expected", [
    (0.731, "73.1%"),
    (0.5, "50.0%"),
    (0.0, "0.0%"),
    (1.0, "100.0%"),
    (0.1234, "12.3%"),
])
def test_format_probability(p, expected):
    assert format_probability(p) == expected


def test_format_probability_precision():
    assert format_probability(0.731058, decimals=2) == "73.11%"


@pytest.mark.parametrize("p", [-0.01, 1.5, float("nan"), float("inf")])
def test_format_probability_rejects_out_of_range(p):
    with pytest.raises(ValueError):
        format_probability(p)


@pytest.mark.parametrize("x,expected", [
    (10, "10.0"),
    (6.2011, "6.2"),
    (1234.56, "1,234.6"),
    (1234567.0, "1,234,567.0"),
    (-2500.25, "-2,500.2"),
    (-0.04, "0.0"),
    (0, "0.0"),
])
def test_format_number(x, expected):
    assert format_number(x) == expected


def test_format_number_precision():
    assert format_number(6.2011, decimals=2) == "6.20"
    assert format_number(1500, decimals=0) == "1,500"


def test_format_number_rejects_non_finite():
    with pytest.raises(ValueError):
        format_number(float("nan"))


def test_format_percent_change():
    assert format_percent_change(46.2) == "+46.2%"
    assert format_percent_change(-3.0) == "-3.0%"
    assert format_percent_change(0.0) == "0.0%"


def test_format_price_change():
    assert format_price_change(0.5, 0.731) == "↑ 23.1%"
    assert format_price_change(0.731, 0.691) == "↓ 4.0%"
    assert format_price_change(0.5, 0.5) == "↓ 0.0%"


@pytest.mark.parametrize("delta,expected", [
    (timedelta(seconds=5), "just now"),
    (timedelta(seconds=59), "just now"),
    (timedelta(minutes=1), "1m ago"),
    (timedelta(minutes=59, seconds=59), "59m ago"),
    (timedelta(hours=3, minutes=10), "3h ago"),
    (timedelta(days=2, hours=5), "2d ago"),
    (timedelta(seconds=-30), "just now"),
])
def test_format_time_ago(now, delta, expected):
    assert format_time_ago(now - delta, now) == expected


def test_format_time_ago_treats_naive_as_utc(now):
    naive = datetime(2025, 3, 1, 11, 0)
    assert format_time_ago(naive, now) == "1h ago"


def test_format_time_ago_converts_timezones(now):
    plus_two = timezone(timedelta(hours=2))
    created = datetime(2025, 3, 1, 13, 30, tzinfo=plus_two)  # 11:30 UTC
    assert format_time_ago(created, now) == "30m ago"
