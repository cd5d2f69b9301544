"""Tests for date parser with relative dates."""

from datetime import date, timedelta

import pytest

from obraledger.utils.date_parser import get_date_range, parse_date

TODAY = date(2024, 5, 15)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_day_first_slash_date():
    """Slash dates are read day first."""
    assert parse_date("03/04/2024") == date(2024, 4, 3)


def test_parse_iso_slash_date_stays_year_first():
    assert parse_date("2024/04/03") == date(2024, 4, 3)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    assert parse_date("Yesterday ") == date.today() - timedelta(days=1)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("this month", date(2024, 5, 1)),
        ("last month", date(2024, 4, 1)),
        ("this year", date(2024, 1, 1)),
        ("last year", date(2023, 1, 1)),
    ],
)
def test_parse_relative_periods(text, expected):
    assert parse_date(text, today=TODAY) == expected


def test_parse_invalid_date():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


@pytest.mark.parametrize(
    "period, expected",
    [
        ("this-month", (date(2024, 5, 1), TODAY)),
        ("this-year", (date(2024, 1, 1), TODAY)),
        ("this-quarter", (date(2024, 4, 1), TODAY)),
        ("last-month", (date(2024, 4, 1), date(2024, 4, 30))),
        ("last-year", (date(2023, 1, 1), date(2023, 12, 31))),
        ("last-quarter", (date(2024, 1, 1), date(2024, 3, 31))),
    ],
)
def test_get_date_range(period, expected):
    assert get_date_range(period, today=TODAY) == expected


def test_last_month_in_january():
    assert get_date_range("last-month", today=date(2024, 1, 20)) == (
        date(2023, 12, 1),
        date(2023, 12, 31),
    )


def test_last_quarter_in_first_quarter():
    assert get_date_range("last-quarter", today=date(2024, 2, 10)) == (
        date(2023, 10, 1),
        date(2023, 12, 31),
    )


def test_get_date_range_unknown_period():
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")
