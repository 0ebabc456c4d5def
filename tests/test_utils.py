import pytest

from TutorDesk.core.utils import (
    calculate_hours, format_currency, format_period, hash_password, month_year_of, new_id,
    parse_period, round_half_up,
)


@pytest.mark.parametrize("start,end,expected", [
    ("15:00", "17:00", 2.0),
    ("09:15", "10:35", 1.33),
    ("10:00", "10:20", 0.33),
    ("18:00", "17:00", 0.0),
    ("12:00", "12:00", 0.0),
])
def test_calculate_hours(start, end, expected):
    assert calculate_hours(start, end) == expected


def test_round_half_up_rounds_halves_away_from_zero():
    assert round_half_up(2.675, 2) == 2.68
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(10, 2) == 10.0


def test_month_year_of_uses_english_month_name():
    assert month_year_of("2025-01-14") == ("January", "2025")
    assert month_year_of("2024-12-31") == ("December", "2024")


def test_period_helpers():
    assert format_period("March", "2025") == "March 2025"
    assert parse_period("March 2025") == ("March", "2025")
    assert parse_period("garbage") == ("", "")
    assert parse_period(None) == ("", "")


def test_new_id_has_prefix_and_is_unique():
    ids = {new_id("TCH") for _ in range(50)}
    assert len(ids) == 50
    assert all(i.startswith("TCH-") for i in ids)


def test_format_currency_with_explicit_prefix():
    assert format_currency(2500, "Rs.") == "Rs. 2,500.00"
    assert format_currency(1234567.891, "LKR") == "LKR 1,234,567.89"


def test_format_currency_reads_prefix_setting(db):
    assert format_currency(10) == "Rs. 10.00"


def test_hash_password_is_sha256_hex():
    assert hash_password("admin") == "8c6976e5b5410415bde908bd4dee15dfb167a9c873fc4bb8a81f6f2ab448a918"
