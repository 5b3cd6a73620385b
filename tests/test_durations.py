from datetime import date, datetime, timezone
from fractions import Fraction

from juris_calc.core.durations import add_days, days_between, round_days, to_days, to_local_date


def test_to_days_uses_legal_year_and_month():
    assert to_days(6, 0, 0) == 2190
    assert to_days(1, 1, 1) == 396
    assert to_days(0, 12, 0) == 360


def test_to_days_does_not_guard_negative_input():
    assert to_days(1, -1, 0) == 335


def test_add_days_crosses_leap_day():
    assert add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)
    assert add_days("2024-02-28", 2) == date(2024, 3, 1)
    assert add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)


def test_add_days_is_calendar_stable_across_zones():
    start = date(2023, 10, 14)
    assert add_days(start, 30, tz="America/Sao_Paulo") == add_days(start, 30) == date(2023, 11, 13)


def test_to_local_date_converts_aware_datetimes_into_zone():
    utc_early_morning = datetime(2024, 1, 1, 2, 0, tzinfo=timezone.utc)
    assert to_local_date(utc_early_morning) == date(2023, 12, 31)
    assert to_local_date(utc_early_morning, tz="UTC") == date(2024, 1, 1)
    assert to_local_date("2024-01-01T02:00:00Z") == date(2023, 12, 31)


def test_to_local_date_keeps_plain_dates():
    assert to_local_date(date(2024, 5, 1)) == date(2024, 5, 1)
    assert to_local_date(datetime(2024, 5, 1, 23, 59)) == date(2024, 5, 1)


def test_round_days_is_half_up():
    assert round_days(Fraction(365, 6)) == 61
    assert round_days(Fraction(1095, 2)) == 548
    assert round_days(Fraction(121, 1)) == 121


def test_days_between():
    assert days_between(date(2024, 1, 1), date(2024, 12, 31)) == 365
