from datetime import UTC, date, datetime

from creche_api.app.core.time import age_in_months, ensure_utc, utc_now


def test_utc_now_is_timezone_aware_utc():
    value = utc_now()
    assert value.tzinfo is UTC


def test_age_counts_whole_months():
    assert age_in_months(date(2022, 10, 19), today=date(2024, 10, 19)) == 24


def test_age_drops_a_month_before_day_of_birth_is_reached():
    assert age_in_months(date(2022, 10, 20), today=date(2024, 10, 19)) == 23


def test_age_across_year_boundary():
    assert age_in_months(date(2023, 11, 5), today=date(2024, 2, 5)) == 3
    assert age_in_months(date(2023, 11, 5), today=date(2024, 2, 4)) == 2


def test_age_never_negative():
    assert age_in_months(date(2030, 1, 1), today=date(2024, 1, 1)) == 0
    assert age_in_months(None) == 0


def test_ensure_utc_attaches_timezone_to_naive_values():
    naive = datetime(2024, 5, 1, 12, 0)
    assert ensure_utc(naive).tzinfo is UTC
    assert ensure_utc(None) is None
