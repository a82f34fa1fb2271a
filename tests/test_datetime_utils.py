from datetime import date, datetime, time, timedelta, timezone

from hospital_admin.utils.datetime_utils import as_utc, calculate_age, combine_date_and_time, day_bounds


def test_age_increments_on_birthday():
    dob = date(2000, 6, 15)
    assert calculate_age(dob, date(2024, 6, 14)) == 23
    assert calculate_age(dob, date(2024, 6, 15)) == 24


def test_age_of_newborn_is_zero():
    assert calculate_age(date(2024, 1, 10), date(2024, 12, 31)) == 0


def test_leap_day_birthday_counts_from_march_first():
    dob = date(2004, 2, 29)
    assert calculate_age(dob, date(2023, 2, 28)) == 18
    assert calculate_age(dob, date(2023, 3, 1)) == 19
    assert calculate_age(dob, date(2024, 2, 29)) == 20


def test_combine_naive_time_is_utc():
    combined = combine_date_and_time(date(2024, 5, 1), time(9, 30))
    assert combined == datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def test_combine_respects_time_offset():
    nairobi = timezone(timedelta(hours=3))
    combined = combine_date_and_time(date(2024, 5, 1), time(9, 30, tzinfo=nairobi))
    assert combined == datetime(2024, 5, 1, 6, 30, tzinfo=timezone.utc)
    assert combined.tzinfo == timezone.utc


def test_day_bounds_cover_one_day():
    start, end = day_bounds(date(2024, 12, 31))
    assert start == datetime(2024, 12, 31, tzinfo=timezone.utc)
    assert end == datetime(2025, 1, 1, tzinfo=timezone.utc)


def test_as_utc_treats_naive_as_utc():
    assert as_utc(datetime(2024, 1, 1, 12, 0)).tzinfo == timezone.utc
