"""
Common date/time helpers used across services.

Storage: timestamps are stored in UTC.
Naive datetimes coming from forms are treated as UTC.
"""

from datetime import date, datetime, time, timedelta, timezone


def as_utc(dt: datetime) -> datetime:
    """
    Convert dt to tz-aware UTC.
    If dt is naive, we treat it as UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> date:
    return utc_now().date()


def combine_date_and_time(day: date, at: time) -> datetime:
    """
    Join a separately entered date and time into one UTC timestamp.

    A time carrying its own tzinfo is honoured; otherwise UTC is assumed.
    """
    return as_utc(datetime.combine(day, at))


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """[start, end) of a calendar day in UTC."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def calculate_age(date_of_birth: date, today: date | None = None) -> int:
    """
    Age in whole years on `today`.

    Compares (month, day) so the age only increments on the birthday itself.
    A 29 February birthday counts from 1 March in non-leap years.
    """
    today = today or utc_today()
    before_birthday = (today.month, today.day) < (date_of_birth.month, date_of_birth.day)
    return today.year - date_of_birth.year - int(before_birthday)
