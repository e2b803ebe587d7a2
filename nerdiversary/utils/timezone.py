from datetime import datetime, timezone as dt_timezone
from typing import Optional

# Birth datetimes are stored and compared as UTC wall time with minute precision.
BIRTH_DATETIME_FORMAT = "%Y-%m-%dT%H:%M"



def utc_now() -> datetime:
    return datetime.now(dt_timezone.utc)


def to_utc_aware(dt: datetime | None) -> datetime | None:
    """
    Normalize any datetime to UTC-aware (tzinfo=UTC).
    - Aware datetimes are converted to UTC
    - Naive datetimes are assumed UTC and tz attached
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc)


def truncate_to_minute(dt: datetime) -> datetime:
    """Drop seconds and sub-second precision, returning a UTC-aware datetime."""
    return to_utc_aware(dt).replace(second=0, microsecond=0)


def format_birth_datetime(dt: datetime) -> str:
    """Render the minute-precision key used by family_members.birth_datetime."""
    return truncate_to_minute(dt).strftime(BIRTH_DATETIME_FORMAT)


def parse_birth_datetime(value: str) -> datetime:
    """Parse a stored "YYYY-MM-DDTHH:MM" value as a UTC instant."""
    return datetime.strptime(value, BIRTH_DATETIME_FORMAT).replace(tzinfo=dt_timezone.utc)


def combine_birth_date_time(date_str: str, time_str: Optional[str] = None) -> datetime:
    """Build a birth instant from separate "YYYY-MM-DD" and optional "HH:MM" parts."""
    return parse_birth_datetime(f"{date_str}T{time_str or '00:00'}")


def time_of_day_key(dt: datetime) -> str:
    """HH:MM of a UTC instant, matching the tail of a stored birth datetime."""
    return to_utc_aware(dt).strftime("%H:%M")
