from datetime import date, datetime, time, timezone
from typing import Tuple


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_timestamp(value: str) -> Tuple[datetime, bool]:
    """
    Parse an ISO 8601 date or datetime string.

    Returns the naive UTC datetime and whether the input named a whole day
    (no time part). Raises ValueError on anything else.
    """
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.combine(date.fromisoformat(value), time.min), True
    except ValueError:
        pass
    return to_naive_utc(datetime.fromisoformat(value)), False
