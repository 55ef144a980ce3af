"""
Helper utilities
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

DAY = timedelta(days=1)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def truncate_to_day(moment: datetime) -> datetime:
    """Drop the time of day, keeping the timezone (naive values are taken as UTC)"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    else:
        moment = moment.astimezone(timezone.utc)
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def previous_day_window(sync_date: datetime) -> tuple[datetime, datetime]:
    """Half-open window [sync_date - 1 day, sync_date)"""
    return sync_date - DAY, sync_date


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse the ISO-ish timestamps returned by provider APIs"""
    if not value:
        return None
    if isinstance(value, datetime):
        return value

    formats = [
        "%Y-%m-%dT%H:%M:%S%z",
        "%Y-%m-%dT%H:%M:%S.%f%z",
        "%Y%m%dT%H%M%S%z",
        "%Y-%m-%dT%H:%M:%S",
    ]
    for fmt in formats:
        try:
            return datetime.strptime(str(value), fmt)
        except ValueError:
            continue
    return None
