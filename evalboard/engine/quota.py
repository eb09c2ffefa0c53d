"""Daily quota tracking on UTC day boundaries."""

from datetime import datetime, timedelta, timezone
from typing import Protocol


class RecordCounter(Protocol):
    async def count_records(self, user_id: str, start: datetime, end: datetime) -> int: ...


def as_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def day_window(as_of: datetime) -> tuple[datetime, datetime]:
    """Half-open [midnight, midnight + 24h) in UTC containing as_of."""
    start = as_utc(as_of).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


async def count_today(store: RecordCounter, user_id: str, as_of: datetime) -> int:
    """Number of the user's records created during the UTC day of as_of."""
    start, end = day_window(as_of)
    return await store.count_records(user_id, start, end)


def quota_exhausted(count: int, max_per_day: int) -> bool:
    """The max_per_day-th record is the last one allowed."""
    return count >= max_per_day
