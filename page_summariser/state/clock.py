"""Testable clock and the single UTC day-boundary rule."""
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def current_utc_day_stamp(now: datetime | None = None) -> str:
    """UTC calendar day as YYYY-MM-DD. Naive datetimes are taken to be UTC."""
    now = now or utc_now()
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date().isoformat()
