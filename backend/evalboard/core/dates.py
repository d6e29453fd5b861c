from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, timezone
from typing import Any


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value: Any) -> datetime | None:
    """Parse a stored timestamp; anything unreadable becomes None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return ensure_utc(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def to_iso(value: datetime | None) -> str | None:
    return ensure_utc(value).isoformat() if value else None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def one_month_before(moment: datetime) -> datetime:
    year = moment.year
    month = moment.month - 1
    if month == 0:
        year -= 1
        month = 12
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def week_boundary(now: datetime) -> datetime:
    return now - timedelta(days=7)


def month_boundary(now: datetime) -> datetime:
    return one_month_before(now)


def day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def day_end(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=timezone.utc)
