"""Evaluation period normalization.

Periods are stored either as a ``"YYYY-MM"`` token or as a ``{year, month}``
structure. Everything downstream compares the canonical ``"YYYY-MM"`` key.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

NO_PERIOD = "-"

_TOKEN_RE = re.compile(r"^\s*(\d{4})-(\d{1,2})\s*$")

MONTH_NAMES: dict[str, tuple[str, ...]] = {
    "en": (
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    ),
    "ar": (
        "يناير",
        "فبراير",
        "مارس",
        "أبريل",
        "مايو",
        "يونيو",
        "يوليو",
        "أغسطس",
        "سبتمبر",
        "أكتوبر",
        "نوفمبر",
        "ديسمبر",
    ),
}


def _year_month(value: Any) -> tuple[Any, Any]:
    if isinstance(value, Mapping):
        return value.get("year"), value.get("month")
    return getattr(value, "year", None), getattr(value, "month", None)


def canonical_period(value: Any) -> str:
    """Canonical ``"YYYY-MM"`` key; ``""`` unless year is non-zero and month is 1..12."""
    if not value:
        return ""

    if isinstance(value, str):
        match = _TOKEN_RE.match(value)
        if not match:
            return ""
        year, month = match.group(1), match.group(2)
    else:
        year, month = _year_month(value)

    try:
        year_num = int(year)
        month_num = int(month)
    except (TypeError, ValueError):
        return ""
    if not year_num or not 1 <= month_num <= 12:
        return ""
    return f"{year_num:04d}-{month_num:02d}"


def period_label(key: str | None, locale: str = "en") -> str:
    if not key:
        return NO_PERIOD

    year, _, month = key.partition("-")
    if not year or not month:
        return NO_PERIOD

    try:
        month_num = int(month)
    except ValueError:
        return NO_PERIOD
    if month_num < 1 or month_num > 12:
        return NO_PERIOD

    names = MONTH_NAMES.get(locale, MONTH_NAMES["en"])
    return f"{names[month_num - 1]} {year}"


def current_period(now: datetime) -> str:
    return f"{now.year}-{now.month:02d}"


def available_periods(period_keys: Iterable[str]) -> list[str]:
    """Distinct non-empty period keys, newest first."""
    return sorted({key for key in period_keys if key}, reverse=True)
