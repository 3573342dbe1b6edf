"""Calendar-aware date arithmetic."""

import calendar
from datetime import datetime, timedelta, timezone
from typing import Union

from content_directives.core.entities import TimeUnit

_FIXED_UNITS = {
    TimeUnit.SECOND: timedelta(seconds=1),
    TimeUnit.MINUTE: timedelta(minutes=1),
    TimeUnit.HOUR: timedelta(hours=1),
    TimeUnit.DAY: timedelta(days=1),
    TimeUnit.WEEK: timedelta(weeks=1),
}

# Plural keyword names accepted by date_pivot, e.g. date_pivot(now, days=-3)
_PIVOT_KEYS = {f"{unit.value}s": unit for unit in TimeUnit}


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _add_months(base: datetime, months: int) -> datetime:
    month_index = base.month - 1 + months
    year = base.year + month_index // 12
    month = month_index % 12 + 1
    day = min(base.day, calendar.monthrange(year, month)[1])
    return base.replace(year=year, month=month, day=day)


def add_units(base: datetime, unit: Union[TimeUnit, str], amount: int) -> datetime:
    """Add ``amount`` (possibly negative) calendar ``unit`` to ``base``.

    Months and years clamp the day of month to the end of the target month,
    so Jan 31 + 1 month is the last day of February.

    Raises:
        ValueError: if ``unit`` is not a known time unit
    """
    unit = TimeUnit(unit)
    base = as_utc(base)

    if unit is TimeUnit.MONTH:
        return _add_months(base, amount)
    if unit is TimeUnit.YEAR:
        return _add_months(base, amount * 12)
    return base + _FIXED_UNITS[unit] * amount


def date_pivot(base: datetime, **amounts: int) -> datetime:
    """Apply several unit offsets at once, largest unit first.

    Example:
        date_pivot(now, days=-3)
    """
    result = as_utc(base)
    units = []
    for key, amount in amounts.items():
        if key not in _PIVOT_KEYS:
            raise ValueError(f"Unknown time unit: {key}")
        units.append((_PIVOT_KEYS[key], amount))

    order = list(TimeUnit)
    for unit, amount in sorted(units, key=lambda pair: order.index(pair[0]), reverse=True):
        result = add_units(result, unit, amount)
    return result
