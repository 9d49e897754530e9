"""Calendar arithmetic and period-range helpers shared by the calculators."""

import calendar
from datetime import datetime, time, timedelta
from typing import Callable, Iterable, TypeVar

from microfinance.exceptions import ConfigurationError
from microfinance.models.base import PeriodRange
from microfinance.models.financial import RepaymentCadence

T = TypeVar("T")

ONE_WEEK = timedelta(days=7)


def add_months(instant: datetime, months: int) -> datetime:
    """Shift ``instant`` by whole calendar months, clamping the day to the month end."""
    month_index = instant.month - 1 + months
    year = instant.year + month_index // 12
    month = month_index % 12 + 1
    day = min(instant.day, calendar.monthrange(year, month)[1])
    return instant.replace(year=year, month=month, day=day)


def whole_months_between(start: datetime, end: datetime) -> int:
    """Count calendar months from ``start`` to ``end``.

    A month counts once its day-of-month has recurred, so Jan 31 to
    Feb 28 is zero months. Negative when ``end`` precedes ``start``.
    """
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return months


def whole_weeks_between(start: datetime, end: datetime) -> int:
    """Count complete 7-day buckets from ``start`` to ``end``."""
    return (end - start) // ONE_WEEK


def advance(instant: datetime, cadence: RepaymentCadence, periods: int = 1) -> datetime:
    """Move ``instant`` forward by ``periods`` units of ``cadence``."""
    if cadence is RepaymentCadence.MONTHLY:
        return add_months(instant, periods)
    elif cadence is RepaymentCadence.WEEKLY:
        return instant + ONE_WEEK * periods
    raise ValueError(f"Unknown cadence {cadence!r}")


def in_range(
    records: Iterable[T],
    period_range: PeriodRange | None,
    instant_of: Callable[[T], datetime | None],
) -> list[T]:
    """Keep the records whose instant lies in ``period_range`` (all when None)."""
    if period_range is None:
        return list(records)
    return [r for r in records if period_range.contains(instant_of(r))]


def through(
    records: Iterable[T],
    cutoff: datetime,
    instant_of: Callable[[T], datetime | None],
    inclusive: bool = True,
) -> list[T]:
    """Keep the records dated on or before ``cutoff`` (strictly before when not inclusive).

    Records without an instant are never dated inside a window and are dropped.
    """
    result = []
    for record in records:
        instant = instant_of(record)
        if instant is None:
            continue
        if instant < cutoff or (inclusive and instant == cutoff):
            result.append(record)
    return result


def _end_of_day(instant: datetime) -> datetime:
    return datetime.combine(instant.date(), time.max, tzinfo=instant.tzinfo)


def _start_of_day(instant: datetime) -> datetime:
    return datetime.combine(instant.date(), time.min, tzinfo=instant.tzinfo)


def build_period_ranges(granularity: str, count: int, as_of: datetime) -> list[PeriodRange]:
    """Build the last ``count`` labelled ranges ending with the one holding ``as_of``.

    Ranges are contiguous and returned oldest first.

    Parameters
    ----------
    granularity : str
        ``"weekly"`` (7-day windows ending on ``as_of``'s day), ``"monthly"``
        (calendar months) or ``"yearly"`` (calendar years).
    count : int
        Number of ranges.
    as_of : datetime
        Reference instant.

    Returns
    -------
    list[PeriodRange]
        Labelled inclusive ranges.
    """
    ranges: list[PeriodRange] = []

    if granularity == "weekly":
        last_end = _end_of_day(as_of)
        for i in range(count):
            end = last_end - ONE_WEEK * i
            start = _start_of_day(end - timedelta(days=6))
            label = f"{start:%b} {start.day} - {end:%b} {end.day}"
            ranges.append(PeriodRange(start=start, end=end, label=label))
    elif granularity == "monthly":
        first_of_month = _start_of_day(as_of).replace(day=1)
        for i in range(count):
            start = add_months(first_of_month, -i)
            end = add_months(start, 1) - timedelta(microseconds=1)
            ranges.append(PeriodRange(start=start, end=end, label=f"{start:%b %Y}"))
    elif granularity == "yearly":
        first_of_year = _start_of_day(as_of).replace(month=1, day=1)
        for i in range(count):
            start = first_of_year.replace(year=first_of_year.year - i)
            end = start.replace(year=start.year + 1) - timedelta(microseconds=1)
            ranges.append(PeriodRange(start=start, end=end, label=str(start.year)))
    else:
        raise ConfigurationError(f"Unknown period granularity {granularity!r}")

    ranges.reverse()
    return ranges
