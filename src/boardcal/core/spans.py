from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional, Tuple

from ..domain import CalendarItem


@dataclass(frozen=True, slots=True)
class Span:
    """Inclusive local-day range covered by one item."""

    item: CalendarItem
    start_day: date
    end_day: date

    @property
    def length_days(self) -> int:
        return days_between(self.start_day, self.end_day) + 1

    def overlaps(self, first: date, last: date) -> bool:
        return self.start_day <= last and self.end_day >= first


def days_between(start: date, end: date) -> int:
    return (end - start).days


def _local(value: datetime, tz: Optional[tzinfo]) -> datetime:
    if tz is not None and value.tzinfo is not None:
        return value.astimezone(tz)
    return value


def normalize_span(
    start_at: datetime,
    end_at: Optional[datetime],
    all_day: bool,
    tz: Optional[tzinfo] = None,
) -> Tuple[date, date]:
    """Reduce a stored ``(start, end, all_day)`` triple to inclusive local days.

    All-day ranges are stored with an exclusive end (midnight after the last
    day), so an all-day end that falls exactly on midnight is pulled back one day.
    """

    start_day = _local(start_at, tz).date()
    if end_at is None:
        return start_day, start_day

    local_end = _local(end_at, tz)
    if all_day and local_end.time() == time(0, 0):
        end_day = local_end.date() - timedelta(days=1)
    else:
        end_day = local_end.date()

    if end_day < start_day:
        end_day = start_day
    return start_day, end_day


def span_for(item: CalendarItem, tz: Optional[tzinfo] = None) -> Span:
    if item.start_at is None:
        raise ValueError(f"{item.kind.value} {item.id} has no start and cannot be laid out.")
    start_day, end_day = normalize_span(item.start_at, item.end_at, item.all_day, tz)
    return Span(item=item, start_day=start_day, end_day=end_day)


__all__ = ["Span", "days_between", "normalize_span", "span_for"]
