from __future__ import annotations

from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Iterable, Optional, Tuple

from ..domain import CalendarItem
from .grid import MonthGrid, MonthKey, build_month_grid
from .lanes import DEFAULT_MAX_VISIBLE_BARS, WeekLayout, pack_month
from .overflow import DayItems, resolve_day
from .spans import span_for


@dataclass(frozen=True, slots=True)
class MonthView:
    month: MonthKey
    grid: MonthGrid
    items: Tuple[CalendarItem, ...]
    weeks: Tuple[WeekLayout, ...]

    def week_for(self, day: date) -> Tuple[WeekLayout, int]:
        row, column = self.grid.locate(day)
        return self.weeks[row.index], column

    def resolve(self, day: date) -> DayItems:
        week, column = self.week_for(day)
        return resolve_day(week, column)


def layout_month(
    items: Iterable[CalendarItem],
    month: MonthKey,
    *,
    max_visible_bars: int = DEFAULT_MAX_VISIBLE_BARS,
    week_start: int = 0,
    tz: Optional[tzinfo] = None,
) -> MonthView:
    """Normalize, grid and pack already aggregated items for one month."""

    laid_out = tuple(item for item in items if item.start_at is not None)
    spans = [span_for(item, tz) for item in laid_out]
    grid = build_month_grid(month, week_start)
    weeks = pack_month(spans, grid, max_visible_bars)
    return MonthView(month=month, grid=grid, items=laid_out, weeks=tuple(weeks))


__all__ = ["MonthView", "layout_month"]
