from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Tuple

from ..domain import CalendarItem
from .grid import DAYS_PER_WEEK
from .lanes import WeekLayout


@dataclass(frozen=True, slots=True)
class DayItems:
    """Everything touching one grid cell, for the "show all" list."""

    day: date
    items: Tuple[CalendarItem, ...]
    hidden_count: int


def resolve_day(week: WeekLayout, column: int) -> DayItems:
    if not 0 <= column < DAYS_PER_WEEK:
        raise ValueError(f"column must be between 0 and {DAYS_PER_WEEK - 1}, got {column}")

    touching: Dict[Tuple[str, str], CalendarItem] = {}
    hidden: set[Tuple[str, str]] = set()
    for entry in week.assignments:
        if not entry.segment.covers(column):
            continue
        key = entry.item.key
        touching.setdefault(key, entry.item)
        if entry.lane >= week.max_visible_bars:
            hidden.add(key)

    items = sorted(touching.values(), key=lambda item: (item.display_title, item.key))
    return DayItems(
        day=week.week_start + timedelta(days=column),
        items=tuple(items),
        hidden_count=len(hidden),
    )


__all__ = ["DayItems", "resolve_day"]
