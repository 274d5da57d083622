from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Tuple

GRID_ROWS = 6
DAYS_PER_WEEK = 7
GRID_CELLS = GRID_ROWS * DAYS_PER_WEEK

_MONTH_PATTERN = re.compile(r"^\s*(\d{4})-(\d{1,2})\s*$")


@dataclass(frozen=True, slots=True, order=True)
class MonthKey:
    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be between 1 and 12, got {self.month}")

    @classmethod
    def parse(cls, value: str) -> "MonthKey":
        """Parse a ``YYYY-MM`` string."""

        match = _MONTH_PATTERN.match(value or "")
        if not match:
            raise ValueError("month must be formatted YYYY-MM")
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def containing(cls, day: date) -> "MonthKey":
        return cls(day.year, day.month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def next(self) -> "MonthKey":
        if self.month == 12:
            return MonthKey(self.year + 1, 1)
        return MonthKey(self.year, self.month + 1)

    def previous(self) -> "MonthKey":
        if self.month == 1:
            return MonthKey(self.year - 1, 12)
        return MonthKey(self.year, self.month - 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True, slots=True)
class MonthWindow:
    """Half-open local-day window ``[start, end)``."""

    start: date
    end: date

    @property
    def last_day(self) -> date:
        return self.end - timedelta(days=1)

    def contains(self, day: date) -> bool:
        return self.start <= day < self.end


@dataclass(frozen=True, slots=True)
class GridCell:
    day: date
    row: int
    column: int
    in_month: bool


@dataclass(frozen=True, slots=True)
class WeekRow:
    index: int
    week_start: date
    week_end: date

    def column_of(self, day: date) -> int:
        return (day - self.week_start).days

    def contains(self, day: date) -> bool:
        return self.week_start <= day <= self.week_end


@dataclass(frozen=True, slots=True)
class MonthGrid:
    month: MonthKey
    week_start: int
    cells: Tuple[GridCell, ...]
    rows: Tuple[WeekRow, ...]

    @property
    def first_day(self) -> date:
        return self.cells[0].day

    @property
    def last_day(self) -> date:
        return self.cells[-1].day

    def cells_for_row(self, index: int) -> List[GridCell]:
        offset = index * DAYS_PER_WEEK
        return list(self.cells[offset : offset + DAYS_PER_WEEK])

    def locate(self, day: date) -> Tuple[WeekRow, int]:
        """Return the row and column that display ``day``."""

        if not self.first_day <= day <= self.last_day:
            raise ValueError(f"{day.isoformat()} is not displayed in {self.month}")
        offset = (day - self.first_day).days
        return self.rows[offset // DAYS_PER_WEEK], offset % DAYS_PER_WEEK


def sunday_based_weekday(day: date) -> int:
    """0 = Sunday … 6 = Saturday."""

    return day.isoweekday() % 7


def month_window(month: MonthKey) -> MonthWindow:
    return MonthWindow(start=month.first_day, end=month.next().first_day)


def build_month_grid(month: MonthKey, week_start: int = 0) -> MonthGrid:
    """Lay out the fixed 6x7 window that displays ``month``.

    ``week_start`` is the weekday of the first column (0 = Sunday). Leading and
    trailing days of the neighbouring months are kept and flagged ``in_month=False``.
    """

    if not 0 <= week_start <= 6:
        raise ValueError(f"week_start must be between 0 and 6, got {week_start}")
    month_start = month.first_day
    lead = (sunday_based_weekday(month_start) - week_start) % DAYS_PER_WEEK
    origin = month_start - timedelta(days=lead)

    cells: list[GridCell] = []
    for index in range(GRID_CELLS):
        day = origin + timedelta(days=index)
        cells.append(
            GridCell(
                day=day,
                row=index // DAYS_PER_WEEK,
                column=index % DAYS_PER_WEEK,
                in_month=day.year == month.year and day.month == month.month,
            )
        )

    rows = tuple(
        WeekRow(
            index=row,
            week_start=origin + timedelta(days=row * DAYS_PER_WEEK),
            week_end=origin + timedelta(days=row * DAYS_PER_WEEK + DAYS_PER_WEEK - 1),
        )
        for row in range(GRID_ROWS)
    )
    return MonthGrid(month=month, week_start=week_start, cells=tuple(cells), rows=rows)


__all__ = [
    "DAYS_PER_WEEK",
    "GRID_CELLS",
    "GRID_ROWS",
    "GridCell",
    "MonthGrid",
    "MonthKey",
    "MonthWindow",
    "WeekRow",
    "build_month_grid",
    "month_window",
    "sunday_based_weekday",
]
