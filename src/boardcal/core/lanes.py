from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from ..domain import CalendarItem
from .grid import DAYS_PER_WEEK, MonthGrid, WeekRow
from .spans import Span, days_between

DEFAULT_MAX_VISIBLE_BARS = 3
_LAST_COLUMN = DAYS_PER_WEEK - 1


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


@dataclass(frozen=True, slots=True)
class WeekSegment:
    """Part of a span that falls inside one week row."""

    span: Span
    col_start: int
    col_end: int
    is_span_start: bool
    is_span_end: bool

    @property
    def item(self) -> CalendarItem:
        return self.span.item

    @property
    def width(self) -> int:
        return self.col_end - self.col_start + 1

    def covers(self, column: int) -> bool:
        return self.col_start <= column <= self.col_end


@dataclass(frozen=True, slots=True)
class LaneAssignment:
    segment: WeekSegment
    lane: int

    @property
    def item(self) -> CalendarItem:
        return self.segment.span.item


@dataclass(frozen=True, slots=True)
class WeekLayout:
    week_start: date
    week_end: date
    row_index: int
    assignments: Tuple[LaneAssignment, ...]
    lane_count: int
    max_visible_bars: int = DEFAULT_MAX_VISIBLE_BARS

    @property
    def bars(self) -> Tuple[LaneAssignment, ...]:
        """Assignments drawn directly in the row."""

        return tuple(entry for entry in self.assignments if entry.lane < self.max_visible_bars)

    @property
    def overflow(self) -> Tuple[LaneAssignment, ...]:
        return tuple(entry for entry in self.assignments if entry.lane >= self.max_visible_bars)

    @property
    def visible_lane_count(self) -> int:
        return min(self.lane_count, self.max_visible_bars)

    def hidden_count(self, column: int) -> int:
        keys = {entry.item.key for entry in self.overflow if entry.segment.covers(column)}
        return len(keys)


def clip_span(span: Span, row: WeekRow) -> Optional[WeekSegment]:
    if not span.overlaps(row.week_start, row.week_end):
        return None
    col_start = _clamp(days_between(row.week_start, max(span.start_day, row.week_start)), 0, _LAST_COLUMN)
    col_end = _clamp(days_between(row.week_start, min(span.end_day, row.week_end)), 0, _LAST_COLUMN)
    return WeekSegment(
        span=span,
        col_start=col_start,
        col_end=col_end,
        is_span_start=span.start_day >= row.week_start,
        is_span_end=span.end_day <= row.week_end,
    )


def _segment_order(segment: WeekSegment) -> Tuple[int, str]:
    return (segment.col_start, segment.item.display_title)


def assign_lanes(segments: Iterable[WeekSegment]) -> List[LaneAssignment]:
    """Greedy first-fit lane assignment.

    Segments are placed in ``(col_start, display_title)`` order; each takes the
    lowest lane whose last occupied column is strictly left of its start.
    """

    lane_ends: list[int] = []
    placed: list[LaneAssignment] = []
    for segment in sorted(segments, key=_segment_order):
        for lane, last_column in enumerate(lane_ends):
            if last_column < segment.col_start:
                lane_ends[lane] = segment.col_end
                break
        else:
            lane = len(lane_ends)
            lane_ends.append(segment.col_end)
        placed.append(LaneAssignment(segment=segment, lane=lane))
    return placed


def pack_week(
    spans: Iterable[Span],
    row: WeekRow,
    max_visible_bars: int = DEFAULT_MAX_VISIBLE_BARS,
) -> WeekLayout:
    segments = [segment for segment in (clip_span(span, row) for span in spans) if segment is not None]
    assignments = assign_lanes(segments)
    lane_count = max((entry.lane for entry in assignments), default=-1) + 1
    return WeekLayout(
        week_start=row.week_start,
        week_end=row.week_end,
        row_index=row.index,
        assignments=tuple(assignments),
        lane_count=lane_count,
        max_visible_bars=max_visible_bars,
    )


def pack_month(
    spans: Sequence[Span],
    grid: MonthGrid,
    max_visible_bars: int = DEFAULT_MAX_VISIBLE_BARS,
) -> List[WeekLayout]:
    if max_visible_bars < 0:
        raise ValueError("max_visible_bars must not be negative")
    return [pack_week(spans, row, max_visible_bars) for row in grid.rows]


__all__ = [
    "DEFAULT_MAX_VISIBLE_BARS",
    "LaneAssignment",
    "WeekLayout",
    "WeekSegment",
    "assign_lanes",
    "clip_span",
    "pack_month",
    "pack_week",
]
