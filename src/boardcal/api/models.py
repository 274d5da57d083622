from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core import DayItems, Failure, LaneAssignment, WeekLayout
from ..domain import CalendarItem


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class CalendarItemPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: str
    id: str
    container_id: str
    owner_id: str
    title: str
    display_title: str
    status: str
    is_confidential: bool = Field(default=False)
    start_at: Optional[str] = Field(default=None)
    end_at: Optional[str] = Field(default=None)
    all_day: bool = Field(default=False)
    can_edit: bool = Field(default=False)

    @classmethod
    def from_domain(cls, item: CalendarItem) -> "CalendarItemPayload":
        return cls(
            kind=item.kind.value,
            id=item.id,
            container_id=item.container_id,
            owner_id=item.owner_id,
            title=item.title,
            display_title=item.display_title,
            status=item.status.value,
            is_confidential=item.is_confidential,
            start_at=_iso(item.start_at),
            end_at=_iso(item.end_at),
            all_day=item.all_day,
            can_edit=item.can_edit,
        )


class LaneAssignmentPayload(BaseModel):
    item: CalendarItemPayload
    lane: int
    col_start: int
    col_end: int
    is_span_start: bool
    is_span_end: bool

    @classmethod
    def from_domain(cls, assignment: LaneAssignment) -> "LaneAssignmentPayload":
        segment = assignment.segment
        return cls(
            item=CalendarItemPayload.from_domain(assignment.item),
            lane=assignment.lane,
            col_start=segment.col_start,
            col_end=segment.col_end,
            is_span_start=segment.is_span_start,
            is_span_end=segment.is_span_end,
        )


class WeekLayoutPayload(BaseModel):
    week_start: str
    week_end: str
    bars: List[LaneAssignmentPayload] = Field(default_factory=list)
    lane_count: int = 0
    hidden_counts: List[int] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, week: WeekLayout) -> "WeekLayoutPayload":
        return cls(
            week_start=week.week_start.isoformat(),
            week_end=week.week_end.isoformat(),
            bars=[LaneAssignmentPayload.from_domain(bar) for bar in week.bars],
            lane_count=week.lane_count,
            hidden_counts=[week.hidden_count(column) for column in range(7)],
        )


class AdvisoryPayload(BaseModel):
    source: str
    message: str


class MonthViewPayload(BaseModel):
    month: str
    generation: int
    weeks: List[WeekLayoutPayload] = Field(default_factory=list)
    out_of_month_days: List[str] = Field(default_factory=list)
    advisories: List[AdvisoryPayload] = Field(default_factory=list)


class DayItemsPayload(BaseModel):
    day: str
    items: List[CalendarItemPayload] = Field(default_factory=list)
    hidden_count: int = 0

    @classmethod
    def from_domain(cls, resolved: DayItems) -> "DayItemsPayload":
        return cls(
            day=resolved.day.isoformat(),
            items=[CalendarItemPayload.from_domain(item) for item in resolved.items],
            hidden_count=resolved.hidden_count,
        )


class FailurePayload(BaseModel):
    code: str
    message: str

    @classmethod
    def from_domain(cls, failure: Failure) -> "FailurePayload":
        return cls(code=failure.code.value, message=failure.message)
