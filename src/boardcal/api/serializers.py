from __future__ import annotations

from typing import Any, Dict

from ..core import DayItems, Failure, MutationOutcome
from ..domain import CalendarItem
from ..services import MonthViewResult, MutationResult
from .models import (
    AdvisoryPayload,
    CalendarItemPayload,
    DayItemsPayload,
    FailurePayload,
    MonthViewPayload,
    WeekLayoutPayload,
)


def serialize_item(item: CalendarItem) -> Dict[str, Any]:
    return CalendarItemPayload.from_domain(item).model_dump()


def serialize_day(resolved: DayItems) -> Dict[str, Any]:
    return DayItemsPayload.from_domain(resolved).model_dump()


def serialize_month_view(result: MonthViewResult) -> Dict[str, Any]:
    view = result.view
    payload = MonthViewPayload(
        month=str(view.month),
        generation=result.generation,
        weeks=[WeekLayoutPayload.from_domain(week) for week in view.weeks],
        out_of_month_days=[cell.day.isoformat() for cell in view.grid.cells if not cell.in_month],
        advisories=[AdvisoryPayload(source=note.source, message=note.message) for note in result.advisories],
    )
    return payload.model_dump()


def serialize_outcome(outcome: MutationOutcome) -> Dict[str, Any]:
    if isinstance(outcome, Failure):
        return {"ok": False, "failure": FailurePayload.from_domain(outcome).model_dump()}
    return {"ok": True, "item": serialize_item(outcome)}


def serialize_mutation(result: MutationResult) -> Dict[str, Any]:
    payload = serialize_outcome(result.outcome)
    if result.refreshed is not None:
        payload["view"] = serialize_month_view(result.refreshed)
    return payload
