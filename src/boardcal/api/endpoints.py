from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional

from ..core import Failure, MonthKey, MutationRejected
from ..domain import UNSET, CalendarItem, ItemKind, ItemPatch, ItemStatus, parse_timestamp
from ..services import MutationResult
from .registry import register_api
from .serializers import serialize_day, serialize_month_view, serialize_mutation
from .state import api_state


def _parse_month(value: str) -> MonthKey:
    try:
        return MonthKey.parse(value)
    except ValueError as exc:  # noqa: TRY003
        raise ValueError(f"Invalid month: {value!r} (expected YYYY-MM)") from exc


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:  # noqa: TRY003
        raise ValueError(f"Invalid ISO date: {value}") from exc


def _parse_datetime(value: str) -> datetime:
    try:
        return parse_timestamp(value, api_state.calendar.tz)
    except ValueError as exc:  # noqa: TRY003
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc


def _parse_kind(value: str) -> ItemKind:
    try:
        return ItemKind(value.strip().upper())
    except ValueError as exc:  # noqa: TRY003
        raise ValueError("kind must be ENTRY or CONTAINER") from exc


async def _load(kind: str, item_id: str, viewer: str) -> CalendarItem:
    item = await api_state.calendar.load_item(_parse_kind(kind), item_id, viewer_id=viewer)
    if item is None:
        raise ValueError(f"{kind.upper()} '{item_id}' not found.")
    return item


def _rejected(exc: MutationRejected) -> Dict[str, Any]:
    return serialize_mutation(MutationResult(outcome=Failure.of(exc.code, exc.message)))


@register_api(
    "calendar_month_view",
    description="Build the week-by-week lane layout for a month (YYYY-MM).",
    category="calendar",
    tags=("calendar", "read"),
)
async def calendar_month_view(month: str, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    viewer = api_state.context.current_viewer_id(viewer_id)
    result = await api_state.calendar.build_month_view(_parse_month(month), viewer_id=viewer)
    return serialize_month_view(result)


@register_api(
    "calendar_day",
    description="List every item touching a day, including those hidden behind '+N more'.",
    category="calendar",
    tags=("calendar", "read", "day"),
)
async def calendar_day(day: str, month: Optional[str] = None, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    viewer = api_state.context.current_viewer_id(viewer_id)
    target = _parse_date(day)
    month_key = _parse_month(month) if month else MonthKey.containing(target)
    result = await api_state.calendar.build_month_view(month_key, viewer_id=viewer)
    resolved = api_state.calendar.resolve_date(result, target)
    return serialize_day(resolved)


@register_api(
    "calendar_shift_item",
    description="Move an item by whole days keeping its duration, then rebuild the month view.",
    category="calendar",
    tags=("calendar", "write"),
)
async def calendar_shift_item(
    kind: str,
    item_id: str,
    delta_days: int,
    month: Optional[str] = None,
    viewer_id: Optional[str] = None,
) -> Dict[str, Any]:
    viewer = api_state.context.current_viewer_id(viewer_id)
    try:
        item = await _load(kind, item_id, viewer)
    except MutationRejected as exc:
        return _rejected(exc)
    result = await api_state.calendar.shift_and_refresh(
        item,
        delta_days,
        viewer_id=viewer,
        month=_parse_month(month) if month else None,
    )
    return serialize_mutation(result)


@register_api(
    "calendar_edit_item",
    description="Edit an item's dates, all-day flag, status or title, then rebuild the month view.",
    category="calendar",
    tags=("calendar", "write"),
)
async def calendar_edit_item(
    kind: str,
    item_id: str,
    start_at: Optional[str] = None,
    end_at: Optional[str] = None,
    clear_end: bool = False,
    all_day: Optional[bool] = None,
    status: Optional[str] = None,
    title: Optional[str] = None,
    month: Optional[str] = None,
    viewer_id: Optional[str] = None,
) -> Dict[str, Any]:
    viewer = api_state.context.current_viewer_id(viewer_id)
    try:
        item = await _load(kind, item_id, viewer)
    except MutationRejected as exc:
        return _rejected(exc)
    if clear_end:
        end_value: Any = None
    elif end_at:
        end_value = _parse_datetime(end_at)
    else:
        end_value = UNSET
    patch = ItemPatch(
        start_at=_parse_datetime(start_at) if start_at else UNSET,
        end_at=end_value,
        all_day=all_day,
        status=ItemStatus.parse(status) if status else None,
        title=title,
    )
    result = await api_state.calendar.edit_and_refresh(
        item,
        patch,
        viewer_id=viewer,
        month=_parse_month(month) if month else None,
    )
    return serialize_mutation(result)
