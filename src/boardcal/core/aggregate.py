from __future__ import annotations

import logging
from dataclasses import replace
from datetime import tzinfo
from typing import Any, Iterable, List, Mapping, Optional

from ..domain import (
    CalendarItem,
    ItemKind,
    ItemStatus,
    OwnerProfile,
    compose_display_title,
    parse_optional_timestamp,
)
from ..domain.models import UNKNOWN_OWNER_LABEL
from .grid import MonthWindow
from .spans import normalize_span

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]


def _owner_label(owner_id: str, profiles: Optional[Mapping[str, OwnerProfile]]) -> str:
    profile = (profiles or {}).get(owner_id)
    return profile.label if profile else UNKNOWN_OWNER_LABEL


def _require(row: Row, field: str) -> str:
    value = row.get(field)
    if value is None or value == "":
        raise ValueError(f"missing {field}")
    return str(value)


def entry_item(
    row: Row,
    *,
    viewer_id: str,
    profiles: Optional[Mapping[str, OwnerProfile]] = None,
    tz: Optional[tzinfo] = None,
) -> CalendarItem:
    """Build an ``ENTRY`` item; raises ``ValueError`` for unparseable rows."""

    owner_id = _require(row, "owner_id")
    title = str(row.get("title") or "")
    container_name = str(row.get("container_name") or "")
    owner_label = _owner_label(owner_id, profiles)
    return CalendarItem(
        kind=ItemKind.ENTRY,
        id=_require(row, "id"),
        container_id=_require(row, "container_id"),
        owner_id=owner_id,
        title=title,
        display_title=compose_display_title(
            ItemKind.ENTRY,
            title=title,
            container_name=container_name,
            owner_label=owner_label,
            foreign=owner_id != viewer_id,
        ),
        status=ItemStatus.parse(row.get("status")),
        is_confidential=bool(row.get("is_confidential")),
        start_at=parse_optional_timestamp(row.get("start_at"), tz),
        end_at=parse_optional_timestamp(row.get("end_at"), tz),
        all_day=bool(row.get("all_day")),
        can_edit=owner_id == viewer_id,
        container_name=container_name,
        owner_label=owner_label,
    )


def container_item(
    row: Row,
    *,
    viewer_id: str,
    profiles: Optional[Mapping[str, OwnerProfile]] = None,
    tz: Optional[tzinfo] = None,
) -> CalendarItem:
    """Build a ``CONTAINER`` item from a single-schedule group row."""

    owner_id = _require(row, "owner_id")
    identifier = _require(row, "id")
    name = str(row.get("name") or "")
    owner_label = _owner_label(owner_id, profiles)
    return CalendarItem(
        kind=ItemKind.CONTAINER,
        id=identifier,
        container_id=identifier,
        owner_id=owner_id,
        title=name,
        display_title=compose_display_title(
            ItemKind.CONTAINER,
            title=name,
            container_name=name,
            owner_label=owner_label,
            foreign=owner_id != viewer_id,
        ),
        status=ItemStatus.parse(row.get("status")),
        is_confidential=bool(row.get("is_confidential")),
        start_at=parse_optional_timestamp(row.get("start_at"), tz),
        end_at=parse_optional_timestamp(row.get("end_at"), tz),
        all_day=bool(row.get("all_day")),
        can_edit=owner_id == viewer_id,
        container_name=name,
        owner_label=owner_label,
    )


_BUILDERS = {
    ItemKind.ENTRY: entry_item,
    ItemKind.CONTAINER: container_item,
}


def item_from_row(
    kind: ItemKind,
    row: Row,
    *,
    viewer_id: str,
    profiles: Optional[Mapping[str, OwnerProfile]] = None,
    tz: Optional[tzinfo] = None,
) -> CalendarItem:
    return _BUILDERS[kind](row, viewer_id=viewer_id, profiles=profiles, tz=tz)


def apply_row(item: CalendarItem, row: Row, *, tz: Optional[tzinfo] = None) -> CalendarItem:
    """Fold a freshly written row back into ``item`` keeping its ownership context."""

    if item.kind is ItemKind.CONTAINER:
        title = str(row.get("name", item.title) or "")
        container_name = title
    else:
        title = str(row.get("title", item.title) or "")
        container_name = item.container_name
    return replace(
        item,
        title=title,
        container_name=container_name,
        display_title=compose_display_title(
            item.kind,
            title=title,
            container_name=container_name,
            owner_label=item.owner_label,
            foreign=not item.can_edit,
        ),
        status=ItemStatus.parse(row.get("status"), item.status),
        start_at=parse_optional_timestamp(row["start_at"], tz) if "start_at" in row else item.start_at,
        end_at=parse_optional_timestamp(row["end_at"], tz) if "end_at" in row else item.end_at,
        all_day=bool(row["all_day"]) if "all_day" in row else item.all_day,
    )


def _collect(
    kind: ItemKind,
    rows: Iterable[Row],
    *,
    viewer_id: str,
    window: MonthWindow,
    profiles: Optional[Mapping[str, OwnerProfile]],
    tz: Optional[tzinfo],
) -> List[CalendarItem]:
    collected: list[CalendarItem] = []
    for row in rows:
        try:
            item = item_from_row(kind, row, viewer_id=viewer_id, profiles=profiles, tz=tz)
        except (KeyError, TypeError, ValueError) as exc:
            logger.debug("Dropping %s row %r: %s", kind.value, row.get("id"), exc)
            continue
        if item.start_at is None:
            continue
        start_day, end_day = normalize_span(item.start_at, item.end_at, item.all_day, tz)
        if start_day < window.end and end_day >= window.start:
            collected.append(item)
    return collected


def sort_items(items: Iterable[CalendarItem]) -> List[CalendarItem]:
    return sorted(items, key=lambda item: (item.start_at, item.display_title, item.key))


def aggregate_items(
    entry_rows: Iterable[Row],
    container_rows: Iterable[Row],
    *,
    viewer_id: str,
    window: MonthWindow,
    profiles: Optional[Mapping[str, OwnerProfile]] = None,
    tz: Optional[tzinfo] = None,
) -> List[CalendarItem]:
    """Merge entry and container rows into ordered canonical items.

    Only items whose day span overlaps ``window`` are kept. Ordering is by
    ``start_at``, then ``display_title``; the lane packer depends on it.
    """

    options = dict(viewer_id=viewer_id, window=window, profiles=profiles, tz=tz)
    items = _collect(ItemKind.ENTRY, entry_rows, **options)
    items.extend(_collect(ItemKind.CONTAINER, container_rows, **options))
    return sort_items(items)


__all__ = [
    "aggregate_items",
    "apply_row",
    "container_item",
    "entry_item",
    "item_from_row",
    "sort_items",
]
