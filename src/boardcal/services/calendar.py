from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, tzinfo
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..core import (
    DayItems,
    Failure,
    FailureCode,
    MonthKey,
    MonthView,
    MonthWindow,
    MutationOutcome,
    MutationRejected,
    WeekLayout,
    aggregate_items,
    edit_item,
    item_from_row,
    layout_month,
    month_window,
    resolve_day,
    shift_item,
)
from ..domain import CalendarItem, ItemKind, ItemPatch, OwnerProfile, ShareScope
from .context import ServiceContext
from .visibility import Advisory, VisibilityService

logger = logging.getLogger(__name__)

MonthLike = Union[MonthKey, str]


@dataclass(frozen=True, slots=True)
class MonthViewResult:
    view: MonthView
    viewer_id: str
    visible_owner_ids: Tuple[str, ...]
    advisories: Tuple[Advisory, ...]
    generation: int

    @property
    def degraded(self) -> bool:
        return bool(self.advisories)


@dataclass(frozen=True, slots=True)
class MutationResult:
    outcome: MutationOutcome
    refreshed: Optional[MonthViewResult] = None

    @property
    def ok(self) -> bool:
        return not isinstance(self.outcome, Failure)


def _as_month(month: MonthLike) -> MonthKey:
    return month if isinstance(month, MonthKey) else MonthKey.parse(month)


def _window_bounds(window: MonthWindow, tz: tzinfo) -> Tuple[datetime, datetime]:
    return (
        datetime.combine(window.start, time.min, tzinfo=tz),
        datetime.combine(window.end, time.min, tzinfo=tz),
    )


def _dedupe(ids: Iterable[str]) -> List[str]:
    seen: dict[str, None] = {}
    for identifier in ids:
        if identifier:
            seen.setdefault(str(identifier), None)
    return list(seen)


@dataclass(slots=True)
class CalendarService:
    """Fetches raw schedule records and rebuilds month views from scratch."""

    context: ServiceContext
    visibility: VisibilityService = field(init=False)
    _generation: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.visibility = VisibilityService(self.context)

    @property
    def tz(self) -> tzinfo:
        return self.context.settings.calendar.tzinfo

    @property
    def max_visible_bars(self) -> int:
        return self.context.settings.calendar.max_visible_bars

    def is_current(self, result: MonthViewResult) -> bool:
        """False once a newer view build has started."""

        return result.generation == self._generation

    async def _fetch_rows(
        self,
        kind: ItemKind,
        owner_ids: Sequence[str],
        start: datetime,
        end: datetime,
    ) -> Tuple[List[Dict[str, Any]], Optional[Advisory]]:
        source = self.context.source_for(kind)
        try:
            rows = await asyncio.to_thread(source.fetch_range, owner_ids, start, end)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Fetching %s records failed: %s", kind.value, exc)
            label = "entries" if kind is ItemKind.ENTRY else "scheduled boards"
            return [], Advisory(source=kind.value.lower(), message=f"Could not load {label}; they are not shown.")
        return rows, None

    async def _fetch_profiles(self, owner_ids: Iterable[str]) -> Tuple[Mapping[str, OwnerProfile], Optional[Advisory]]:
        try:
            profiles = await asyncio.to_thread(self.context.profiles.fetch_many, list(owner_ids))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Fetching owner profiles failed: %s", exc)
            return {}, Advisory(source="profiles", message="Owner names are unavailable.")
        return profiles, None

    async def build_month_view(
        self,
        month: MonthLike,
        *,
        viewer_id: str,
        visible_owner_ids: Optional[Iterable[str]] = None,
    ) -> MonthViewResult:
        """Aggregate, normalize and pack one month for ``viewer_id``.

        Upstream failures shrink the result and add advisories; they never raise.
        """

        self._generation += 1
        generation = self._generation
        month_key = _as_month(month)
        advisories: list[Advisory] = []

        if visible_owner_ids is None:
            owner_ids, notes = await self.visibility.resolve(viewer_id, ShareScope.CALENDAR)
            advisories.extend(notes)
        else:
            owner_ids = _dedupe(visible_owner_ids)

        window = month_window(month_key)
        start, end = _window_bounds(window, self.tz)
        (entry_rows, entry_note), (container_rows, container_note) = await asyncio.gather(
            self._fetch_rows(ItemKind.ENTRY, owner_ids, start, end),
            self._fetch_rows(ItemKind.CONTAINER, owner_ids, start, end),
        )
        advisories.extend(note for note in (entry_note, container_note) if note is not None)

        profiles: Mapping[str, OwnerProfile] = {}
        if any(owner != viewer_id for owner in owner_ids):
            profiles, profile_note = await self._fetch_profiles(owner_ids)
            if profile_note is not None:
                advisories.append(profile_note)

        items = aggregate_items(
            entry_rows,
            container_rows,
            viewer_id=viewer_id,
            window=window,
            profiles=profiles,
            tz=self.tz,
        )
        view = layout_month(
            items,
            month_key,
            max_visible_bars=self.max_visible_bars,
            week_start=self.context.settings.calendar.week_start,
            tz=self.tz,
        )
        logger.debug(
            "Built %s for %s: %d items over %d owners (generation %d)",
            month_key,
            viewer_id,
            len(items),
            len(owner_ids),
            generation,
        )
        return MonthViewResult(
            view=view,
            viewer_id=viewer_id,
            visible_owner_ids=tuple(owner_ids),
            advisories=tuple(advisories),
            generation=generation,
        )

    def resolve_day(self, week: WeekLayout, column: int) -> DayItems:
        return resolve_day(week, column)

    def resolve_date(self, result: MonthViewResult, day: date) -> DayItems:
        return result.view.resolve(day)

    async def load_item(self, kind: ItemKind, item_id: str, *, viewer_id: str) -> Optional[CalendarItem]:
        """Fetch one item for mutation. Raises MutationRejected when its source is unreachable."""

        try:
            row = await asyncio.to_thread(self.context.source_for(kind).fetch, item_id)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Loading %s %s failed: %s", kind.value, item_id, exc)
            raise MutationRejected(FailureCode.UNAVAILABLE) from exc
        if row is None:
            return None
        owner_id = str(row.get("owner_id") or "")
        profiles: Mapping[str, OwnerProfile] = {}
        if owner_id and owner_id != viewer_id:
            profiles, _ = await self._fetch_profiles([owner_id])
        try:
            return item_from_row(kind, row, viewer_id=viewer_id, profiles=profiles, tz=self.tz)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("%s %s cannot be loaded: %s", kind.value, item_id, exc)
            return None

    async def shift_item(self, item: CalendarItem, delta_days: int) -> MutationOutcome:
        return await shift_item(item, delta_days, self.context.writers, tz=self.tz)

    async def edit_item(self, item: CalendarItem, patch: ItemPatch) -> MutationOutcome:
        return await edit_item(item, patch, self.context.writers, tz=self.tz)

    async def _refresh_after(
        self,
        outcome: MutationOutcome,
        *,
        month: Optional[MonthLike],
        viewer_id: str,
        visible_owner_ids: Optional[Iterable[str]],
    ) -> MutationResult:
        if isinstance(outcome, Failure):
            return MutationResult(outcome=outcome)
        if month is None:
            anchor = outcome.start_at.astimezone(self.tz).date() if outcome.start_at else date.today()
            month = MonthKey.containing(anchor)
        refreshed = await self.build_month_view(month, viewer_id=viewer_id, visible_owner_ids=visible_owner_ids)
        return MutationResult(outcome=outcome, refreshed=refreshed)

    async def shift_and_refresh(
        self,
        item: CalendarItem,
        delta_days: int,
        *,
        viewer_id: str,
        month: Optional[MonthLike] = None,
        visible_owner_ids: Optional[Iterable[str]] = None,
    ) -> MutationResult:
        """Write one shift, then rebuild the whole month view from the store."""

        outcome = await self.shift_item(item, delta_days)
        return await self._refresh_after(
            outcome, month=month, viewer_id=viewer_id, visible_owner_ids=visible_owner_ids
        )

    async def edit_and_refresh(
        self,
        item: CalendarItem,
        patch: ItemPatch,
        *,
        viewer_id: str,
        month: Optional[MonthLike] = None,
        visible_owner_ids: Optional[Iterable[str]] = None,
    ) -> MutationResult:
        outcome = await self.edit_item(item, patch)
        return await self._refresh_after(
            outcome, month=month, viewer_id=viewer_id, visible_owner_ids=visible_owner_ids
        )
