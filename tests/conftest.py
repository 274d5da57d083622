"""Shared fixtures for the boardcal test suite."""

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

import pytest

from boardcal.config import AppSettings, CalendarSettings, StorageSettings, SupabaseSettings
from boardcal.core import Span
from boardcal.data import LocalRecordStore
from boardcal.domain import CalendarItem, ItemKind, ItemStatus
from boardcal.services import ServiceContext

VIEWER = "u-me"
FRIEND = "u-friend"


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def make_item(
    item_id: str,
    start_at: Optional[datetime],
    end_at: Optional[datetime] = None,
    *,
    all_day: bool = False,
    title: Optional[str] = None,
    kind: ItemKind = ItemKind.ENTRY,
    owner_id: str = VIEWER,
) -> CalendarItem:
    name = title or item_id
    return CalendarItem(
        kind=kind,
        id=item_id,
        container_id="b-" + item_id if kind is ItemKind.ENTRY else item_id,
        owner_id=owner_id,
        title=name,
        display_title=name,
        status=ItemStatus.PENDING,
        is_confidential=False,
        start_at=start_at,
        end_at=end_at,
        all_day=all_day,
        can_edit=owner_id == VIEWER,
        container_name="",
        owner_label="",
    )


def make_span(item_id: str, start_day: date, end_day: date, *, title: Optional[str] = None) -> Span:
    item = make_item(item_id, utc(start_day.year, start_day.month, start_day.day), title=title)
    return Span(item=item, start_day=start_day, end_day=end_day)


def build_settings(store_path: Path, **calendar_overrides) -> AppSettings:
    calendar = dict(max_visible_bars=3, week_start=0, timezone="UTC", default_viewer_id=VIEWER)
    calendar.update(calendar_overrides)
    return AppSettings(
        supabase=SupabaseSettings(url=None, anon_key=None),
        storage=StorageSettings(
            backend="local",
            entries_table="posts",
            containers_table="boards",
            profiles_table="users",
            shares_table="schedule_shares",
            local_path=store_path,
        ),
        calendar=CalendarSettings(**calendar),
        log_level="DEBUG",
    )


SEED = {
    "profiles": [
        {"id": VIEWER, "name": "Me", "email": "me@example.com"},
        {"id": FRIEND, "name": None, "email": "friend@example.com"},
    ],
    "boards": [
        {"id": "b-work", "name": "Work", "owner_id": VIEWER, "single_schedule": False},
        {"id": "b-trips", "name": "Trips", "owner_id": FRIEND, "single_schedule": False},
        {
            "id": "b-launch",
            "name": "Launch",
            "owner_id": VIEWER,
            "single_schedule": True,
            "status": "DOING",
            "start_at": "2024-06-10T00:00:00+00:00",
            "end_at": "2024-06-13T00:00:00+00:00",
            "all_day": True,
        },
    ],
    "entries": [
        {
            "id": "p-standup",
            "container_id": "b-work",
            "title": "Standup",
            "status": "TODO",
            "is_confidential": False,
            "start_at": "2024-06-03T09:00:00+00:00",
            "end_at": "2024-06-03T10:00:00+00:00",
            "all_day": False,
        },
        {
            "id": "p-flight",
            "container_id": "b-trips",
            "title": "Flight",
            "status": "TODO",
            "is_confidential": True,
            "start_at": "2024-06-04T00:00:00+00:00",
            "end_at": "2024-06-06T00:00:00+00:00",
            "all_day": True,
        },
        {
            "id": "p-unscheduled",
            "container_id": "b-work",
            "title": "Someday",
            "status": "TODO",
            "start_at": None,
            "end_at": None,
            "all_day": False,
        },
        {
            "id": "p-garbled",
            "container_id": "b-work",
            "title": "Broken",
            "status": "TODO",
            "start_at": "not-a-date",
            "end_at": None,
            "all_day": False,
        },
    ],
    "shares": [
        {"requester_id": VIEWER, "owner_id": FRIEND, "scope": "CALENDAR", "status": "ACCEPTED"},
    ],
}


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "calendar.json"


@pytest.fixture
def store(store_path: Path) -> LocalRecordStore:
    local = LocalRecordStore(store_path)
    for collection, records in SEED.items():
        local.extend(collection, records)
    return local


@pytest.fixture
def settings(store_path: Path) -> AppSettings:
    return build_settings(store_path)


@pytest.fixture
def context(settings: AppSettings, store: LocalRecordStore) -> ServiceContext:
    return ServiceContext(settings=settings, store=store)
