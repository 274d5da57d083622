"""Tests for domain models and enums."""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from boardcal.domain import (
    UNSET,
    ItemKind,
    ItemPatch,
    ItemStatus,
    OwnerProfile,
    compose_display_title,
    parse_timestamp,
)

from .conftest import make_item


@pytest.mark.parametrize(
    ("stored", "expected"),
    [
        ("TODO", ItemStatus.PENDING),
        ("doing", ItemStatus.ACTIVE),
        ("DONE", ItemStatus.DONE),
        ("ACTIVE", ItemStatus.ACTIVE),
        ("ARCHIVED", ItemStatus.PENDING),
        (None, ItemStatus.PENDING),
    ],
)
def test_status_parse(stored, expected):
    assert ItemStatus.parse(stored) is expected


def test_status_round_trips_to_storage_names():
    assert ItemStatus.PENDING.to_storage() == "TODO"
    assert ItemStatus.ACTIVE.to_storage() == "DOING"
    assert ItemStatus.DONE.to_storage() == "DONE"


def test_parse_timestamp_handles_zulu_and_naive_values():
    assert parse_timestamp("2024-06-03T09:00:00Z") == datetime(2024, 6, 3, 9, tzinfo=timezone.utc)

    seoul = ZoneInfo("Asia/Seoul")
    naive = parse_timestamp("2024-06-03T09:00:00", seoul)
    assert naive.tzinfo is seoul
    assert naive.hour == 9

    with pytest.raises(ValueError):
        parse_timestamp("")
    with pytest.raises(ValueError):
        parse_timestamp(42)


@pytest.mark.parametrize(
    ("profile", "label"),
    [
        (OwnerProfile("u1", name="Dana", email="dana@example.com"), "Dana"),
        (OwnerProfile("u1", name="  ", email="friend@example.com"), "fr***@example.com"),
        (OwnerProfile("u1", email="ab@example.com"), "a*@example.com"),
        (OwnerProfile("u1"), "unknown"),
    ],
)
def test_owner_label(profile, label):
    assert profile.label == label


def test_display_titles():
    own = compose_display_title(ItemKind.ENTRY, title="Standup", container_name="Work", owner_label="Me", foreign=False)
    foreign = compose_display_title(
        ItemKind.ENTRY, title="Flight", container_name="Trips", owner_label="Dana", foreign=True
    )
    board = compose_display_title(
        ItemKind.CONTAINER, title="Launch", container_name="Launch", owner_label="Dana", foreign=True
    )

    assert own == "Work · Standup"
    assert foreign == "[Dana] Trips · Flight"
    assert board == "[Dana] Launch"


def test_item_key_combines_kind_and_id():
    assert make_item("x", None).key == ("ENTRY", "x")
    assert make_item("x", None, kind=ItemKind.CONTAINER).key == ("CONTAINER", "x")


def test_patch_record_only_carries_set_fields():
    start = datetime(2024, 6, 3, 9, tzinfo=timezone.utc)

    assert ItemPatch().is_empty
    assert ItemPatch(start_at=start).to_record() == {"start_at": "2024-06-03T09:00:00+00:00"}
    assert ItemPatch(end_at=None).to_record() == {"end_at": None}
    assert ItemPatch(status=ItemStatus.ACTIVE, title=" Ship ").to_record() == {"status": "DOING", "title": "Ship"}
    assert ItemPatch(start_at=None).clears_start
    assert not ItemPatch(start_at=UNSET).clears_start
