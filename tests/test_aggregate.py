"""Tests for merging entry and container rows into canonical items."""

from __future__ import annotations

from datetime import date

from boardcal.core import MonthKey, aggregate_items, layout_month, month_window
from boardcal.domain import ItemKind, ItemStatus, OwnerProfile

from .conftest import FRIEND, VIEWER

JUNE = month_window(MonthKey(2024, 6))
PROFILES = {FRIEND: OwnerProfile(FRIEND, name="Dana")}


def _entry(identifier, start_at, end_at=None, *, title="Task", owner=VIEWER, board="Work", all_day=False, **extra):
    row = {
        "id": identifier,
        "container_id": "b-" + board.lower(),
        "container_name": board,
        "owner_id": owner,
        "title": title,
        "status": "TODO",
        "is_confidential": False,
        "start_at": start_at,
        "end_at": end_at,
        "all_day": all_day,
    }
    row.update(extra)
    return row


def _board(identifier, name, start_at, end_at=None, *, owner=VIEWER, all_day=True, status="DOING"):
    return {
        "id": identifier,
        "name": name,
        "owner_id": owner,
        "status": status,
        "start_at": start_at,
        "end_at": end_at,
        "all_day": all_day,
    }


def test_entries_and_containers_become_canonical_items():
    items = aggregate_items(
        [
            _entry("p1", "2024-06-03T09:00:00Z", "2024-06-03T09:30:00Z", title="Standup"),
            _entry("p2", "2024-06-04T00:00:00Z", "2024-06-06T00:00:00Z", title="Flight", owner=FRIEND, board="Trips"),
        ],
        [_board("b1", "Launch", "2024-06-10T00:00:00Z", "2024-06-13T00:00:00Z")],
        viewer_id=VIEWER,
        window=JUNE,
        profiles=PROFILES,
    )

    by_id = {item.id: item for item in items}
    assert [item.id for item in items] == ["p1", "p2", "b1"]
    assert by_id["p1"].display_title == "Work · Standup"
    assert by_id["p1"].can_edit
    assert by_id["p2"].display_title == "[Dana] Trips · Flight"
    assert not by_id["p2"].can_edit
    assert by_id["b1"].kind is ItemKind.CONTAINER
    assert by_id["b1"].title == "Launch"
    assert by_id["b1"].display_title == "Launch"
    assert by_id["b1"].status is ItemStatus.ACTIVE


def test_foreign_owner_without_profile_is_labelled_unknown():
    items = aggregate_items(
        [_entry("p1", "2024-06-03T09:00:00Z", title="Secret", owner="u-stranger")],
        [],
        viewer_id=VIEWER,
        window=JUNE,
    )

    assert items[0].display_title == "[unknown] Work · Secret"


def test_window_keeps_only_spans_touching_the_month():
    items = aggregate_items(
        [
            _entry("ends-before", "2024-05-31T10:00:00Z"),
            _entry("crosses-in", "2024-05-31T10:00:00Z", "2024-06-02T08:00:00Z"),
            _entry("all-day-ends-may", "2024-05-29T00:00:00Z", "2024-06-01T00:00:00Z", all_day=True),
            _entry("inside", "2024-06-15T12:00:00Z"),
            _entry("last-day", "2024-06-30T23:00:00Z"),
            _entry("next-month", "2024-07-01T00:00:00Z"),
        ],
        [],
        viewer_id=VIEWER,
        window=JUNE,
    )

    assert [item.id for item in items] == ["crosses-in", "inside", "last-day"]


def test_malformed_and_unscheduled_rows_are_dropped():
    items = aggregate_items(
        [
            _entry("ok", "2024-06-03T09:00:00Z"),
            _entry("bad-date", "yesterday"),
            _entry("no-start", None),
            {"id": "no-owner", "container_id": "b-work", "start_at": "2024-06-03T09:00:00Z"},
        ],
        [_board("b-bad", "Broken", "2024-06-40T00:00:00Z")],
        viewer_id=VIEWER,
        window=JUNE,
    )

    assert [item.id for item in items] == ["ok"]


def test_same_start_orders_by_display_title():
    items = aggregate_items(
        [
            _entry("b", "2024-06-03T09:00:00Z", title="Beta"),
            _entry("a", "2024-06-03T09:00:00Z", title="Alpha"),
            _entry("c", "2024-06-02T09:00:00Z", title="Zed"),
        ],
        [],
        viewer_id=VIEWER,
        window=JUNE,
    )

    assert [item.id for item in items] == ["c", "a", "b"]


def test_identical_rows_produce_identical_layouts():
    entries = [
        _entry(f"p{index}", f"2024-06-{(index % 20) + 1:02d}T09:00:00Z", f"2024-06-{(index % 20) + 4:02d}T09:00:00Z")
        for index in range(25)
    ]
    containers = [_board("b1", "Launch", "2024-06-10T00:00:00Z", "2024-06-13T00:00:00Z")]

    def build():
        items = aggregate_items(entries, containers, viewer_id=VIEWER, window=JUNE)
        view = layout_month(items, MonthKey(2024, 6))
        return [
            [(entry.item.key, entry.lane, entry.segment.col_start, entry.segment.col_end) for entry in week.assignments]
            for week in view.weeks
        ]

    assert build() == build()


def test_layout_includes_items_crossing_the_month_edge():
    items = aggregate_items(
        [_entry("trip", "2024-05-30T00:00:00Z", "2024-06-02T00:00:00Z", all_day=True, title="Trip")],
        [],
        viewer_id=VIEWER,
        window=JUNE,
    )

    view = layout_month(items, MonthKey(2024, 6))
    first_week = view.weeks[0]

    assert [entry.item.id for entry in first_week.assignments] == ["trip"]
    segment = first_week.assignments[0].segment
    assert (segment.col_start, segment.col_end) == (4, 6)
    assert view.resolve(date(2024, 6, 1)).items[0].id == "trip"
    assert view.resolve(date(2024, 6, 2)).items == ()
