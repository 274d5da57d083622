"""Tests for the 6x7 month grid."""

from __future__ import annotations

from datetime import date

import pytest

from boardcal.core import MonthKey, build_month_grid, month_window
from boardcal.core.grid import GRID_CELLS, sunday_based_weekday


def test_month_key_parse_and_neighbours():
    month = MonthKey.parse("2024-06")

    assert str(month) == "2024-06"
    assert month.next() == MonthKey(2024, 7)
    assert month.previous() == MonthKey(2024, 5)
    assert MonthKey(2024, 12).next() == MonthKey(2025, 1)
    assert MonthKey(2025, 1).previous() == MonthKey(2024, 12)
    assert MonthKey.containing(date(2024, 2, 29)) == MonthKey(2024, 2)


@pytest.mark.parametrize("value", ["", "2024", "2024-13", "2024-00", "June 2024", "24-06"])
def test_month_key_rejects_malformed_values(value):
    with pytest.raises(ValueError):
        MonthKey.parse(value)


def test_month_window_is_half_open():
    window = month_window(MonthKey(2024, 2))

    assert window.start == date(2024, 2, 1)
    assert window.end == date(2024, 3, 1)
    assert window.last_day == date(2024, 2, 29)
    assert window.contains(date(2024, 2, 29))
    assert not window.contains(date(2024, 3, 1))


def test_sunday_based_weekday():
    assert sunday_based_weekday(date(2024, 6, 2)) == 0
    assert sunday_based_weekday(date(2024, 6, 1)) == 6


def test_grid_always_has_42_cells():
    for month in range(1, 13):
        grid = build_month_grid(MonthKey(2024, month))
        assert len(grid.cells) == GRID_CELLS
        assert len(grid.rows) == 6


def test_sunday_start_grid_for_june_2024():
    grid = build_month_grid(MonthKey(2024, 6))

    assert grid.first_day == date(2024, 5, 26)
    assert grid.last_day == date(2024, 7, 6)
    assert grid.rows[0].week_start == date(2024, 5, 26)
    assert grid.rows[0].week_end == date(2024, 6, 1)
    assert grid.rows[5].week_start == date(2024, 6, 30)


def test_monday_start_shifts_leading_days():
    grid = build_month_grid(MonthKey(2024, 6), week_start=1)

    assert grid.first_day == date(2024, 5, 27)
    assert sunday_based_weekday(grid.first_day) == 1


def test_month_starting_on_week_start_has_no_leading_days():
    grid = build_month_grid(MonthKey(2024, 9))

    assert grid.cells[0].day == date(2024, 9, 1)
    assert grid.cells[0].in_month


def test_out_of_month_cells_are_flagged():
    grid = build_month_grid(MonthKey(2024, 6))

    leading = [cell for cell in grid.cells_for_row(0) if not cell.in_month]
    trailing = [cell for cell in grid.cells_for_row(5) if not cell.in_month]

    assert [cell.day.day for cell in leading] == [26, 27, 28, 29, 30, 31]
    assert [cell.day.day for cell in trailing] == [1, 2, 3, 4, 5, 6]
    assert sum(cell.in_month for cell in grid.cells) == 30


def test_locate_returns_row_and_column():
    grid = build_month_grid(MonthKey(2024, 6))

    row, column = grid.locate(date(2024, 6, 12))

    assert row.index == 2
    assert column == 3
    assert row.column_of(date(2024, 6, 12)) == column
    with pytest.raises(ValueError):
        grid.locate(date(2024, 7, 7))


def test_invalid_week_start_is_rejected():
    with pytest.raises(ValueError):
        build_month_grid(MonthKey(2024, 6), week_start=7)
