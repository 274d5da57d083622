"""Calendar aggregation and layout engine.

Everything here except :mod:`.shift` is synchronous and free of I/O.
"""

from .aggregate import aggregate_items, apply_row, container_item, entry_item, item_from_row, sort_items
from .config import APP_NAME, DATA_DIR, LOCAL_STORE_FILE, LOG_FILE, ensure_data_dir
from .grid import (
    GridCell,
    MonthGrid,
    MonthKey,
    MonthWindow,
    WeekRow,
    build_month_grid,
    month_window,
)
from .lanes import (
    DEFAULT_MAX_VISIBLE_BARS,
    LaneAssignment,
    WeekLayout,
    WeekSegment,
    assign_lanes,
    clip_span,
    pack_month,
    pack_week,
)
from .overflow import DayItems, resolve_day
from .shift import (
    Failure,
    FailureCode,
    ItemWriter,
    MutationOutcome,
    MutationRejected,
    edit_item,
    shift_item,
    shift_patch,
)
from .spans import Span, days_between, normalize_span, span_for
from .view import MonthView, layout_month

__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "DEFAULT_MAX_VISIBLE_BARS",
    "LOCAL_STORE_FILE",
    "LOG_FILE",
    "DayItems",
    "Failure",
    "FailureCode",
    "GridCell",
    "ItemWriter",
    "LaneAssignment",
    "MonthGrid",
    "MonthKey",
    "MonthView",
    "MonthWindow",
    "MutationOutcome",
    "MutationRejected",
    "Span",
    "WeekLayout",
    "WeekRow",
    "WeekSegment",
    "aggregate_items",
    "apply_row",
    "assign_lanes",
    "build_month_grid",
    "clip_span",
    "container_item",
    "days_between",
    "edit_item",
    "ensure_data_dir",
    "entry_item",
    "item_from_row",
    "layout_month",
    "month_window",
    "normalize_span",
    "pack_month",
    "pack_week",
    "resolve_day",
    "shift_item",
    "shift_patch",
    "sort_items",
    "span_for",
]
