"""Domain models for the shared calendar."""

from __future__ import annotations

from .enums import ItemKind, ItemStatus, ShareScope
from .models import (
    UNSET,
    CalendarItem,
    ItemPatch,
    OwnerProfile,
    compose_display_title,
    parse_optional_timestamp,
    parse_timestamp,
)

__all__ = [
    "UNSET",
    "CalendarItem",
    "ItemKind",
    "ItemPatch",
    "ItemStatus",
    "OwnerProfile",
    "ShareScope",
    "compose_display_title",
    "parse_optional_timestamp",
    "parse_timestamp",
]
