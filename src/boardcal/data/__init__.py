"""Data access layer."""

from __future__ import annotations

from .local_store import LocalRecordStore
from .protocols import ProfileSource, ScheduleSource, ShareSource
from .supabase import SupabaseGateway, SupabaseNotInitializedError, SupabaseSessionMissingError

__all__ = [
    "LocalRecordStore",
    "ProfileSource",
    "ScheduleSource",
    "ShareSource",
    "SupabaseGateway",
    "SupabaseNotInitializedError",
    "SupabaseSessionMissingError",
]
