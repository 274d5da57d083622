"""Configuration models and helpers."""

from __future__ import annotations

from .settings import (
    BACKEND_LOCAL,
    BACKEND_SUPABASE,
    AppSettings,
    CalendarSettings,
    StorageSettings,
    SupabaseSettings,
    get_settings,
)

__all__ = [
    "BACKEND_LOCAL",
    "BACKEND_SUPABASE",
    "AppSettings",
    "CalendarSettings",
    "StorageSettings",
    "SupabaseSettings",
    "get_settings",
]
