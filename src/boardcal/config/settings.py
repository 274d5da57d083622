from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

from ..core.config import LOCAL_STORE_FILE

load_dotenv()

BACKEND_LOCAL = "local"
BACKEND_SUPABASE = "supabase"


@dataclass(frozen=True)
class SupabaseSettings:
    url: Optional[str]
    anon_key: Optional[str]

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.url:
            missing.append("SUPABASE_URL")
        if not self.anon_key:
            missing.append("SUPABASE_ANON_KEY")
        return missing


@dataclass(frozen=True)
class StorageSettings:
    backend: str
    entries_table: str
    containers_table: str
    profiles_table: str
    shares_table: str
    local_path: Path


@dataclass(frozen=True)
class CalendarSettings:
    max_visible_bars: int
    week_start: int
    timezone: str
    default_viewer_id: Optional[str]

    @property
    def tzinfo(self) -> tzinfo:
        return ZoneInfo(self.timezone)


@dataclass(frozen=True)
class AppSettings:
    supabase: SupabaseSettings
    storage: StorageSettings
    calendar: CalendarSettings
    log_level: str


def _int_from_env(name: str, default: int, *, low: int, high: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if not low <= value <= high:
        return default
    return value


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    supabase = SupabaseSettings(
        url=os.getenv("SUPABASE_URL"),
        anon_key=os.getenv("SUPABASE_ANON_KEY"),
    )

    backend = os.getenv("BOARDCAL_BACKEND", BACKEND_LOCAL).strip().lower()
    if backend not in (BACKEND_LOCAL, BACKEND_SUPABASE):
        backend = BACKEND_LOCAL
    storage = StorageSettings(
        backend=backend,
        entries_table=os.getenv("BOARDCAL_ENTRIES_TABLE", "posts"),
        containers_table=os.getenv("BOARDCAL_CONTAINERS_TABLE", "boards"),
        profiles_table=os.getenv("BOARDCAL_PROFILES_TABLE", "users"),
        shares_table=os.getenv("BOARDCAL_SHARES_TABLE", "schedule_shares"),
        local_path=Path(os.getenv("BOARDCAL_LOCAL_STORE") or LOCAL_STORE_FILE),
    )

    calendar = CalendarSettings(
        max_visible_bars=_int_from_env("BOARDCAL_MAX_VISIBLE_BARS", 3, low=0, high=50),
        week_start=_int_from_env("BOARDCAL_WEEK_START", 0, low=0, high=6),
        timezone=os.getenv("BOARDCAL_TIMEZONE", "UTC"),
        default_viewer_id=os.getenv("BOARDCAL_VIEWER_ID") or None,
    )

    return AppSettings(
        supabase=supabase,
        storage=storage,
        calendar=calendar,
        log_level=os.getenv("BOARDCAL_LOG_LEVEL", "INFO").upper(),
    )
