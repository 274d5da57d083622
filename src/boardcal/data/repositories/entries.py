from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ..supabase import SupabaseGateway

# canonical field -> posts column
_WRITABLE_COLUMNS = {
    "start_at": "start_at",
    "end_at": "end_at",
    "all_day": "all_day",
    "status": "status",
    "title": "title",
}


def _entry_row(record: Dict[str, Any]) -> Dict[str, Any]:
    board = record.get("board") or {}
    return {
        "id": record.get("id"),
        "container_id": record.get("board_id") or board.get("id"),
        "container_name": board.get("name") or "",
        "owner_id": board.get("owner_id"),
        "title": record.get("title") or "",
        "status": record.get("status"),
        "is_confidential": bool(record.get("is_secret")),
        "start_at": record.get("start_at"),
        "end_at": record.get("end_at"),
        "all_day": bool(record.get("all_day")),
        "created_at": record.get("created_at"),
    }


@dataclass(slots=True)
class EntryRepository:
    """Scheduled posts, each joined to the board that owns it."""

    gateway: SupabaseGateway
    table_name: str
    containers_table: str

    def _select_clause(self) -> str:
        return (
            "id, board_id, title, status, is_secret, start_at, end_at, all_day, created_at, "
            f"board:{self.containers_table}!inner(id, name, owner_id)"
        )

    def fetch_range(self, owner_ids: Sequence[str], start: datetime, end: datetime) -> List[Dict[str, Any]]:
        if not owner_ids:
            return []
        start_iso = start.isoformat()
        response = (
            self.gateway.table(self.table_name)
            .select(self._select_clause())
            .in_("board.owner_id", list(owner_ids))
            .not_.is_("start_at", "null")
            .lt("start_at", end.isoformat())
            .or_(f"end_at.gte.{start_iso},start_at.gte.{start_iso}")
            .order("start_at", desc=False)
            .execute()
        )
        return [_entry_row(record) for record in self.gateway.rows(response)]

    def fetch(self, entry_id: str) -> Optional[Dict[str, Any]]:
        response = (
            self.gateway.table(self.table_name)
            .select(self._select_clause())
            .eq("id", entry_id)
            .limit(1)
            .execute()
        )
        record = self.gateway.first_row(response)
        return _entry_row(record) if record else None

    def update(self, entry_id: str, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        payload = {_WRITABLE_COLUMNS[key]: value for key, value in record.items() if key in _WRITABLE_COLUMNS}
        if not payload:
            return self.fetch(entry_id)
        response = self.gateway.table(self.table_name).update(payload).eq("id", entry_id).execute()
        if not self.gateway.rows(response):
            return None
        return self.fetch(entry_id)
