from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ..supabase import SupabaseGateway

_SELECT = "id, name, owner_id, schedule_status, schedule_start_at, schedule_end_at, schedule_all_day"

_WRITABLE_COLUMNS = {
    "start_at": "schedule_start_at",
    "end_at": "schedule_end_at",
    "all_day": "schedule_all_day",
    "status": "schedule_status",
    "title": "name",
}


def _container_row(record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": record.get("id"),
        "name": record.get("name") or "",
        "owner_id": record.get("owner_id"),
        "status": record.get("schedule_status"),
        "start_at": record.get("schedule_start_at"),
        "end_at": record.get("schedule_end_at"),
        "all_day": bool(record.get("schedule_all_day")),
    }


@dataclass(slots=True)
class ContainerRepository:
    """Boards flagged ``single_schedule`` that carry their own span."""

    gateway: SupabaseGateway
    table_name: str

    def fetch_range(self, owner_ids: Sequence[str], start: datetime, end: datetime) -> List[Dict[str, Any]]:
        if not owner_ids:
            return []
        start_iso = start.isoformat()
        response = (
            self.gateway.table(self.table_name)
            .select(_SELECT)
            .in_("owner_id", list(owner_ids))
            .eq("single_schedule", True)
            .lt("schedule_start_at", end.isoformat())
            .or_(f"schedule_end_at.gte.{start_iso},schedule_start_at.gte.{start_iso}")
            .order("schedule_start_at", desc=False)
            .execute()
        )
        return [_container_row(record) for record in self.gateway.rows(response)]

    def fetch(self, container_id: str) -> Optional[Dict[str, Any]]:
        response = (
            self.gateway.table(self.table_name)
            .select(_SELECT)
            .eq("id", container_id)
            .eq("single_schedule", True)
            .limit(1)
            .execute()
        )
        record = self.gateway.first_row(response)
        return _container_row(record) if record else None

    def update(self, container_id: str, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        payload = {_WRITABLE_COLUMNS[key]: value for key, value in record.items() if key in _WRITABLE_COLUMNS}
        if not payload:
            return self.fetch(container_id)
        response = (
            self.gateway.table(self.table_name)
            .update(payload)
            .eq("id", container_id)
            .eq("single_schedule", True)
            .execute()
        )
        row = self.gateway.first_row(response)
        return _container_row(row) if row else None
