from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

from ..domain import OwnerProfile, ShareScope


class ScheduleSource(Protocol):
    """Record source and write path for one item kind."""

    def fetch_range(self, owner_ids: Sequence[str], start: datetime, end: datetime) -> List[Dict[str, Any]]:
        ...

    def fetch(self, item_id: str) -> Optional[Dict[str, Any]]:
        ...

    def update(self, item_id: str, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ...


class ProfileSource(Protocol):
    def fetch_many(self, user_ids: Iterable[str]) -> Dict[str, OwnerProfile]:
        ...


class ShareSource(Protocol):
    def accepted_owner_ids(self, requester_id: str, scope: ShareScope) -> List[str]:
        ...


__all__ = ["ProfileSource", "ScheduleSource", "ShareSource"]
