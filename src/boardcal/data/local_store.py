from __future__ import annotations

import logging
import threading
from copy import deepcopy
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import orjson

from ..core.config import LOCAL_STORE_FILE, ensure_data_dir
from ..domain import OwnerProfile, ShareScope, parse_optional_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

DEFAULT_STORE_STATE: Dict[str, Any] = {
    "boards": [],
    "entries": [],
    "profiles": [],
    "shares": [],
    "metadata": {"schema_version": 1},
}

_ENTRY_FIELDS = ("start_at", "end_at", "all_day", "status", "title")
_BOARD_FIELDS = {"start_at": "start_at", "end_at": "end_at", "all_day": "all_day", "status": "status", "title": "name"}


def _may_overlap(start_value: Any, end_value: Any, start: datetime, end: datetime) -> bool:
    """Coarse range check; malformed rows pass through for the aggregator to drop."""

    try:
        starts = parse_timestamp(start_value, start.tzinfo)
        ends = parse_optional_timestamp(end_value, start.tzinfo)
    except ValueError:
        return True
    if starts >= end:
        return False
    # A reversed end collapses to the start day downstream.
    return max(ends or starts, starts) >= start


class LocalRecordStore:
    """orjson-backed single-file store with the same surface as the Supabase repositories."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or LOCAL_STORE_FILE
        self._state: Optional[Dict[str, Any]] = None
        self._lock = threading.RLock()
        self.entries = LocalEntrySource(self)
        self.containers = LocalContainerSource(self)
        self.profiles = LocalProfileSource(self)
        self.shares = LocalShareSource(self)

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_materialized(self) -> None:
        if self._state is not None:
            return
        with self._lock:
            if self._state is None:
                # Published only once complete; readers skip the lock after this.
                self._state = self._load()
                if not self._path.exists():
                    self.persist()

    def _load(self) -> Dict[str, Any]:
        if not self._path.exists():
            ensure_data_dir(self._path.parent)
            return deepcopy(DEFAULT_STORE_STATE)
        raw = self._path.read_bytes()
        if not raw.strip():
            return deepcopy(DEFAULT_STORE_STATE)
        state = orjson.loads(raw)
        for key, value in DEFAULT_STORE_STATE.items():
            state.setdefault(key, deepcopy(value))
        return state

    @property
    def data(self) -> Dict[str, Any]:
        self._ensure_materialized()
        assert self._state is not None
        return self._state

    def persist(self) -> None:
        if self._state is None:
            return
        payload = orjson.dumps(self._state, option=orjson.OPT_INDENT_2)
        self._path.write_bytes(payload + b"\n")

    def mutate(self, callback: Callable[[Dict[str, Any]], Any]) -> Any:
        with self._lock:
            self._ensure_materialized()
            assert self._state is not None
            result = callback(self._state)
            self.persist()
            return result

    def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        if collection not in DEFAULT_STORE_STATE or collection == "metadata":
            raise KeyError(f"Unknown collection '{collection}'.")

        def _append(state: Dict[str, Any]) -> Dict[str, Any]:
            stored = deepcopy(record)
            state[collection].append(stored)
            return deepcopy(stored)

        return self.mutate(_append)

    def extend(self, collection: str, records: Iterable[Dict[str, Any]]) -> None:
        for record in records:
            self.insert(collection, record)

    def _boards_by_id(self) -> Dict[str, Dict[str, Any]]:
        return {str(board["id"]): board for board in self.data["boards"]}


@dataclass(slots=True)
class LocalEntrySource:
    store: LocalRecordStore

    def _joined(self, entry: Dict[str, Any], board: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": entry.get("id"),
            "container_id": entry.get("container_id"),
            "container_name": board.get("name") or "",
            "owner_id": board.get("owner_id"),
            "title": entry.get("title") or "",
            "status": entry.get("status"),
            "is_confidential": bool(entry.get("is_confidential")),
            "start_at": entry.get("start_at"),
            "end_at": entry.get("end_at"),
            "all_day": bool(entry.get("all_day")),
            "created_at": entry.get("created_at"),
        }

    def fetch_range(self, owner_ids: Sequence[str], start: datetime, end: datetime) -> List[Dict[str, Any]]:
        owners = set(owner_ids)
        boards = self.store._boards_by_id()
        rows: list[Dict[str, Any]] = []
        for entry in self.store.data["entries"]:
            board = boards.get(str(entry.get("container_id")))
            if board is None or board.get("owner_id") not in owners:
                continue
            if not entry.get("start_at"):
                continue
            if _may_overlap(entry.get("start_at"), entry.get("end_at"), start, end):
                rows.append(self._joined(entry, board))
        return rows

    def fetch(self, item_id: str) -> Optional[Dict[str, Any]]:
        boards = self.store._boards_by_id()
        for entry in self.store.data["entries"]:
            if str(entry.get("id")) == item_id:
                return self._joined(entry, boards.get(str(entry.get("container_id")), {}))
        return None

    def update(self, item_id: str, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        def _apply(state: Dict[str, Any]) -> bool:
            for entry in state["entries"]:
                if str(entry.get("id")) == item_id:
                    entry.update({key: value for key, value in record.items() if key in _ENTRY_FIELDS})
                    return True
            return False

        if not self.store.mutate(_apply):
            return None
        logger.debug("Local entry %s updated", item_id)
        return self.fetch(item_id)


@dataclass(slots=True)
class LocalContainerSource:
    store: LocalRecordStore

    @staticmethod
    def _row(board: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": board.get("id"),
            "name": board.get("name") or "",
            "owner_id": board.get("owner_id"),
            "status": board.get("status"),
            "start_at": board.get("start_at"),
            "end_at": board.get("end_at"),
            "all_day": bool(board.get("all_day")),
        }

    def _scheduled(self) -> Iterable[Dict[str, Any]]:
        return (board for board in self.store.data["boards"] if board.get("single_schedule"))

    def fetch_range(self, owner_ids: Sequence[str], start: datetime, end: datetime) -> List[Dict[str, Any]]:
        owners = set(owner_ids)
        return [
            self._row(board)
            for board in self._scheduled()
            if board.get("owner_id") in owners
            and board.get("start_at")
            and _may_overlap(board.get("start_at"), board.get("end_at"), start, end)
        ]

    def fetch(self, item_id: str) -> Optional[Dict[str, Any]]:
        for board in self._scheduled():
            if str(board.get("id")) == item_id:
                return self._row(board)
        return None

    def update(self, item_id: str, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        def _apply(state: Dict[str, Any]) -> Optional[Dict[str, Any]]:
            for board in state["boards"]:
                if str(board.get("id")) == item_id and board.get("single_schedule"):
                    for key, value in record.items():
                        if key in _BOARD_FIELDS:
                            board[_BOARD_FIELDS[key]] = value
                    return self._row(board)
            return None

        return self.store.mutate(_apply)


@dataclass(slots=True)
class LocalProfileSource:
    store: LocalRecordStore

    def fetch_many(self, user_ids: Iterable[str]) -> Dict[str, OwnerProfile]:
        wanted = set(user_ids)
        profiles = [
            OwnerProfile.from_record(record)
            for record in self.store.data["profiles"]
            if str(record.get("id")) in wanted
        ]
        return {profile.id: profile for profile in profiles}


@dataclass(slots=True)
class LocalShareSource:
    store: LocalRecordStore

    def accepted_owner_ids(self, requester_id: str, scope: ShareScope) -> List[str]:
        return [
            str(record["owner_id"])
            for record in self.store.data["shares"]
            if record.get("requester_id") == requester_id
            and record.get("scope") == scope.value
            and record.get("status") == "ACCEPTED"
        ]


__all__ = [
    "DEFAULT_STORE_STATE",
    "LocalContainerSource",
    "LocalEntrySource",
    "LocalProfileSource",
    "LocalRecordStore",
    "LocalShareSource",
]
