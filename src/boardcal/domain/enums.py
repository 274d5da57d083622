from __future__ import annotations

from enum import Enum
from typing import Any


class ItemKind(str, Enum):
    ENTRY = "ENTRY"
    CONTAINER = "CONTAINER"


_STORAGE_TO_STATUS = {
    "TODO": "PENDING",
    "DOING": "ACTIVE",
    "DONE": "DONE",
}


class ItemStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    DONE = "DONE"

    @classmethod
    def parse(cls, value: Any, fallback: "ItemStatus | None" = None) -> "ItemStatus":
        """Accept stored (``TODO``/``DOING``/``DONE``) or canonical names."""

        default = fallback or cls.PENDING
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return default
        normalized = value.strip().upper()
        normalized = _STORAGE_TO_STATUS.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            return default

    def to_storage(self) -> str:
        for stored, canonical in _STORAGE_TO_STATUS.items():
            if canonical == self.value:
                return stored
        return self.value


class ShareScope(str, Enum):
    CALENDAR = "CALENDAR"
    TODO = "TODO"
