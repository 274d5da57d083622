from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, Optional, Tuple, Union

from .enums import ItemKind, ItemStatus


UNKNOWN_OWNER_LABEL = "unknown"


class _Unset:
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def parse_timestamp(value: Any, tz: Optional[tzinfo] = None) -> datetime:
    """Parse a stored timestamp into an aware datetime in ``tz``.

    Naive values are read as wall-clock time in ``tz`` (UTC when no zone is given).
    Raises ``ValueError`` for anything that is not a datetime or ISO-8601 string.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported datetime value: {value!r}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=tz or timezone.utc)
    if tz is not None:
        return parsed.astimezone(tz)
    return parsed


def parse_optional_timestamp(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return parse_timestamp(value, tz)


def mask_email(email: str) -> str:
    local, _, domain = email.partition("@")
    if not domain:
        return email
    if len(local) <= 1:
        return f"*@{domain}"
    if len(local) == 2:
        return f"{local[0]}*@{domain}"
    return f"{local[:2]}***@{domain}"


@dataclass(frozen=True, slots=True)
class OwnerProfile:
    id: str
    name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "OwnerProfile":
        return cls(
            id=str(record["id"]),
            name=record.get("name"),
            email=record.get("email"),
        )

    @property
    def label(self) -> str:
        name = (self.name or "").strip()
        if name:
            return name
        email = (self.email or "").strip()
        if email:
            return mask_email(email)
        return UNKNOWN_OWNER_LABEL


@dataclass(frozen=True, slots=True)
class CalendarItem:
    """Canonical scheduled item, shared by both source kinds."""

    kind: ItemKind
    id: str
    container_id: str
    owner_id: str
    title: str
    display_title: str
    status: ItemStatus
    is_confidential: bool
    start_at: Optional[datetime]
    end_at: Optional[datetime]
    all_day: bool
    can_edit: bool
    container_name: str = ""
    owner_label: str = ""

    @property
    def key(self) -> Tuple[str, str]:
        return (self.kind.value, self.id)


def compose_display_title(
    kind: ItemKind,
    *,
    title: str,
    container_name: str,
    owner_label: str,
    foreign: bool,
) -> str:
    if kind is ItemKind.CONTAINER:
        base = container_name
    else:
        base = f"{container_name} · {title}" if container_name else title
    return f"[{owner_label}] {base}" if foreign else base


TimestampUpdate = Union[datetime, None, _Unset]


@dataclass(frozen=True, slots=True)
class ItemPatch:
    """Fields to write back for one item.

    ``start_at`` and ``end_at`` use ``UNSET`` for "leave unchanged" so that
    ``None`` can clear a value. The other fields treat ``None`` as unchanged.
    """

    start_at: TimestampUpdate = UNSET
    end_at: TimestampUpdate = UNSET
    all_day: Optional[bool] = None
    status: Optional[ItemStatus] = None
    title: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return (
            self.start_at is UNSET
            and self.end_at is UNSET
            and self.all_day is None
            and self.status is None
            and self.title is None
        )

    @property
    def clears_start(self) -> bool:
        return self.start_at is None

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {}
        if self.start_at is not UNSET:
            record["start_at"] = self.start_at.isoformat() if self.start_at else None
        if self.end_at is not UNSET:
            record["end_at"] = self.end_at.isoformat() if self.end_at else None
        if self.all_day is not None:
            record["all_day"] = self.all_day
        if self.status is not None:
            record["status"] = self.status.to_storage()
        if self.title is not None:
            record["title"] = self.title.strip()
        return record
