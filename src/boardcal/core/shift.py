from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import timedelta, tzinfo
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Protocol, Union

from ..domain import UNSET, CalendarItem, ItemKind, ItemPatch
from .aggregate import apply_row

logger = logging.getLogger(__name__)


class FailureCode(str, Enum):
    VALIDATION = "validation"
    PERMISSION = "permission"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


DEFAULT_MESSAGES: Dict[FailureCode, str] = {
    FailureCode.VALIDATION: "The change could not be applied.",
    FailureCode.PERMISSION: "Permission denied · you cannot edit this item.",
    FailureCode.NOT_FOUND: "The item no longer exists.",
    FailureCode.UNAVAILABLE: "The calendar store is unavailable. Try again shortly.",
}


@dataclass(frozen=True, slots=True)
class Failure:
    code: FailureCode
    message: str

    @classmethod
    def of(cls, code: FailureCode, message: Optional[str] = None) -> "Failure":
        return cls(code=code, message=(message or "").strip() or DEFAULT_MESSAGES[code])


class MutationRejected(RuntimeError):
    """Raised by a writer that refuses an update."""

    def __init__(self, code: FailureCode, message: str = "") -> None:
        super().__init__(message or DEFAULT_MESSAGES[code])
        self.code = code
        self.message = message


class ItemWriter(Protocol):
    def update(self, item_id: str, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Persist ``record`` for ``item_id``; ``None`` when the row is gone."""


MutationOutcome = Union[CalendarItem, Failure]


def shift_patch(item: CalendarItem, delta_days: int) -> ItemPatch:
    """Move ``item`` by whole days, keeping its duration and wall-clock times."""

    if item.start_at is None:
        raise ValueError("start_at required")
    delta = timedelta(days=delta_days)
    end_at = item.end_at + delta if item.end_at is not None else UNSET
    return ItemPatch(start_at=item.start_at + delta, end_at=end_at)


def _precheck(item: CalendarItem, patch: ItemPatch) -> Optional[Failure]:
    if not item.can_edit:
        return Failure.of(FailureCode.PERMISSION)
    if patch.is_empty:
        return Failure.of(FailureCode.VALIDATION, "nothing to update")
    if item.kind is ItemKind.CONTAINER and patch.clears_start:
        return Failure.of(FailureCode.VALIDATION, "start_at required")
    if patch.title is not None and not patch.title.strip():
        return Failure.of(FailureCode.VALIDATION, "title required")
    return None


async def edit_item(
    item: CalendarItem,
    patch: ItemPatch,
    writers: Mapping[ItemKind, ItemWriter],
    *,
    tz: Optional[tzinfo] = None,
) -> MutationOutcome:
    """Write ``patch`` through the writer registered for ``item.kind``.

    Returns the updated item or a ``Failure``; nothing is written when a
    precondition fails. Callers rebuild their month view afterwards.
    """

    failure = _precheck(item, patch)
    if failure is not None:
        return failure

    writer = writers.get(item.kind)
    if writer is None:
        return Failure.of(FailureCode.UNAVAILABLE, f"No writer registered for {item.kind.value} items.")

    record = patch.to_record()
    try:
        row = await asyncio.to_thread(writer.update, item.id, record)
    except MutationRejected as exc:
        logger.info("%s %s update rejected: %s", item.kind.value, item.id, exc)
        return Failure.of(exc.code, exc.message)
    except Exception as exc:  # noqa: BLE001
        logger.exception("%s %s update failed", item.kind.value, item.id)
        return Failure.of(FailureCode.UNAVAILABLE, str(exc))

    if row is None:
        return Failure.of(FailureCode.NOT_FOUND)
    logger.debug("%s %s updated with %s", item.kind.value, item.id, sorted(record))
    return apply_row(item, row, tz=tz)


async def shift_item(
    item: CalendarItem,
    delta_days: int,
    writers: Mapping[ItemKind, ItemWriter],
    *,
    tz: Optional[tzinfo] = None,
) -> MutationOutcome:
    if item.start_at is None:
        return Failure.of(FailureCode.VALIDATION, "start_at required")
    if delta_days == 0:
        return Failure.of(FailureCode.VALIDATION, "nothing to update")
    return await edit_item(item, shift_patch(item, delta_days), writers, tz=tz)


__all__ = [
    "DEFAULT_MESSAGES",
    "Failure",
    "FailureCode",
    "ItemWriter",
    "MutationOutcome",
    "MutationRejected",
    "edit_item",
    "shift_item",
    "shift_patch",
]
