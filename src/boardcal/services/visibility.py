from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Tuple

from ..domain import ShareScope
from .context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Advisory:
    """Non-fatal notice that a view was built with reduced scope."""

    source: str
    message: str


@dataclass(slots=True)
class VisibilityService:
    context: ServiceContext

    async def resolve(
        self,
        viewer_id: str,
        scope: ShareScope = ShareScope.CALENDAR,
    ) -> Tuple[List[str], List[Advisory]]:
        """Owner ids whose items ``viewer_id`` may see; the viewer always comes first.

        A failing share lookup falls back to the viewer alone.
        """

        try:
            shared = await asyncio.to_thread(self.context.shares.accepted_owner_ids, viewer_id, scope)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Share lookup for %s (%s) failed: %s", viewer_id, scope.value, exc)
            advisory = Advisory(
                source="visibility",
                message="Shared schedules are unavailable; showing only your own items.",
            )
            return [viewer_id], [advisory]
        others = sorted({owner for owner in shared if owner != viewer_id})
        return [viewer_id, *others], []
