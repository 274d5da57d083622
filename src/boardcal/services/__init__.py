"""Application services orchestrating data access and the layout engine."""

from __future__ import annotations

from .calendar import CalendarService, MonthViewResult, MutationResult
from .context import ServiceContext, ViewerRequiredError
from .visibility import Advisory, VisibilityService

__all__ = [
    "Advisory",
    "CalendarService",
    "MonthViewResult",
    "MutationResult",
    "ServiceContext",
    "ViewerRequiredError",
    "VisibilityService",
]
