from __future__ import annotations

from dataclasses import dataclass, field

from ..services import CalendarService, ServiceContext


@dataclass(slots=True)
class ApiState:
    context: ServiceContext = field(default_factory=ServiceContext)
    calendar: CalendarService = field(init=False)

    def __post_init__(self) -> None:
        self.calendar = CalendarService(self.context)

    def reset(self, context: ServiceContext) -> None:
        """Swap in a new context, e.g. after settings or store changes."""

        self.context = context
        self.calendar = CalendarService(context)


api_state = ApiState()
