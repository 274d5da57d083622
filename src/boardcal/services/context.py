from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from ..config import BACKEND_SUPABASE, AppSettings, get_settings
from ..data import LocalRecordStore, ProfileSource, ScheduleSource, ShareSource, SupabaseGateway
from ..data.repositories import ContainerRepository, EntryRepository, ProfileRepository, ShareRepository
from ..domain import ItemKind


class ViewerRequiredError(RuntimeError):
    """Raised when no viewing account can be determined."""


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings, gateway, and record sources."""

    settings: AppSettings = field(default_factory=get_settings)
    store: Optional[LocalRecordStore] = None
    gateway: SupabaseGateway = field(init=False)
    entries: ScheduleSource = field(init=False)
    containers: ScheduleSource = field(init=False)
    profiles: ProfileSource = field(init=False)
    shares: ShareSource = field(init=False)

    def __post_init__(self) -> None:
        self.gateway = SupabaseGateway(self.settings.supabase)
        storage = self.settings.storage
        if self.store is None and storage.backend == BACKEND_SUPABASE:
            self.entries = EntryRepository(
                gateway=self.gateway,
                table_name=storage.entries_table,
                containers_table=storage.containers_table,
            )
            self.containers = ContainerRepository(gateway=self.gateway, table_name=storage.containers_table)
            self.profiles = ProfileRepository(gateway=self.gateway, table_name=storage.profiles_table)
            self.shares = ShareRepository(gateway=self.gateway, table_name=storage.shares_table)
            return

        if self.store is None:
            self.store = LocalRecordStore(storage.local_path)
        self.entries = self.store.entries
        self.containers = self.store.containers
        self.profiles = self.store.profiles
        self.shares = self.store.shares

    @property
    def uses_supabase(self) -> bool:
        return self.store is None

    @property
    def writers(self) -> Dict[ItemKind, ScheduleSource]:
        return {ItemKind.ENTRY: self.entries, ItemKind.CONTAINER: self.containers}

    def source_for(self, kind: ItemKind) -> ScheduleSource:
        return self.writers[kind]

    def current_viewer_id(self, explicit: Optional[str] = None) -> str:
        """Resolve the viewing account: explicit id, signed-in user, then the configured default."""

        if explicit:
            return explicit
        if self.uses_supabase:
            return self.gateway.current_user_id()
        viewer = self.settings.calendar.default_viewer_id
        if not viewer:
            raise ViewerRequiredError("No viewer id given and BOARDCAL_VIEWER_ID is not set.")
        return viewer
