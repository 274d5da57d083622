from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable

from ...domain import OwnerProfile
from ..supabase import SupabaseGateway


@dataclass(slots=True)
class ProfileRepository:
    gateway: SupabaseGateway
    table_name: str

    def fetch_many(self, user_ids: Iterable[str]) -> Dict[str, OwnerProfile]:
        identifiers = sorted(set(user_ids))
        if not identifiers:
            return {}
        response = (
            self.gateway.table(self.table_name)
            .select("id, name, email")
            .in_("id", identifiers)
            .execute()
        )
        profiles = [OwnerProfile.from_record(record) for record in self.gateway.rows(response)]
        return {profile.id: profile for profile in profiles}
