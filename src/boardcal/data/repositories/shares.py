from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ...domain import ShareScope
from ..supabase import SupabaseGateway


@dataclass(slots=True)
class ShareRepository:
    """Accepted schedule shares, read from the requester's side."""

    gateway: SupabaseGateway
    table_name: str

    def accepted_owner_ids(self, requester_id: str, scope: ShareScope) -> List[str]:
        response = (
            self.gateway.table(self.table_name)
            .select("owner_id")
            .eq("requester_id", requester_id)
            .eq("scope", scope.value)
            .eq("status", "ACCEPTED")
            .execute()
        )
        return [str(record["owner_id"]) for record in self.gateway.rows(response) if record.get("owner_id")]
