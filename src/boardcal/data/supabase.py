from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from ..config.settings import SupabaseSettings


class SupabaseNotInitializedError(RuntimeError):
    """Raised when the Supabase client is used without URL or anon key."""


class SupabaseSessionMissingError(RuntimeError):
    """Raised when a viewer-specific call runs without a signed-in session."""


@dataclass
class SupabaseGateway:
    """Lazily created Supabase client plus the session of the current viewer."""

    settings: SupabaseSettings
    _client: Optional[Client] = None
    _session: Optional[Any] = None

    def ensure_client(self) -> Client:
        if self._client is not None:
            return self._client
        if not self.settings.is_configured:
            missing = ", ".join(self.settings.missing_env_vars)
            raise SupabaseNotInitializedError(f"Supabase settings are incomplete: {missing}.")
        self._client = create_client(self.settings.url, self.settings.anon_key)
        return self._client

    def set_session(self, session: Any) -> None:
        self._session = session

    def clear_session(self) -> None:
        self._session = None

    def current_user_id(self) -> str:
        if self._session is None:
            raise SupabaseSessionMissingError("Supabase session is not available.")
        user = getattr(self._session, "user", None)
        identifier = getattr(user, "id", None)
        if not identifier:
            raise SupabaseSessionMissingError("Supabase session has no user id.")
        return str(identifier)

    def table(self, name: str):
        return self.ensure_client().table(name)

    @staticmethod
    def rows(response: Any) -> List[Dict[str, Any]]:
        data = getattr(response, "data", None) or []
        if isinstance(data, dict):
            return [data]
        return list(data)

    @classmethod
    def first_row(cls, response: Any) -> Optional[Dict[str, Any]]:
        rows = cls.rows(response)
        return rows[0] if rows else None
