"""Principal lookup through Supabase Auth."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from sermon_studio.services.auth import PrincipalProvider

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthProvider(PrincipalProvider):
    """Resolves the user of the client's current auth session."""

    client: Client

    def current_user_id(self) -> UUID | None:
        """Return the session user's id; None when signed out or unreachable."""
        try:
            response = self.client.auth.get_user()
        except Exception:
            _logger.exception("Failed to resolve Supabase user")
            return None
        if response is None or response.user is None:
            return None
        return UUID(str(response.user.id))
