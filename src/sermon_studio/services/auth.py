"""Resolution of the currently authenticated principal."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID


class PrincipalProvider(Protocol):
    """Interface for looking up the signed-in user."""

    def current_user_id(self) -> UUID | None:
        """Return the signed-in user's id, or None when anonymous."""


@dataclass
class StaticPrincipal(PrincipalProvider):
    """Principal fixed at construction time (server-side sessions, tests)."""

    user_id: UUID | None = None

    def current_user_id(self) -> UUID | None:
        """Return the configured user id."""
        return self.user_id
