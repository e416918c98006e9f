"""Authentication context for request handling."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ..dbmodels import Users
from .adapters.base import Principal


@dataclass(frozen=True)
class CurrentUser:
    """Snapshot of the user a request is acting as."""

    id: UUID
    username: str
    favorite_genre: str | None

    @classmethod
    def from_model(cls, user: Users) -> CurrentUser:
        return cls(id=user.id, username=user.username, favorite_genre=user.favorite_genre)


@dataclass
class AuthContext:
    """Runtime authentication context for a request."""

    user: CurrentUser | None
    principal: Principal | None
    token: str | None

    @classmethod
    def anonymous(cls) -> AuthContext:
        return cls(user=None, principal=None, token=None)

    @property
    def is_authenticated(self) -> bool:
        """Check if the request is authenticated."""
        return self.user is not None and self.principal is not None

    @property
    def user_id(self) -> UUID | None:
        return self.user.id if self.user else None
