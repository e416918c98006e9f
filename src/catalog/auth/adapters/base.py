"""Base authentication adapter interface and types."""

from __future__ import annotations

from typing import Literal, NotRequired, Protocol, TypedDict
from uuid import UUID

from ...errors import AuthenticationError


class Principal(TypedDict):
    """Identity extracted from an incoming token."""

    provider: Literal["jwt"]
    subject: str  # user id (sub)
    username: NotRequired[str]
    claims: NotRequired[dict]


class AuthAdapter(Protocol):
    """Token verification and issuance interface."""

    async def verify_token(self, token: str) -> Principal:
        """
        Verify a token and return the principal identity.

        Raises:
            AuthenticationError: If token is invalid or expired
        """
        ...

    async def issue_token(self, user_id: UUID, claims: dict | None = None) -> str:
        """Issue a new signed token for ``user_id``."""
        ...


__all__ = ["AuthAdapter", "AuthenticationError", "Principal"]
