"""
Domain errors reported through the GraphQL ``errors`` array.

Both classes subclass ``GraphQLError`` so their ``extensions`` survive
Strawberry's error formatting and clients can branch on ``extensions.code``.
"""

from __future__ import annotations

from typing import Any

from graphql import GraphQLError


class CatalogError(GraphQLError):
    """Base class for errors raised at the resolver boundary."""

    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, **extensions: Any) -> None:
        super().__init__(message, extensions={"code": self.code, **extensions})


class AuthenticationError(CatalogError):
    """Missing, invalid or expired credential, or a failed login."""

    code = "UNAUTHENTICATED"


class ValidationError(CatalogError):
    """Store constraint violation or malformed input on a write."""

    code = "BAD_USER_INPUT"

    def __init__(
        self,
        message: str,
        invalid_args: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        extensions: dict[str, Any] = {"invalidArgs": invalid_args or {}}
        if error is not None:
            extensions["error"] = error
        super().__init__(message, **extensions)

    @property
    def invalid_args(self) -> dict[str, Any]:
        return (self.extensions or {}).get("invalidArgs", {})
