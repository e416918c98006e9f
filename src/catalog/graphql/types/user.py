"""
User GraphQL type definitions
"""

import strawberry

from ...auth.context import CurrentUser
from ...dbmodels import Users


@strawberry.type
class User:
    """User type for GraphQL API."""

    id: strawberry.ID
    username: str
    favorite_genre: str | None

    @classmethod
    def from_model(cls, user: Users | CurrentUser) -> "User":
        return cls(
            id=strawberry.ID(str(user.id)),
            username=user.username,
            favorite_genre=user.favorite_genre,
        )


@strawberry.type
class Token:
    """Signed bearer credential issued by login."""

    value: str
