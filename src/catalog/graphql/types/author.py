"""
Author GraphQL type definitions
"""

import strawberry

from ...dbmodels import Authors


@strawberry.type
class Author:
    """Author type for GraphQL API."""

    id: strawberry.ID
    name: str
    born: int | None

    @strawberry.field
    async def book_count(self, info: strawberry.Info) -> int:
        """Number of books referencing this author, counted at read time."""
        from ..resolvers.author import resolve_author_book_count

        return await resolve_author_book_count(self, info)

    @classmethod
    def from_model(cls, author: Authors) -> "Author":
        return cls(id=strawberry.ID(str(author.id)), name=author.name, born=author.born)
