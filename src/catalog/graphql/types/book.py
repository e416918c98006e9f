"""
Book GraphQL type definitions
"""

import strawberry

from ...dbmodels import Books
from .author import Author


@strawberry.type
class Book:
    """Book type for GraphQL API. The author reference is always expanded."""

    id: strawberry.ID
    title: str
    published: int
    genres: list[str]
    author: Author

    @classmethod
    def from_model(cls, book: Books) -> "Book":
        return cls(
            id=strawberry.ID(str(book.id)),
            title=book.title,
            published=book.published,
            genres=book.genres,
            author=Author.from_model(book.author),
        )
