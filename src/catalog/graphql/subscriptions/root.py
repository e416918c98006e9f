"""
Root GraphQL subscription definitions
"""

from collections.abc import AsyncGenerator
from contextlib import aclosing

import strawberry

from ..types.book import Book


@strawberry.type
class Subscription:
    """Root GraphQL subscription type."""

    @strawberry.subscription
    async def book_added(self) -> AsyncGenerator[Book, None]:
        """Every book added while the subscription is open."""
        from ..resolvers.subscription import resolve_book_added

        async with aclosing(resolve_book_added()) as books:
            async for book in books:
                yield book
