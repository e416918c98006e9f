from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy.exc import DataError, IntegrityError

from ...database.connection import get_async_session
from ...errors import ValidationError
from ...logging import get_logger
from ...notifications import BOOK_ADDED, get_notification_bus
from ...store import repository
from ..access_control import get_auth_context_from_info, require_current_user

if TYPE_CHECKING:
    from ..types.book import Book

logger = get_logger(__name__)


# Query resolvers
async def resolve_book_count(info: strawberry.Info) -> int:
    await get_auth_context_from_info(info)

    async with get_async_session() as session:
        return await repository.count_books(session)


async def resolve_all_books(
    info: strawberry.Info,
    author: str | None = None,
    genre: str | None = None,
) -> list[Book]:
    """
    List books, filtered by author name, genre membership, both, or neither.

    The author is expanded on every returned book regardless of filters.
    """
    await get_auth_context_from_info(info)

    from ..types.book import Book as BookType

    async with get_async_session() as session:
        books = await repository.find_books(session, author_name=author, genre=genre)
        return [BookType.from_model(book) for book in books]


async def resolve_all_favorite_books(info: strawberry.Info) -> list[Book]:
    """Books tagged with the current user's favorite genre."""
    current_user = await require_current_user(info, "allFavoriteBooks")
    if not current_user.favorite_genre:
        return []

    from ..types.book import Book as BookType

    async with get_async_session() as session:
        books = await repository.find_books(session, genre=current_user.favorite_genre)
        return [BookType.from_model(book) for book in books]


# Mutation resolvers
class AuthorInsertConflict(Exception):
    """Inserting a new author failed inside the add-book transaction."""

    def __init__(self, name: str, error: IntegrityError) -> None:
        super().__init__(name)
        self.name = name
        self.error = error


async def _store_book(title: str, author: str, published: int, genres: list[str]) -> Book:
    """Find or create the author and insert the book in one transaction."""
    from ..types.book import Book as BookType

    async with get_async_session() as session:
        author_row = await repository.find_author_by_name(session, author)
        if author_row is None:
            try:
                author_row = await repository.create_author(session, name=author)
            except IntegrityError as e:
                raise AuthorInsertConflict(author, e) from e
            logger.info("Author created", author_id=str(author_row.id), name=author)

        book_row = await repository.create_book(
            session,
            title=title,
            published=published,
            genres=genres,
            author=author_row,
        )
        return BookType.from_model(book_row)


async def add_book(
    info: strawberry.Info,
    title: str,
    author: str,
    published: int,
    genres: list[str],
) -> Book:
    """
    Add a book, creating its author on first mention.

    Author lookup/creation and the book insert share one transaction, so a
    failed insert never leaves a new author behind. If a concurrent request
    creates the same author first, the whole transaction runs once more and
    picks up the committed author. The expanded book is published on
    BOOK_ADDED once the transaction has committed.
    """
    current_user = await require_current_user(info, "addBook")
    args = {"title": title, "author": author, "published": published, "genres": genres}

    try:
        try:
            book = await _store_book(title, author, published, genres)
        except AuthorInsertConflict:
            logger.info("Author insert conflicted, retrying", name=author)
            book = await _store_book(title, author, published, genres)
    except AuthorInsertConflict as e:
        logger.warning("Adding book failed", error=str(e.error.orig), **args)
        raise ValidationError(
            str(e.error.orig), invalid_args=args, error=str(e.error.orig)
        ) from e
    except (IntegrityError, DataError) as e:
        logger.warning("Adding book failed", error=str(e.orig), **args)
        raise ValidationError(str(e.orig), invalid_args=args, error=str(e.orig)) from e

    logger.info(
        "Book added",
        book_id=book.id,
        author_id=book.author.id,
        user_id=str(current_user.id),
    )

    await get_notification_bus().publish(BOOK_ADDED, book)
    return book
