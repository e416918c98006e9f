from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy.exc import DataError, IntegrityError

from ...database.connection import get_async_session
from ...errors import ValidationError
from ...logging import get_logger
from ...store import repository
from ..access_control import get_auth_context_from_info, require_current_user

if TYPE_CHECKING:
    from ..types.author import Author

logger = get_logger(__name__)


# Query resolvers
async def resolve_author_count(info: strawberry.Info) -> int:
    await get_auth_context_from_info(info)

    async with get_async_session() as session:
        return await repository.count_authors(session)


async def resolve_all_authors(info: strawberry.Info) -> list[Author]:
    await get_auth_context_from_info(info)

    from ..types.author import Author as AuthorType

    async with get_async_session() as session:
        authors = await repository.list_authors(session)
        return [AuthorType.from_model(author) for author in authors]


async def resolve_author_book_count(author: Author, info: strawberry.Info) -> int:
    """Count books for one author at read time; never cached."""
    async with get_async_session() as session:
        return await repository.count_books_by_author(session, UUID(str(author.id)))


# Mutation resolvers
async def edit_author(info: strawberry.Info, name: str, set_born_to: int) -> Author | None:
    """
    Set an author's birth year.

    Returns None when no author has that name; that is not an error.
    """
    current_user = await require_current_user(info, "editAuthor")
    args = {"name": name, "setBornTo": set_born_to}

    from ..types.author import Author as AuthorType

    try:
        async with get_async_session() as session:
            author = await repository.find_author_by_name(session, name)
            if author is None:
                logger.info("Author not found for edit", name=name)
                return None

            author = await repository.set_author_born(session, author, set_born_to)
            result = AuthorType.from_model(author)
    except (IntegrityError, DataError) as e:
        logger.warning("Editing author failed", error=str(e.orig), **args)
        raise ValidationError(str(e.orig), invalid_args=args, error=str(e.orig)) from e

    logger.info(
        "Author edited",
        author_id=result.id,
        born=set_born_to,
        user_id=str(current_user.id),
    )
    return result
