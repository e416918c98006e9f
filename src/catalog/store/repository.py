"""Repository helpers for authors, books and users."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..dbmodels import Authors, BookGenres, Books, Users


# Counts
async def count_books(session: AsyncSession) -> int:
    res = await session.execute(select(func.count()).select_from(Books))
    return res.scalar_one()


async def count_authors(session: AsyncSession) -> int:
    res = await session.execute(select(func.count()).select_from(Authors))
    return res.scalar_one()


async def count_books_by_author(session: AsyncSession, author_id: UUID) -> int:
    stmt = select(func.count()).select_from(Books).where(Books.author_id == author_id)
    res = await session.execute(stmt)
    return res.scalar_one()


# Authors
async def list_authors(session: AsyncSession) -> list[Authors]:
    res = await session.execute(select(Authors).order_by(Authors.created_at, Authors.name))
    return list(res.scalars().all())


async def get_author(session: AsyncSession, author_id: UUID) -> Authors | None:
    res = await session.execute(select(Authors).where(Authors.id == author_id))
    return res.scalar_one_or_none()


async def find_author_by_name(session: AsyncSession, name: str) -> Authors | None:
    res = await session.execute(select(Authors).where(Authors.name == name))
    return res.scalar_one_or_none()


async def create_author(session: AsyncSession, *, name: str, born: int | None = None) -> Authors:
    author = Authors(name=name, born=born)
    session.add(author)
    await session.flush()
    return author


async def set_author_born(session: AsyncSession, author: Authors, born: int) -> Authors:
    author.born = born
    await session.flush()
    return author


# Books
async def find_books(
    session: AsyncSession,
    *,
    author_name: str | None = None,
    genre: str | None = None,
) -> list[Books]:
    """List books, optionally narrowed to one author's name and/or one genre."""
    stmt = select(Books).options(
        selectinload(Books.author),
        selectinload(Books.genre_entries),
    )

    if author_name is not None:
        stmt = stmt.join(Books.author).where(Authors.name == author_name)

    if genre is not None:
        tagged = select(BookGenres.book_id).where(BookGenres.genre == genre)
        stmt = stmt.where(Books.id.in_(tagged))

    res = await session.execute(stmt.order_by(Books.created_at, Books.title))
    return list(res.scalars().all())


async def get_book(session: AsyncSession, book_id: UUID) -> Books:
    stmt = (
        select(Books)
        .where(Books.id == book_id)
        .options(selectinload(Books.author), selectinload(Books.genre_entries))
        .execution_options(populate_existing=True)
    )
    res = await session.execute(stmt)
    return res.scalar_one()


async def create_book(
    session: AsyncSession,
    *,
    title: str,
    published: int,
    genres: list[str],
    author: Authors,
) -> Books:
    book = Books(title=title, published=published, author_id=author.id)
    book.genre_entries = [
        BookGenres(position=position, genre=genre) for position, genre in enumerate(genres)
    ]
    session.add(book)
    await session.flush()
    return await get_book(session, book.id)


# Users
async def create_user(
    session: AsyncSession, *, username: str, favorite_genre: str | None = None
) -> Users:
    user = Users(username=username, favorite_genre=favorite_genre)
    session.add(user)
    await session.flush()
    return user


async def get_user(session: AsyncSession, user_id: UUID) -> Users | None:
    res = await session.execute(select(Users).where(Users.id == user_id))
    return res.scalar_one_or_none()


async def find_user_by_username(session: AsyncSession, username: str) -> Users | None:
    res = await session.execute(select(Users).where(Users.username == username))
    return res.scalar_one_or_none()
