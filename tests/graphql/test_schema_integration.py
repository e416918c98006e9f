"""
Integration tests executing operations against the Strawberry schema
"""

import asyncio
from types import SimpleNamespace

import pytest

from catalog.graphql.resolvers.subscription import resolve_book_added
from catalog.graphql.schema import schema, validate_schema
from catalog.notifications import BOOK_ADDED, get_notification_bus

CREATE_USER = """
mutation CreateUser($username: String!, $favoriteGenre: String) {
  createUser(username: $username, favoriteGenre: $favoriteGenre) {
    id
    username
    favoriteGenre
  }
}
"""

LOGIN = """
mutation Login($username: String!, $password: String!) {
  login(username: $username, password: $password) {
    value
  }
}
"""

ADD_BOOK = """
mutation AddBook($title: String!, $author: String!, $published: Int!, $genres: [String!]!) {
  addBook(title: $title, author: $author, published: $published, genres: $genres) {
    id
    title
    published
    genres
    author {
      name
      born
      bookCount
    }
  }
}
"""

COUNTS = """
query Counts {
  bookCount
  authorCount
}
"""


def _context(authorization=None):
    headers = {"authorization": authorization} if authorization else {}
    return {"request": SimpleNamespace(headers=headers)}


async def _execute(query, variables=None, authorization=None):
    return await schema.execute(
        query,
        variable_values=variables,
        context_value=_context(authorization),
    )


async def _login(username="mluukkai", favorite_genre="scifi"):
    result = await _execute(
        CREATE_USER, {"username": username, "favoriteGenre": favorite_genre}
    )
    assert result.errors is None

    result = await _execute(LOGIN, {"username": username, "password": "secret"})
    assert result.errors is None
    return f"Bearer {result.data['login']['value']}"


def test_schema_is_valid():
    validate_schema()


class TestQueries:
    @pytest.mark.asyncio
    async def test_counts_on_empty_catalog(self, database):
        result = await _execute(COUNTS)

        assert result.errors is None
        assert result.data == {"bookCount": 0, "authorCount": 0}

    @pytest.mark.asyncio
    async def test_me_is_null_without_token(self, database):
        result = await _execute("query { me { username } }")

        assert result.errors is None
        assert result.data == {"me": None}

    @pytest.mark.asyncio
    async def test_invalid_token_fails_the_request(self, database):
        result = await _execute(COUNTS, authorization="Bearer garbage")

        assert result.errors
        assert {error.extensions["code"] for error in result.errors} == {"UNAUTHENTICATED"}


class TestMutations:
    @pytest.mark.asyncio
    async def test_add_book_requires_authentication(self, database):
        result = await _execute(
            ADD_BOOK,
            {"title": "Dune", "author": "Frank Herbert", "published": 1965, "genres": ["scifi"]},
        )

        assert result.data == {"addBook": None}
        assert result.errors[0].message == "Not authenticated"
        assert result.errors[0].extensions["code"] == "UNAUTHENTICATED"

    @pytest.mark.asyncio
    async def test_add_book_scenario(self, database):
        """A logged-in user adds a book by a new author and a subscriber sees it once."""
        authorization = await _login()
        subscription = get_notification_bus().subscribe(BOOK_ADDED)

        result = await _execute(
            ADD_BOOK,
            {"title": "Dune", "author": "Frank Herbert", "published": 1965, "genres": ["scifi"]},
            authorization=authorization,
        )

        assert result.errors is None
        book = result.data["addBook"]
        assert book["title"] == "Dune"
        assert book["genres"] == ["scifi"]
        assert book["author"] == {"name": "Frank Herbert", "born": None, "bookCount": 1}

        counts = await _execute(COUNTS)
        assert counts.data == {"bookCount": 1, "authorCount": 1}

        assert subscription.pending() == 1
        event = await subscription.get()
        assert event.payload.title == "Dune"
        assert event.payload.author.name == "Frank Herbert"

        favorites = await _execute(
            "query { allFavoriteBooks { title } }", authorization=authorization
        )
        assert favorites.data == {"allFavoriteBooks": [{"title": "Dune"}]}

    @pytest.mark.asyncio
    async def test_add_book_validation_error(self, database):
        authorization = await _login()

        result = await _execute(
            ADD_BOOK,
            {"title": "", "author": "Frank Herbert", "published": 1965, "genres": []},
            authorization=authorization,
        )

        assert result.data == {"addBook": None}
        error = result.errors[0]
        assert error.extensions["code"] == "BAD_USER_INPUT"
        assert error.extensions["invalidArgs"]["author"] == "Frank Herbert"

        counts = await _execute(COUNTS)
        assert counts.data == {"bookCount": 0, "authorCount": 0}

    @pytest.mark.asyncio
    async def test_edit_author(self, database):
        authorization = await _login()
        await _execute(
            ADD_BOOK,
            {"title": "Dune", "author": "Frank Herbert", "published": 1965, "genres": ["scifi"]},
            authorization=authorization,
        )

        edit = """
        mutation Edit($name: String!, $born: Int!) {
          editAuthor(name: $name, setBornTo: $born) { name born }
        }
        """
        result = await _execute(
            edit, {"name": "Frank Herbert", "born": 1920}, authorization=authorization
        )
        missing = await _execute(
            edit, {"name": "Nobody", "born": 1920}, authorization=authorization
        )

        assert result.data == {"editAuthor": {"name": "Frank Herbert", "born": 1920}}
        assert missing.errors is None
        assert missing.data == {"editAuthor": None}

    @pytest.mark.asyncio
    async def test_wrong_credentials(self, database):
        result = await _execute(LOGIN, {"username": "nobody", "password": "secret"})

        assert result.data == {"login": None}
        assert result.errors[0].message == "Wrong credentials"


class TestBookAddedSubscription:
    @pytest.mark.asyncio
    async def test_stream_yields_added_books_and_unsubscribes(self, database):
        bus = get_notification_bus()
        authorization = await _login()
        books = resolve_book_added()

        next_book = asyncio.ensure_future(books.__anext__())
        for _ in range(10):
            if bus.subscriber_count(BOOK_ADDED):
                break
            await asyncio.sleep(0)
        assert bus.subscriber_count(BOOK_ADDED) == 1

        await _execute(
            ADD_BOOK,
            {"title": "Dune", "author": "Frank Herbert", "published": 1965, "genres": ["scifi"]},
            authorization=authorization,
        )

        book = await asyncio.wait_for(next_book, timeout=1)
        await books.aclose()

        assert book.title == "Dune"
        assert bus.subscriber_count(BOOK_ADDED) == 0


class TestAllBooksArguments:
    @pytest.mark.asyncio
    async def test_author_name_synonym(self, database):
        authorization = await _login()
        for title, author in (("Dune", "Frank Herbert"), ("Clean Code", "Robert Martin")):
            await _execute(
                ADD_BOOK,
                {"title": title, "author": author, "published": 1965, "genres": ["scifi"]},
                authorization=authorization,
            )

        by_author = await _execute('query { allBooks(author: "Frank Herbert") { title } }')
        by_author_name = await _execute(
            'query { allBooks(authorName: "Frank Herbert", genre: "scifi") { title author { name } } }'
        )

        assert by_author.data == {"allBooks": [{"title": "Dune"}]}
        assert by_author_name.data == {
            "allBooks": [{"title": "Dune", "author": {"name": "Frank Herbert"}}]
        }

    @pytest.mark.asyncio
    async def test_genre_on_empty_catalog(self, database):
        result = await _execute('query { allBooks(genre: "fantasy") { title } }')

        assert result.errors is None
        assert result.data == {"allBooks": []}
