"""Tests for resolving request identity from the Authorization header."""

import uuid

import pytest

from catalog.auth.adapters.jwt import INVALID_TOKEN_MESSAGE
from catalog.auth.middleware import (
    SUBJECT_NOT_FOUND_MESSAGE,
    extract_bearer_token,
    get_auth_context,
)
from catalog.database.connection import get_async_session
from catalog.errors import AuthenticationError
from catalog.store import repository


class TestExtractBearerToken:
    """Test Authorization header parsing."""

    def test_absent_header(self):
        assert extract_bearer_token(None) is None

    def test_blank_header(self):
        assert extract_bearer_token("   ") is None

    def test_bearer_token(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_scheme_is_case_insensitive(self):
        assert extract_bearer_token("bearer abc") == "abc"
        assert extract_bearer_token("BEARER abc") == "abc"

    @pytest.mark.parametrize("header", ["Basic dXNlcjpwYXNz", "Bearer", "Bearer   ", "abc"])
    def test_malformed_header(self, header):
        with pytest.raises(AuthenticationError, match=INVALID_TOKEN_MESSAGE):
            extract_bearer_token(header)


class TestGetAuthContext:
    """Test identity resolution against the user store."""

    @pytest.mark.asyncio
    async def test_no_credentials_is_anonymous(self):
        context = await get_auth_context(None)

        assert context.user is None
        assert context.is_authenticated is False
        assert context.user_id is None

    @pytest.mark.asyncio
    async def test_valid_token_resolves_user(self, database, bearer_for):
        async with get_async_session() as session:
            user = await repository.create_user(
                session, username="alice", favorite_genre="refactoring"
            )

        context = await get_auth_context(await bearer_for(user.id))

        assert context.is_authenticated is True
        assert context.user is not None
        assert context.user.id == user.id
        assert context.user.username == "alice"
        assert context.user.favorite_genre == "refactoring"

    @pytest.mark.asyncio
    async def test_lowercase_scheme_resolves_user(self, database, bearer_for):
        async with get_async_session() as session:
            user = await repository.create_user(session, username="alice")

        header = await bearer_for(user.id)
        context = await get_auth_context("bearer " + header.split(" ", 1)[1])

        assert context.user_id == user.id

    @pytest.mark.asyncio
    async def test_invalid_token_raises(self, database):
        with pytest.raises(AuthenticationError, match=INVALID_TOKEN_MESSAGE):
            await get_auth_context("Bearer not-a-token")

    @pytest.mark.asyncio
    async def test_non_uuid_subject_raises(self, database, bearer_for):
        with pytest.raises(AuthenticationError, match=INVALID_TOKEN_MESSAGE):
            await get_auth_context(await bearer_for("not-a-uuid"))

    @pytest.mark.asyncio
    async def test_unknown_subject_raises(self, database, bearer_for):
        with pytest.raises(AuthenticationError, match=SUBJECT_NOT_FOUND_MESSAGE):
            await get_auth_context(await bearer_for(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_error_carries_unauthenticated_code(self):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_auth_context("Token abc")

        assert exc_info.value.extensions["code"] == "UNAUTHENTICATED"
