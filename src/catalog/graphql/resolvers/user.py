from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy.exc import DataError, IntegrityError

from ...auth.credentials import verify_password
from ...auth.factory import get_auth_adapter
from ...database.connection import get_async_session
from ...errors import AuthenticationError, ValidationError
from ...logging import get_logger
from ...store import repository
from ..access_control import get_auth_context_from_info

if TYPE_CHECKING:
    from ..types.user import Token, User

logger = get_logger(__name__)

WRONG_CREDENTIALS_MESSAGE = "Wrong credentials"


async def resolve_current_user(info: strawberry.Info) -> User | None:
    from ..types.user import User as UserType

    auth_context = await get_auth_context_from_info(info)
    if auth_context.user is None:
        return None
    return UserType.from_model(auth_context.user)


async def create_user(
    info: strawberry.Info, username: str, favorite_genre: str | None = None
) -> User:
    await get_auth_context_from_info(info)
    args = {"username": username, "favoriteGenre": favorite_genre}

    from ..types.user import User as UserType

    try:
        async with get_async_session() as session:
            user = await repository.create_user(
                session, username=username, favorite_genre=favorite_genre
            )
            result = UserType.from_model(user)
    except (IntegrityError, DataError) as e:
        logger.warning("Creating user failed", error=str(e.orig), username=username)
        raise ValidationError(
            "Creating the user failed", invalid_args=args, error=str(e.orig)
        ) from e

    logger.info("User created", user_id=result.id, username=username)
    return result


async def login(info: strawberry.Info, username: str, password: str) -> Token:
    """
    Exchange username and password for a signed token.

    Unknown usernames and wrong passwords raise the same error so callers
    cannot tell which part was wrong.
    """
    await get_auth_context_from_info(info)

    from ..types.user import Token as TokenType

    async with get_async_session() as session:
        user = await repository.find_user_by_username(session, username)

    if user is None or not verify_password(password):
        logger.info("Login rejected", username=username)
        raise AuthenticationError(WRONG_CREDENTIALS_MESSAGE)

    adapter = get_auth_adapter()
    token = await adapter.issue_token(user.id, claims={"username": user.username})

    logger.info("Token issued", user_id=str(user.id))
    return TokenType(value=token)
