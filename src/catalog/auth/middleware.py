"""Resolve the identity behind an Authorization header."""

from __future__ import annotations

from uuid import UUID

from ..database.connection import get_async_session
from ..logging import bind_user, get_logger
from ..store import repository
from .adapters.base import AuthenticationError
from .adapters.jwt import INVALID_TOKEN_MESSAGE
from .context import AuthContext, CurrentUser
from .factory import get_auth_adapter

logger = get_logger(__name__)

BEARER_SCHEME = "bearer"
SUBJECT_NOT_FOUND_MESSAGE = "Subject not found"


def extract_bearer_token(authorization: str | None) -> str | None:
    """
    Pull the token out of an Authorization header value.

    Returns None when no credential was supplied. The scheme is matched
    case-insensitively; any other shape raises AuthenticationError.
    """
    if authorization is None or not authorization.strip():
        return None

    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token:
        logger.warning("Invalid authorization format received")
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)

    return token


async def get_auth_context(authorization: str | None) -> AuthContext:
    """
    Extract authentication context from the Authorization header.

    This function:
    1. Extracts the Bearer token (absent header means anonymous)
    2. Verifies signature and expiry with the configured adapter
    3. Loads the user named by the token subject
    4. Returns AuthContext for the request

    Raises:
        AuthenticationError: A credential was supplied but is invalid, expired,
            or names a user that no longer exists.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        return AuthContext.anonymous()

    adapter = get_auth_adapter()
    principal = await adapter.verify_token(token)

    try:
        user_id = UUID(principal["subject"])
    except ValueError as e:
        logger.warning("Token subject is not a user id", subject=principal["subject"])
        raise AuthenticationError(INVALID_TOKEN_MESSAGE) from e

    async with get_async_session() as session:
        user = await repository.get_user(session, user_id)

    if user is None:
        logger.warning("Token subject not found", user_id=str(user_id))
        raise AuthenticationError(SUBJECT_NOT_FOUND_MESSAGE)

    bind_user(str(user.id))
    logger.debug("Request authenticated", user_id=str(user.id), username=user.username)

    return AuthContext(user=CurrentUser.from_model(user), principal=principal, token=token)
