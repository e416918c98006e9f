"""
Shared access control logic for GraphQL resolvers
"""

from typing import Any

import strawberry

from ..auth.context import AuthContext, CurrentUser
from ..auth.middleware import get_auth_context
from ..errors import AuthenticationError
from ..logging import get_logger

logger = get_logger(__name__)

NOT_AUTHENTICATED_MESSAGE = "Not authenticated"

_AUTH_CONTEXT_KEY = "auth_context"


def get_authorization(context: dict[str, Any]) -> str | None:
    """Find the Authorization value for a request or websocket connection."""
    request = context.get("request")
    if request is not None:
        authorization = request.headers.get("authorization")
        if authorization:
            return authorization

    # graphql-transport-ws clients send credentials in connection_init
    params = context.get("connection_params") or {}
    if isinstance(params, dict):
        return params.get("Authorization") or params.get("authorization")

    return None


async def get_auth_context_from_info(info: strawberry.Info) -> AuthContext:
    """
    Resolve the auth context for the current request, once per request.

    A request without credentials gets an anonymous context. A supplied
    credential that fails verification raises AuthenticationError on every
    field of the request, public ones included.
    """
    context = info.context
    cached = context.get(_AUTH_CONTEXT_KEY)
    if isinstance(cached, AuthContext):
        return cached

    auth_context = await get_auth_context(get_authorization(context))
    context[_AUTH_CONTEXT_KEY] = auth_context
    return auth_context


async def require_current_user(info: strawberry.Info, action: str) -> CurrentUser:
    """Return the authenticated user or raise AuthenticationError."""
    auth_context = await get_auth_context_from_info(info)
    if not auth_context.is_authenticated or auth_context.user is None:
        logger.info("Unauthenticated access rejected", action=action)
        raise AuthenticationError(NOT_AUTHENTICATED_MESSAGE)
    return auth_context.user
