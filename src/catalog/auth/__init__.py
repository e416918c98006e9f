"""Authentication and authorization for the catalog."""

from .adapters.base import AuthAdapter, AuthenticationError, Principal
from .context import AuthContext, CurrentUser
from .factory import get_auth_adapter
from .middleware import get_auth_context

__all__ = [
    "AuthAdapter",
    "AuthenticationError",
    "Principal",
    "AuthContext",
    "CurrentUser",
    "get_auth_context",
    "get_auth_adapter",
]
