"""Authentication adapters."""

from .base import AuthAdapter, Principal
from .jwt import JWTAuthAdapter

__all__ = [
    "AuthAdapter",
    "Principal",
    "JWTAuthAdapter",
]
