"""Login credential verification."""

from __future__ import annotations

import hmac

from ..config import get_login_password


def verify_password(password: str) -> bool:
    """Check ``password`` against the shared verification value in constant time."""
    expected = get_login_password()
    return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))
