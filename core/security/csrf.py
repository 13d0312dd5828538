"""
Double-submit cookie CSRF tokens.

The token is set in a readable cookie; browsers echo it back in the
X-CSRF-Token header on state-changing requests.
"""

import hmac
import secrets

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "x-csrf-token"
CSRF_COOKIE_MAX_AGE = 60 * 60 * 24
CSRF_PROTECTED_METHODS = frozenset({"POST", "PUT", "DELETE", "PATCH"})


def generate_csrf_token() -> str:
    """32 random bytes, hex encoded."""
    return secrets.token_hex(32)


def tokens_match(cookie_token: str | None, header_token: str | None) -> bool:
    """Constant-time comparison; missing or empty values never match."""
    if not cookie_token or not header_token:
        return False
    return hmac.compare_digest(cookie_token.encode(), header_token.encode())


__all__ = [
    "CSRF_COOKIE_NAME",
    "CSRF_HEADER_NAME",
    "CSRF_COOKIE_MAX_AGE",
    "CSRF_PROTECTED_METHODS",
    "generate_csrf_token",
    "tokens_match",
]
