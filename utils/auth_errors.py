"""
Authentication error kinds.

Every failure the auth core can produce is one of the AuthErrorKind members.
Call sites raise AuthError(kind) and the Flask error handler in api.errors
renders it with the uniform envelope.
"""
from __future__ import annotations

from enum import Enum, unique


@unique
class AuthErrorKind(Enum):
    # (code, status, default message); codes keep members distinct when messages repeat
    MISSING_TOKEN = ("missing_token", 401, "No token provided")
    MALFORMED_TOKEN = ("malformed_token", 401, "No token provided")
    EXPIRED_TOKEN = ("expired_token", 401, "Token expired")
    INVALID_SIGNATURE = ("invalid_signature", 401, "Invalid token")
    USER_NOT_FOUND = ("user_not_found", 401, "User not found")
    REFRESH_MISMATCH = ("refresh_mismatch", 401, "Refresh token has been revoked")
    STORE_UNAVAILABLE = ("store_unavailable", 500, "Internal server error")

    def __init__(self, code: str, status: int, message: str):
        self.code = code
        self.status = status
        self.default_message = message


class AuthError(Exception):
    """Raised by the token service, the credential store and the auth decorators."""

    def __init__(self, kind: AuthErrorKind, message: str | None = None, status: int | None = None):
        self.kind = kind
        self.message = message or kind.default_message
        self.status = status or kind.status
        super().__init__(self.message)

    def __repr__(self):
        return f"<AuthError {self.kind.name} status={self.status}>"
