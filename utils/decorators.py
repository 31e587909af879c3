"""
Route guards.

- authenticate: Bearer access token required; resolves g.current_user
- verify_refresh_token: refreshToken in the JSON body must verify AND equal
  the user's stored refresh token
- optional_auth: resolves g.current_user when it can, never rejects

g.current_user is an Identity (id, email, name); the password hash and the
stored refresh token are never attached to the request.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps

from flask import request, g

from models.credential_store import credential_store
from utils.auth_errors import AuthError, AuthErrorKind
from utils.tokens import get_token_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    id: str
    email: str
    name: str | None = None

    @classmethod
    def from_user(cls, user) -> "Identity":
        return cls(id=user.id, email=user.email, name=user.name)


def _bearer_token() -> str:
    auth = request.headers.get("Authorization")
    if auth is None:
        raise AuthError(AuthErrorKind.MISSING_TOKEN)
    scheme, _, token = auth.partition(" ")
    token = token.strip()
    if scheme != "Bearer" or not token:
        raise AuthError(AuthErrorKind.MALFORMED_TOKEN)
    return token


def _resolve_identity() -> Identity:
    token = _bearer_token()
    decoded = get_token_service().verify_access_token(token)
    user = credential_store.find_user_by_id(decoded["sub"])
    if not user:
        raise AuthError(AuthErrorKind.USER_NOT_FOUND)
    return Identity.from_user(user)


def authenticate(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            g.current_user = _resolve_identity()
        except AuthError as err:
            if err.kind is not AuthErrorKind.STORE_UNAVAILABLE:
                logger.info("Rejected %s %s: %s", request.method, request.path, err.kind.name)
            raise
        return fn(*args, **kwargs)

    return wrapper


def verify_refresh_token(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        payload = request.get_json(silent=True) or {}
        token = payload.get("refreshToken") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthError(AuthErrorKind.MISSING_TOKEN, "Refresh token is required", 400)

        try:
            decoded = get_token_service().verify_refresh_token(token)
        except AuthError as err:
            logger.info("Rejected refresh: %s", err.kind.name)
            if err.kind is AuthErrorKind.EXPIRED_TOKEN:
                raise AuthError(err.kind, "Refresh token expired")
            raise AuthError(err.kind, "Invalid refresh token")

        user = credential_store.find_user_by_id_and_refresh_token(decoded["sub"], token)
        if not user:
            logger.info("Rejected refresh: stored token mismatch for %s", decoded["sub"])
            raise AuthError(AuthErrorKind.REFRESH_MISMATCH)

        g.current_user = Identity.from_user(user)
        g.refresh_token = token
        return fn(*args, **kwargs)

    return wrapper


def optional_auth(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            g.current_user = _resolve_identity()
        except AuthError as err:
            logger.debug("Optional auth skipped: %s", err.kind.name)
            g.current_user = None
        return fn(*args, **kwargs)

    return wrapper
