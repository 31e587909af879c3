"""
Token service:
- access tokens: short-lived, signed with JWT_ACCESS_SECRET
- refresh tokens: long-lived, signed with JWT_REFRESH_SECRET

The two secrets are independent so a leaked key of one class cannot forge
tokens of the other. Settings are read once when the app is created and
never mutated afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, NamedTuple

import jwt
from flask import current_app

from utils.auth_errors import AuthError, AuthErrorKind
from utils.security import generate_jti

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True)
class TokenSettings:
    access_secret: str
    refresh_secret: str
    access_expires: timedelta = timedelta(minutes=15)
    refresh_expires: timedelta = timedelta(days=7)
    algorithm: str = "HS256"
    issuer: str = "game-catalog-api"

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TokenSettings":
        return cls(
            access_secret=config["JWT_ACCESS_SECRET"],
            refresh_secret=config["JWT_REFRESH_SECRET"],
            access_expires=config.get("ACCESS_TOKEN_EXPIRES", timedelta(minutes=15)),
            refresh_expires=config.get("REFRESH_TOKEN_EXPIRES", timedelta(days=7)),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            issuer=config.get("JWT_ISSUER", "game-catalog-api"),
        )


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str

    def to_dict(self) -> Dict[str, str]:
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}


class TokenService:
    def __init__(self, settings: TokenSettings):
        self.settings = settings

    def _secret(self, token_type: str) -> str:
        if token_type == ACCESS:
            return self.settings.access_secret
        return self.settings.refresh_secret

    def _issue(self, user_id: str, token_type: str, expires: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "iss": self.settings.issuer,
            "sub": str(user_id),
            "iat": now,
            "exp": now + expires,
            "type": token_type,
            "jti": generate_jti(),
        }
        return jwt.encode(payload, self._secret(token_type), algorithm=self.settings.algorithm)

    def _verify(self, token: str, token_type: str) -> Dict[str, Any]:
        try:
            decoded = jwt.decode(
                token,
                self._secret(token_type),
                algorithms=[self.settings.algorithm],
                issuer=self.settings.issuer,
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthError(AuthErrorKind.EXPIRED_TOKEN)
        except jwt.InvalidTokenError:
            raise AuthError(AuthErrorKind.INVALID_SIGNATURE)

        if decoded.get("type") != token_type:
            raise AuthError(AuthErrorKind.INVALID_SIGNATURE)
        return decoded

    def issue_access_token(self, user_id: str) -> str:
        return self._issue(user_id, ACCESS, self.settings.access_expires)

    def issue_refresh_token(self, user_id: str) -> str:
        return self._issue(user_id, REFRESH, self.settings.refresh_expires)

    def issue_token_pair(self, user_id: str) -> TokenPair:
        return TokenPair(self.issue_access_token(user_id), self.issue_refresh_token(user_id))

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        """
        Decode an access token. Raises AuthError(EXPIRED_TOKEN) once the expiry
        has elapsed and AuthError(INVALID_SIGNATURE) for anything else.
        """
        return self._verify(token, ACCESS)

    def verify_refresh_token(self, token: str) -> Dict[str, Any]:
        return self._verify(token, REFRESH)


def get_token_service() -> TokenService:
    """Token service bound to the current app (built once in create_app)."""
    return current_app.extensions["token_service"]
