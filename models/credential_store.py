"""
Credential store: the only code that reads or writes User credentials
(password hash and the single stored refresh token).

Database failures other than integrity violations are rolled back and
surfaced as AuthError(STORE_UNAVAILABLE) so the API answers 500 without
leaking driver details. Integrity errors (duplicate email) propagate to the
global IntegrityError handler.
"""
from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import storage
from models.user import User
from utils.auth_errors import AuthError, AuthErrorKind
from utils.tokens import TokenPair

logger = logging.getLogger(__name__)


def _store_call(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            logger.exception("Credential store failure in %s", fn.__name__)
            storage.rollback()
            raise AuthError(AuthErrorKind.STORE_UNAVAILABLE) from exc

    return wrapper


class CredentialStore:

    @_store_call
    def find_user_by_id(self, user_id: str) -> Optional[User]:
        return storage.get(User, user_id)

    @_store_call
    def find_user_by_email(self, email: str) -> Optional[User]:
        session = storage.get_session()
        return session.query(User).filter(User.email == email).first()

    @_store_call
    def find_user_by_id_and_refresh_token(self, user_id: str, refresh_token: str) -> Optional[User]:
        """None when the user is gone or the stored token differs (NULL included)."""
        session = storage.get_session()
        return (
            session.query(User)
            .filter(User.id == user_id, User.refresh_token == refresh_token)
            .first()
        )

    def create_user(self, email: str, password_hash: str, name: str | None, tokens_for) -> tuple[User, TokenPair]:
        """
        Insert the user and its first refresh token in one commit.
        tokens_for(user_id) mints the pair; nothing is returned if the commit fails.
        """
        user = User(email=email, password_hash=password_hash, name=name)
        tokens = tokens_for(user.id)
        user.refresh_token = tokens.refresh_token
        self._persist(user)
        return user, tokens

    @_store_call
    def _persist(self, user: User) -> None:
        storage.new(user)
        storage.save()

    @_store_call
    def update_stored_refresh_token(self, user_id: str, refresh_token: str | None,
                                    expected: str | None = None) -> bool:
        """
        Set (or clear, with None) the stored refresh token.
        With `expected`, only swap when the stored value still equals it;
        returns False if another writer got there first.
        """
        session = storage.get_session()
        stmt = update(User).where(User.id == user_id)
        if expected is not None:
            stmt = stmt.where(User.refresh_token == expected)
        result = session.execute(stmt.values(refresh_token=refresh_token))
        storage.save()
        return result.rowcount == 1

    @_store_call
    def update_password(self, user_id: str, password_hash: str) -> None:
        user = storage.get(User, user_id)
        if user is None:
            raise AuthError(AuthErrorKind.USER_NOT_FOUND)
        user.password_hash = password_hash
        storage.new(user)
        storage.save()


credential_store = CredentialStore()
