"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and long-lived refresh tokens, each class
  signed with its own secret (utils.tokens)
- Keeps exactly one refresh token per user on the users row; refreshing
  rotates it, logout clears it
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, g, abort

from api.errors import success_response
from models.credential_store import credential_store
from models.schemas.user import UserCreateSchema, UserLoginSchema, UserOutSchema
from utils.auth_errors import AuthError, AuthErrorKind
from utils.decorators import authenticate, verify_refresh_token
from utils.security import hash_password, verify_password
from utils.tokens import get_token_service

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)

user_create_schema = UserCreateSchema()
user_login_schema = UserLoginSchema()
user_out_schema = UserOutSchema()


@bp.post("/register")
def register():
    """
    Register a new user and open its session.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password]
          properties:
            email: { type: string }
            password: { type: string, minLength: 6 }
            name: { type: string }
    responses:
      201:
        description: Created (returns user and token pair)
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)

    if credential_store.find_user_by_email(data["email"]):
        abort(409, description="User already exists")

    user, tokens = credential_store.create_user(
        email=data["email"],
        password_hash=hash_password(data["password"]),
        name=data.get("name"),
        tokens_for=get_token_service().issue_token_pair,
    )
    logger.info("Registered user %s", user.id)

    return success_response(
        {"user": user_out_schema.dump(user), **tokens.to_dict()},
        "User registered successfully",
        201,
    )


@bp.post("/login")
def login():
    """
    Login: returns accessToken and refreshToken
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid credentials
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)

    user = credential_store.find_user_by_email(data["email"])
    if not user or not verify_password(data["password"], user.password_hash):
        abort(401, description="Invalid credentials")

    tokens = get_token_service().issue_token_pair(user.id)
    # Replaces whatever session the user had before
    credential_store.update_stored_refresh_token(user.id, tokens.refresh_token)

    return success_response(
        {"user": user_out_schema.dump(user), **tokens.to_dict()},
        "Login successful",
    )


@bp.post("/refresh")
@verify_refresh_token
def refresh():
    """
    Use a refresh token to obtain a new access/refresh pair (rotation).
    The presented refresh token stops working once this returns.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [refreshToken]
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: New token pair
      400:
        description: Refresh token is required
      401:
        description: Refresh token expired, invalid or revoked
    """
    identity = g.current_user
    tokens = get_token_service().issue_token_pair(identity.id)

    swapped = credential_store.update_stored_refresh_token(
        identity.id, tokens.refresh_token, expected=g.refresh_token
    )
    if not swapped:
        # A concurrent refresh or logout won the race
        raise AuthError(AuthErrorKind.REFRESH_MISMATCH)

    return success_response(tokens.to_dict(), "Tokens refreshed successfully")


@bp.post("/logout")
@authenticate
def logout():
    """
    Logout: clears the stored refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out
      401:
        description: Unauthorized
    """
    credential_store.update_stored_refresh_token(g.current_user.id, None)
    return success_response(None, "Logged out successfully")
