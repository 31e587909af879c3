from __future__ import annotations

from flask import Blueprint, request, g, abort

from api.errors import success_response
from models import storage
from models.credential_store import credential_store
from models.schemas.user import UserUpdateSchema, UserProfileOutSchema
from utils.decorators import authenticate
from utils.security import hash_password

bp = Blueprint("users", __name__)

user_update_schema = UserUpdateSchema()
user_profile_schema = UserProfileOutSchema()


@bp.get("/users/profile")
@authenticate
def get_profile():
    """
    Get current user profile
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    user = credential_store.find_user_by_id(g.current_user.id)
    if not user:
        abort(404, description="User not found")
    return success_response(user_profile_schema.dump(user))


@bp.put("/users/profile")
@authenticate
def update_profile():
    """
    Update current user profile (name, email, password)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             name: { type: string }
             email: { type: string }
             password: { type: string, minLength: 6 }
    responses:
      200: { description: Profile updated }
      401: { description: Unauthorized }
      409: { description: Email already in use }
      422: { description: Validation error }
    """
    data = user_update_schema.load(request.get_json(silent=True) or {})

    user = credential_store.find_user_by_id(g.current_user.id)
    if not user:
        abort(404, description="User not found")

    if "email" in data and data["email"] != user.email:
        if credential_store.find_user_by_email(data["email"]):
            abort(409, description="Email already in use")
        user.email = data["email"]
    if "name" in data:
        user.name = data["name"]
    if "password" in data:
        # one commit: the pending name/email changes are flushed with the new hash
        credential_store.update_password(user.id, hash_password(data["password"]))
    else:
        storage.new(user)
        storage.save()

    return success_response(user_profile_schema.dump(user), "Profile updated successfully")
