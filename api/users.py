from __future__ import annotations

import logging

from flask import Blueprint, abort, g
from sqlalchemy import or_

from api import get_refresh_tokens, get_storage
from api.responses import load_json, retrieved, success
from models.schemas.user import PasswordChangeRequest, PasswordChangeSchema, UserOutSchema, UserUpdateSchema
from models.user import User
from utils.decorators import jwt_required
from utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__)

user_out_schema = UserOutSchema()
user_update_schema = UserUpdateSchema()
password_change_schema = PasswordChangeSchema()


@bp.get("/me")
@jwt_required()
def me():
    """
    Get current user info
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
    return retrieved({"user": user_out_schema.dump(g.current_user)})


@bp.patch("/me")
@jwt_required()
def update_me():
    """
    Update username and/or email
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
             username: { type: string, minLength: 3, maxLength: 50 }
             email: { type: string, format: email }
    responses:
      200: { description: Updated }
      400: { description: Validation error }
      409: { description: Username or email already exists }
    """
    data = load_json(user_update_schema, "Invalid user data")
    user = g.current_user
    storage = get_storage()

    clashes = []
    if "username" in data:
        clashes.append(User.username == data["username"])
    if "email" in data:
        clashes.append(User.email == data["email"])
    taken = storage.get_session().query(User).filter(User.id != user.id, or_(*clashes)).first()
    if taken:
        abort(409, description="Username or email already exists")

    for key, value in data.items():
        setattr(user, key, value)
    storage.save()
    return success("User updated successfully", {"user": user_out_schema.dump(user)})


@bp.put("/me/password")
@jwt_required()
def change_password():
    """
    Change password; signs out every other session
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
           required: [currentPassword, newPassword]
           properties:
             currentPassword: { type: string }
             newPassword: { type: string, minLength: 8 }
    responses:
      200: { description: Password changed }
      400: { description: Validation error }
      401: { description: Current password is incorrect }
    """
    data: PasswordChangeRequest = load_json(password_change_schema, "Invalid password data")
    user = g.current_user
    if not verify_password(data.current_password, user.password_hash):
        abort(401, description="Current password is incorrect")

    user.password_hash = hash_password(data.new_password)
    get_storage().save()
    # Outstanding refresh tokens were issued against the old password
    get_refresh_tokens().remove_for_user(user.id)
    return success("Password changed successfully")


@bp.delete("/me")
@jwt_required()
def deactivate_me():
    """
    Deactivate the current account and revoke all its refresh tokens
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200: { description: Account deactivated }
      401: { description: Unauthorized }
    """
    user = g.current_user
    user.deactivate()
    get_storage().save()
    removed = get_refresh_tokens().remove_for_user(user.id)
    logger.info("Deactivated user %s (%d refresh tokens removed)", user.id, removed)
    return success("Account deactivated successfully")
