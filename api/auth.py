"""
Authentication blueprint (mounted at /api/auth):
- POST /register
- POST /login
- POST /refresh-token
- POST /logout
- GET  /profile

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived signed access tokens (PyJWT) and long-lived opaque
  refresh tokens stored in the refresh_tokens table (utils.tokens)
- Refresh exchanges a stored refresh token for a new access token; the
  refresh token itself stays valid until logout or expiry
"""
from __future__ import annotations

import logging

from flask import Blueprint, abort, g
from sqlalchemy import or_

from api import get_refresh_tokens, get_storage
from api.responses import created, load_json, retrieved, success
from models.schemas.user import (
    LoginRequest,
    LoginSchema,
    RefreshTokenRequest,
    RefreshTokenSchema,
    RegisterRequest,
    RegisterSchema,
    UserOutSchema,
    UserSummarySchema,
)
from models.user import User
from utils.decorators import jwt_required
from utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_token_schema = RefreshTokenSchema()
user_summary_schema = UserSummarySchema()
user_out_schema = UserOutSchema()


def find_active_user(session, **filters):
    return session.query(User).filter_by(is_active=True, **filters).first()


@bp.post("/register")
def register():
    """
    Register a new user and sign them in
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
          required: [username, email, password]
          properties:
            username: { type: string, minLength: 3, maxLength: 50 }
            email: { type: string, format: email }
            password: { type: string, minLength: 8 }
    responses:
      201:
        description: Created (returns user, accessToken, refreshToken)
      400:
        description: Validation error
      409:
        description: Username or email already exists
    """
    data: RegisterRequest = load_json(register_schema, "Invalid registration data")

    storage = get_storage()
    session = storage.get_session()
    taken = session.query(User).filter(or_(User.username == data.username, User.email == data.email)).first()
    if taken:
        abort(409, description="Username or email already exists")

    user = User(username=data.username, email=data.email, password_hash=hash_password(data.password))
    storage.new(user)
    storage.save()
    logger.info("Registered user %s", user.id)

    return created("User registered successfully", {
        "user": user_summary_schema.dump(user),
        "accessToken": create_access_token(user),
        "refreshToken": get_refresh_tokens().issue(user),
    })


@bp.post("/login")
def login():
    """
    Login: return accessToken and refreshToken
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
           required: [username, password]
           properties:
             username: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      400:
        description: Validation error
      401:
        description: Invalid username or password
    """
    data: LoginRequest = load_json(login_schema, "Invalid login data")

    user = find_active_user(get_storage().get_session(), username=data.username)
    # Same answer for unknown user and wrong password
    if not user or not verify_password(data.password, user.password_hash):
        abort(401, description="Invalid username or password")

    return success("Login successful", {
        "user": user_out_schema.dump(user),
        "accessToken": create_access_token(user),
        "refreshToken": get_refresh_tokens().issue(user),
    })


@bp.post("/refresh-token")
def refresh_token():
    """
    Exchange a refresh token for a new access token
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
        description: OK (returns accessToken)
      401:
        description: Unknown, expired or revoked refresh token
      404:
        description: User no longer exists
    """
    data: RefreshTokenRequest = load_json(refresh_token_schema, "Invalid refresh token data")

    user_id = get_refresh_tokens().verify(data.refresh_token)
    if user_id is None:
        abort(401, description="Invalid refresh token")

    user = find_active_user(get_storage().get_session(), id=user_id)
    if not user:
        abort(404, description="User not found")

    return success("Token refreshed successfully", {"accessToken": create_access_token(user)})


@bp.post("/logout")
def logout():
    """
    Logout: deletes the refresh token (idempotent)
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
        description: Logged out
      400:
        description: Validation error
    """
    data: RefreshTokenRequest = load_json(refresh_token_schema, "Invalid refresh token data")
    get_refresh_tokens().remove(data.refresh_token)
    return success("Logout successful")


@bp.get("/profile")
@jwt_required()
def profile():
    """
    Current user's profile
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return retrieved({"user": user_out_schema.dump(g.current_user)})
