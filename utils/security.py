"""
security helpers:
- Argon2 password hashing via argon2-cffi (salted, adaptive)
- Access-token creation/verification via PyJWT (HS256 by default)

Access tokens carry a "type" claim fixed to "access"; any token signed with
the same secret for another purpose is rejected by verify_access_token().
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from flask import current_app

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"

ph = PasswordHasher()


class SigningError(Exception):
    """The access token could not be signed (missing secret, bad algorithm...)."""


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against an Argon2 hash.
    A mismatch or an unreadable stored hash is a plain False.
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(user, now: Optional[datetime] = None) -> str:
    """
    Sign a short-lived access token for `user`.
    Raises SigningError when the secret is missing or PyJWT refuses to sign.
    """
    config = current_app.config
    secret = config.get("JWT_SECRET")
    if not secret:
        raise SigningError("JWT secret is not configured")

    issued = now or _now()
    expires = issued + config["JWT_ACCESS_LIFETIME"]
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "email": user.email,
        "type": ACCESS_TOKEN_TYPE,
        "iat": int(issued.timestamp()),
        "exp": int(expires.timestamp()),
    }
    try:
        return jwt.encode(payload, secret, algorithm=config["JWT_ALGORITHM"])
    except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as exc:
        raise SigningError(f"Could not sign access token: {exc}") from exc


def verify_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and validate an access token.
    Returns the payload, or None for a bad signature, expiry, malformed
    token or a type claim other than "access".
    """
    config = current_app.config
    try:
        decoded = jwt.decode(
            token,
            config["JWT_SECRET"],
            algorithms=[config["JWT_ALGORITHM"]],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired access token")
        return None
    except jwt.InvalidTokenError as exc:
        logger.debug("Rejected access token: %s", exc)
        return None

    if decoded.get("type") != ACCESS_TOKEN_TYPE:
        logger.debug("Rejected token with type %r", decoded.get("type"))
        return None
    return decoded
