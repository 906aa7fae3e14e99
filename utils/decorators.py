from __future__ import annotations

import logging
from functools import wraps

from flask import abort, g, request

from api import get_storage
from api.errors import INTERNAL_ERROR, error_response
from models.schemas.common import MAX_ID
from models.user import User
from utils.security import verify_access_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def _resolve_identity():
    """
    Run the gate steps for the current request.
    Returns (user, None) when authenticated, else (None, rejection message).
    """
    auth = request.headers.get("Authorization", "")
    if not auth.startswith(BEARER_PREFIX):
        return None, "No token provided"

    payload = verify_access_token(auth[len(BEARER_PREFIX):].strip())
    if payload is None:
        return None, "Invalid token"

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        return None, "User not found"
    if not 1 <= user_id <= MAX_ID:
        return None, "User not found"

    session = get_storage().get_session()
    user = session.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()
    if not user:
        return None, "User not found"
    return user, None


def _attach(user):
    g.user_id = user.id
    g.username = user.username
    g.current_user = user


def jwt_required():
    """Reject the request with 401 unless it carries a valid access token."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                user, reason = _resolve_identity()
            except Exception:
                logger.exception("Error in auth gate")
                return error_response(INTERNAL_ERROR, "Internal server error", 500)
            if reason:
                abort(401, description=reason)
            _attach(user)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def jwt_optional():
    """Attach the caller's identity when the token is valid; never reject."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                user, _ = _resolve_identity()
            except Exception:
                logger.exception("Error in optional auth gate")
                user = None
            if user is not None:
                _attach(user)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
