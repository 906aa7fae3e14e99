"""
Refresh-token persistence.

RefreshTokenStore issues opaque random refresh tokens, resolves them back to
a user id while they are unexpired, deletes them on logout and sweeps the
expired ones. Every operation is a single statement, so concurrent requests
and the sweeper rely only on per-statement atomicity.
"""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from models.base_model import utcnow
from models.refresh_token import RefreshToken

logger = logging.getLogger(__name__)

TOKEN_BYTES = 40


class PersistenceError(Exception):
    """The refresh-token table could not be read or written."""


def generate_refresh_token() -> str:
    """40 random bytes, hex encoded (80 characters)."""
    return secrets.token_hex(TOKEN_BYTES)


class RefreshTokenStore:
    def __init__(self, storage, lifetime: timedelta):
        self.storage = storage
        self.lifetime = lifetime

    def _insert_ignore(self, values: dict):
        # (user_id, token) collisions are a no-op, not an error
        table = RefreshToken.__table__
        dialect = self.storage.dialect_name
        if dialect == "postgresql":
            return pg_insert(table).values(**values).on_conflict_do_nothing()
        if dialect == "sqlite":
            return sqlite_insert(table).values(**values).on_conflict_do_nothing()
        return insert(table).values(**values)

    def issue(self, user, now: Optional[datetime] = None) -> str:
        """Store a new refresh token for `user` and return it."""
        token = generate_refresh_token()
        expires_at = (now or utcnow()) + self.lifetime
        session = self.storage.get_session()
        try:
            session.execute(self._insert_ignore({"user_id": user.id, "token": token, "expires_at": expires_at}))
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Error storing refresh token for user %s", user.id)
            raise PersistenceError("Could not store refresh token") from exc
        return token

    def verify(self, token: str, now: Optional[datetime] = None) -> Optional[int]:
        """User id for an existing, unexpired token; None otherwise."""
        session = self.storage.get_session()
        stmt = (
            select(RefreshToken.user_id)
            .where(RefreshToken.token == token, RefreshToken.expires_at > (now or utcnow()))
            .limit(1)
        )
        try:
            return session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Error verifying refresh token")
            raise PersistenceError("Could not read refresh tokens") from exc

    def remove(self, token: str) -> bool:
        """Delete a token (logout). Returns whether a row existed."""
        return self._delete(delete(RefreshToken).where(RefreshToken.token == token), "remove refresh token") > 0

    def remove_for_user(self, user_id: int) -> int:
        """Delete every token of a user (deactivation, password change)."""
        return self._delete(delete(RefreshToken).where(RefreshToken.user_id == user_id), "revoke user sessions")

    def sweep_expired(self, now: Optional[datetime] = None) -> int:
        """Delete rows with expires_at < now; returns the number removed."""
        cutoff = now or utcnow()
        return self._delete(delete(RefreshToken).where(RefreshToken.expires_at < cutoff), "sweep expired tokens")

    def _delete(self, stmt, action: str) -> int:
        session = self.storage.get_session()
        try:
            result = session.execute(stmt)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Failed to %s", action)
            raise PersistenceError(f"Could not {action}") from exc
        return result.rowcount or 0
