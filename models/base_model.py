#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the Bookmark API.

- Integer autoincrement primary key
- created_at / updated_at timestamps (UTC, set in Python with a DB fallback)
- SoftDeleteMixin: rows are deactivated through is_active instead of deleted

Models never commit on their own; the request handler owns the unit of work
through DBStorage.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import expression, func

# Declarative base for all models
Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    DateTime stored in UTC and always loaded timezone-aware.
    SQLite keeps no offset, so naive values read back are tagged as UTC.
    """

    impl = DateTime
    cache_ok = True

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("timezone", True)
        super().__init__(*args, **kwargs)

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class BaseModel:
    """
    Base mixin for persistent models: id, created_at, updated_at.
    Put it before Base in the class list:
        class Category(SoftDeleteMixin, BaseModel, Base): ...
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(UTCDateTime(), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        UTCDateTime(), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"


class SoftDeleteMixin:
    """
    Adds an is_active flag. Soft-deleted rows stay in the table (so unique
    constraints still see them) but every read filters on is_active.
    """

    is_active = Column(Boolean, nullable=False, default=True, server_default=expression.true())

    def deactivate(self):
        """Soft delete; caller commits."""
        self.is_active = False

    def restore(self):
        """Undo a soft delete; caller commits."""
        self.is_active = True
