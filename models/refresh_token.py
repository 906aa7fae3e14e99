"""
RefreshToken model: opaque random refresh tokens stored server-side.
Fields:
- id (primary key)
- user_id (FK to users.id, cascade)
- token (random hex string, unique per user)
- expires_at, created_at

A row is usable only while expires_at > now; logout deletes the row and the
sweeper deletes expired rows in bulk.
"""
from sqlalchemy import Column, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base_model import Base, UTCDateTime, utcnow


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token = Column(String(255), nullable=False)
    expires_at = Column(UTCDateTime(), nullable=False)
    created_at = Column(UTCDateTime(), default=utcnow, server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="refresh_tokens")

    __table_args__ = (
        UniqueConstraint("user_id", "token", name="uq_refresh_tokens_user_token"),
        Index("ix_refresh_tokens_token", "token"),
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )

    def __repr__(self):
        return f"<RefreshToken user_id={self.user_id} expires_at={self.expires_at}>"
