from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from models.base_model import Base, BaseModel, SoftDeleteMixin


class User(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "users"

    username = Column(String(50), nullable=False, unique=True)
    email = Column(String(100), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)

    # The database cascades deletes; the ORM does not load children to delete them
    refresh_tokens = relationship("RefreshToken", back_populates="user", passive_deletes=True)
    categories = relationship("Category", back_populates="user", passive_deletes=True)
    tags = relationship("Tag", back_populates="user", passive_deletes=True)
    bookmarks = relationship("Bookmark", back_populates="user", passive_deletes=True)
