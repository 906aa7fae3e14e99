from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from models.base_model import Base, BaseModel, SoftDeleteMixin


class Category(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "categories"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)

    user = relationship("User", back_populates="categories")
    # Bookmark.category_id is ON DELETE SET NULL
    bookmarks = relationship("Bookmark", back_populates="category", passive_deletes=True)

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_categories_user_name"),
    )
