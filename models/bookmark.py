from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from models.base_model import Base, BaseModel, SoftDeleteMixin, UTCDateTime, utcnow

# Join rows clean up with either parent (CASCADE on both sides)
bookmark_tags = Table(
    "bookmark_tags",
    Base.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("bookmark_id", Integer, ForeignKey("bookmarks.id", ondelete="CASCADE"), nullable=False),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False),
    Column("created_at", UTCDateTime(), default=utcnow, server_default=func.now()),
    UniqueConstraint("bookmark_id", "tag_id", name="uq_bookmark_tags_bookmark_tag"),
)


class Bookmark(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "bookmarks"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(100), nullable=False)
    url = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    favorite = Column(Boolean, nullable=False, default=False, server_default=expression.false())

    user = relationship("User", back_populates="bookmarks")
    category = relationship("Category", back_populates="bookmarks")
    tags = relationship("Tag", secondary=bookmark_tags, order_by="Tag.name")

    __table_args__ = (
        Index("ix_bookmarks_user_id_created_at", "user_id", "created_at"),
    )

    @property
    def active_category(self):
        """The category, unless it has been soft-deleted."""
        if self.category is not None and self.category.is_active:
            return self.category
        return None

    @property
    def active_tags(self):
        return [tag for tag in self.tags if tag.is_active]
