"""ORM models. Importing this package registers every table on Base.metadata."""
from models.base_model import Base
from models.user import User
from models.refresh_token import RefreshToken
from models.category import Category
from models.tag import Tag
from models.bookmark import Bookmark, bookmark_tags
from models.db_storage import DBStorage

__all__ = [
    "Base",
    "User",
    "RefreshToken",
    "Category",
    "Tag",
    "Bookmark",
    "bookmark_tags",
    "DBStorage",
]
