"""SQLAlchemy models."""
from models.base import Base
from models.bookmark import Bookmark
from models.tag import Tag, bookmarks_tags

__all__ = ["Base", "Bookmark", "Tag", "bookmarks_tags"]
