"""Tag model and the bookmark/tag junction table."""
from sqlalchemy import (
    BigInteger,
    Column,
    ForeignKey,
    Index,
    String,
    Table,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base

TAG_MAX_LENGTH = 100


# Junction table for many-to-many relationship between bookmarks and tags.
# Rows carry no payload; they are replaced wholesale whenever a bookmark's tags change.
bookmarks_tags = Table(
    "bookmarks_tags",
    Base.metadata,
    Column(
        "bookmark_id",
        BigInteger,
        ForeignKey("bookmarks.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        BigInteger,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    # Index for lookups by tag (composite PK already indexes bookmark_id first)
    Index("ix_bookmarks_tags_tag_id", "tag_id"),
)


class Tag(Base):
    """Tag model - a label shared by every bookmark that uses it."""

    __tablename__ = "tags"
    __table_args__ = (
        UniqueConstraint("tag", name="uq_tags_tag"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    tag: Mapped[str] = mapped_column(String(TAG_MAX_LENGTH), nullable=False)
