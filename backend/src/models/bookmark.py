"""Bookmark model for storing saved URLs."""
from datetime import datetime
from typing import Any

from sqlalchemy import BigInteger, Boolean, DateTime, Text, UniqueConstraint, func, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Bookmark(Base):
    """
    Bookmark model - stores URLs with metadata.

    Tags live in the ``bookmarks_tags`` junction table (see models.tag).

    The services stamp ``created``/``updated`` themselves; the clock_timestamp()
    server defaults cover rows written by other means (e.g. manual SQL).
    """

    __tablename__ = "bookmarks"
    __table_args__ = (
        # hash is the dedup key; url is expected unique in practice but not enforced
        UniqueConstraint("hash", name="uq_bookmarks_hash"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    hash: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(
        Text, nullable=False, server_default=text("''"),
    )
    thumbnail: Mapped[str | None] = mapped_column(Text, nullable=True)
    sticky: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false"),
    )
    private: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false"), index=True,
    )
    # Opaque client metadata, stored and returned verbatim
    extra_data: Mapped[Any] = mapped_column(JSONB(none_as_null=True), nullable=True)
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.clock_timestamp(),
        nullable=False,
    )
    updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.clock_timestamp(),
        nullable=False,
    )
