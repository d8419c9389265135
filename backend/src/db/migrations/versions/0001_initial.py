"""
Create bookmarks, tags and bookmarks_tags tables.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the bookmark, tag and relation tables."""
    op.create_table(
        "bookmarks",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("hash", sa.Text(), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("thumbnail", sa.Text(), nullable=True),
        sa.Column("sticky", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("private", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("extra_data", postgresql.JSONB(), nullable=True),
        sa.Column(
            "created",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("clock_timestamp()"),
        ),
        sa.Column(
            "updated",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("clock_timestamp()"),
        ),
        sa.UniqueConstraint("hash", name="uq_bookmarks_hash"),
    )
    op.create_index("ix_bookmarks_url", "bookmarks", ["url"])
    op.create_index("ix_bookmarks_private", "bookmarks", ["private"])

    op.create_table(
        "tags",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("tag", sa.String(100), nullable=False),
        sa.UniqueConstraint("tag", name="uq_tags_tag"),
    )

    op.create_table(
        "bookmarks_tags",
        sa.Column(
            "bookmark_id",
            sa.BigInteger(),
            sa.ForeignKey("bookmarks.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "tag_id",
            sa.BigInteger(),
            sa.ForeignKey("tags.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_index("ix_bookmarks_tags_tag_id", "bookmarks_tags", ["tag_id"])


def downgrade() -> None:
    """Drop the relation table first (FK constraints), then its parents."""
    op.drop_index("ix_bookmarks_tags_tag_id", table_name="bookmarks_tags")
    op.drop_table("bookmarks_tags")
    op.drop_table("tags")
    op.drop_index("ix_bookmarks_private", table_name="bookmarks")
    op.drop_index("ix_bookmarks_url", table_name="bookmarks")
    op.drop_table("bookmarks")
