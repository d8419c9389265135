"""Service layer for bookmark persistence."""
import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from schemas.bookmark import BookmarkFields, BookmarkVisibility, visibility_private_flag

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = set(BookmarkFields.model_fields)


class DuplicateHashError(Exception):
    """Raised when a bookmark with the same hash already exists."""

    def __init__(self, hash_: str) -> None:
        self.hash = hash_
        super().__init__(f"A bookmark with hash '{hash_}' already exists")


@dataclass(frozen=True)
class BookmarkById:
    """Look a bookmark up by id, optionally restricted by visibility."""

    id: int
    visibility: BookmarkVisibility = BookmarkVisibility.ALL


@dataclass(frozen=True)
class BookmarkByHash:
    """
    Look a bookmark up by its hash.

    ``private_key`` is carried for a planned access check on private
    bookmarks; it is not used yet.
    """

    hash: str
    private_key: str | None = None


@dataclass(frozen=True)
class BookmarkByUrl:
    """Look a bookmark up by URL. URLs are not unique; the oldest match wins."""

    url: str


BookmarkQuery = BookmarkById | BookmarkByHash | BookmarkByUrl


async def fetch_bookmark(db: AsyncSession, query: BookmarkQuery) -> Bookmark | None:
    """
    Fetch a single bookmark.

    Args:
        db: Database session.
        query: Which bookmark to look up.

    Returns:
        The bookmark, or None if nothing matches.
    """
    stmt = select(Bookmark)
    if isinstance(query, BookmarkById):
        stmt = stmt.where(Bookmark.id == query.id)
        private = visibility_private_flag(query.visibility)
        if private is not None:
            stmt = stmt.where(Bookmark.private == private)
    elif isinstance(query, BookmarkByHash):
        if query.private_key is not None:
            logger.debug("private_key_ignored", extra={"hash": query.hash})
        stmt = stmt.where(Bookmark.hash == query.hash)
    elif isinstance(query, BookmarkByUrl):
        stmt = stmt.where(Bookmark.url == query.url).order_by(Bookmark.id).limit(1)
    else:
        raise TypeError(f"Unsupported bookmark query: {query!r}")

    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def insert_bookmark(db: AsyncSession, data: BookmarkFields) -> Bookmark:
    """
    Insert a new bookmark.

    The store assigns ``id``; ``created`` and ``updated`` get the same timestamp.

    Raises:
        DuplicateHashError: If another bookmark already has this hash.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    now = datetime.now(UTC)
    bookmark = Bookmark(
        **data.model_dump(include=MUTABLE_FIELDS),
        created=now,
        updated=now,
    )
    try:
        async with db.begin_nested():  # Savepoint, parent transaction survives a conflict
            db.add(bookmark)
            await db.flush()
    except IntegrityError as e:
        if "uq_bookmarks_hash" in str(e):
            raise DuplicateHashError(data.hash) from e
        raise
    await db.refresh(bookmark)
    logger.info("bookmark_created", extra={"bookmark_id": bookmark.id})
    return bookmark


async def update_bookmark(
    db: AsyncSession,
    bookmark_id: int,
    data: BookmarkFields,
) -> Bookmark | None:
    """
    Overwrite every mutable field of a bookmark and refresh ``updated``.

    ``id`` and ``created`` are preserved.

    Returns:
        The updated bookmark, or None if no bookmark has this id (nothing is written).

    Raises:
        DuplicateHashError: If the new hash belongs to another bookmark.
    """
    bookmark = await db.get(Bookmark, bookmark_id)
    if bookmark is None:
        return None

    try:
        async with db.begin_nested():
            for field, value in data.model_dump(include=MUTABLE_FIELDS).items():
                setattr(bookmark, field, value)
            bookmark.updated = datetime.now(UTC)
            await db.flush()
    except IntegrityError as e:
        if "uq_bookmarks_hash" in str(e):
            raise DuplicateHashError(data.hash) from e
        raise
    await db.refresh(bookmark)
    logger.info("bookmark_updated", extra={"bookmark_id": bookmark_id})
    return bookmark


async def delete_bookmark(db: AsyncSession, bookmark_id: int) -> bool:
    """
    Hard-delete a bookmark. Tag relations go with it via ON DELETE CASCADE.

    Returns:
        True if a bookmark was deleted, False if none had this id.
    """
    result = await db.execute(
        delete(Bookmark).where(Bookmark.id == bookmark_id),
    )
    deleted = result.rowcount > 0
    if deleted:
        logger.info("bookmark_deleted", extra={"bookmark_id": bookmark_id})
    return deleted


async def count_bookmarks(
    db: AsyncSession,
    visibility: BookmarkVisibility = BookmarkVisibility.ALL,
) -> int:
    """Count bookmarks, optionally only public or only private ones."""
    stmt = select(func.count()).select_from(Bookmark)
    private = visibility_private_flag(visibility)
    if private is not None:
        stmt = stmt.where(Bookmark.private == private)
    result = await db.execute(stmt)
    return result.scalar_one()
