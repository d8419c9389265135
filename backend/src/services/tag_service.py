"""Service layer for tags and the bookmark/tag relation."""
from sqlalchemy import delete, func, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from models.tag import Tag, bookmarks_tags
from schemas.bookmark import BookmarkVisibility, normalize_tag_names, visibility_private_flag
from schemas.tag import TagCount


async def sync_tags(db: AsyncSession, tag_names: list[str]) -> list[Tag]:
    """
    Get existing tags or create new ones.

    New names are inserted with ON CONFLICT DO NOTHING, so a concurrent
    request creating the same tag does not fail this one. Calling this
    twice with the same names returns the same rows.

    Args:
        db: Database session.
        tag_names: Tag names to resolve.

    Returns:
        Tag rows for every requested name, in the order requested.
    """
    names = normalize_tag_names(tag_names)
    if not names:
        return []

    await db.execute(
        pg_insert(Tag)
        .values([{"tag": name} for name in names])
        .on_conflict_do_nothing(index_elements=[Tag.tag]),
    )
    result = await db.execute(select(Tag).where(Tag.tag.in_(names)))
    by_name = {tag.tag: tag for tag in result.scalars()}
    return [by_name[name] for name in names if name in by_name]


async def relate_bookmark_tags(
    db: AsyncSession,
    bookmark_id: int,
    tag_ids: list[int],
) -> None:
    """
    Replace the full tag set of a bookmark.

    Clears existing relation rows and inserts one row per tag id. Runs in
    the caller's transaction, so the pair is atomic with the bookmark write.
    """
    await db.execute(
        delete(bookmarks_tags).where(bookmarks_tags.c.bookmark_id == bookmark_id),
    )
    unique_ids = list(dict.fromkeys(tag_ids))
    if unique_ids:
        await db.execute(
            insert(bookmarks_tags),
            [{"bookmark_id": bookmark_id, "tag_id": tag_id} for tag_id in unique_ids],
        )


async def fetch_tags_of_bookmarks(
    db: AsyncSession,
    bookmark_ids: list[int],
) -> list[tuple[int, str]]:
    """
    Fetch tags for a list of bookmarks.

    Returns:
        (bookmark_id, tag) pairs in no particular order.
    """
    if not bookmark_ids:
        return []

    result = await db.execute(
        select(bookmarks_tags.c.bookmark_id, Tag.tag)
        .join(Tag, bookmarks_tags.c.tag_id == Tag.id)
        .where(bookmarks_tags.c.bookmark_id.in_(bookmark_ids)),
    )
    return [(bookmark_id, tag) for bookmark_id, tag in result]


async def count_bookmarks_by_tags(
    db: AsyncSession,
    tags: list[str] | None = None,
    visibility: BookmarkVisibility = BookmarkVisibility.ALL,
) -> list[TagCount]:
    """
    Count bookmarks per tag.

    Args:
        db: Database session.
        tags: Only count these tags. None, empty or all-blank counts every tag in use.
        visibility: Only count public or private bookmarks.

    Returns:
        List of TagCount objects sorted by count desc, then name asc.

    Raises:
        ValueError: If a filter tag is longer than the tag length limit.
    """
    stmt = (
        select(Tag.tag, func.count().label("bookmark_count"))
        .select_from(bookmarks_tags)
        .join(Bookmark, bookmarks_tags.c.bookmark_id == Bookmark.id)
        .join(Tag, bookmarks_tags.c.tag_id == Tag.id)
    )
    # A filter that normalizes to nothing (e.g. only blanks) means no filter
    tag_filter = normalize_tag_names(tags or [])
    if tag_filter:
        stmt = stmt.where(Tag.tag.in_(tag_filter))
    private = visibility_private_flag(visibility)
    if private is not None:
        stmt = stmt.where(Bookmark.private == private)
    stmt = stmt.group_by(Tag.id, Tag.tag).order_by(func.count().desc(), Tag.tag.asc())

    result = await db.execute(stmt)
    return [TagCount(name=name, count=count) for name, count in result]
