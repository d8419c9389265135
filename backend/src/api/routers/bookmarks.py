"""Bookmark CRUD endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import check_rate_limit, get_async_session
from schemas.bookmark import (
    BookmarkCountResponse,
    BookmarkPayload,
    BookmarkResponse,
    BookmarkVisibility,
)
from services import bookmark_service, tag_service
from services.bookmark_service import (
    BookmarkByHash,
    BookmarkById,
    BookmarkByUrl,
    BookmarkQuery,
    DuplicateHashError,
)

router = APIRouter(
    prefix="/bookmarks",
    tags=["bookmarks"],
    dependencies=[Depends(check_rate_limit)],
)


async def _save_tags(
    db: AsyncSession, bookmark_id: int, tag_names: list[str],
) -> list[str]:
    """Create missing tags, replace the bookmark's relations, return the tag text."""
    tags = await tag_service.sync_tags(db, tag_names)
    await tag_service.relate_bookmark_tags(db, bookmark_id, [tag.id for tag in tags])
    return [tag.tag for tag in tags]


@router.get("/show", response_model=BookmarkResponse)
async def show_bookmark(
    id: int | None = Query(default=None),  # noqa: A002
    hash: str | None = Query(default=None),  # noqa: A002
    url: str | None = Query(default=None),
    visibility: BookmarkVisibility = Query(
        default=BookmarkVisibility.ALL,
        description="Only applies to lookups by id",
    ),
    private_key: str | None = Query(default=None),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """
    Get a single bookmark by id, hash or url.

    When several selectors are given, id wins over hash, and hash over url.
    """
    query: BookmarkQuery
    if id is not None:
        query = BookmarkById(id=id, visibility=visibility)
    elif hash is not None:
        query = BookmarkByHash(hash=hash, private_key=private_key)
    elif url is not None:
        query = BookmarkByUrl(url=url)
    else:
        raise HTTPException(status_code=400, detail="Query must have one of id/hash/url")

    bookmark = await bookmark_service.fetch_bookmark(db, query)
    if bookmark is None:
        raise HTTPException(status_code=404, detail="Bookmark not found")

    tags = await tag_service.fetch_tags_of_bookmarks(db, [bookmark.id])
    return BookmarkResponse.from_entity(bookmark, (tag for _, tag in tags))


@router.post("/add", response_model=BookmarkResponse)
async def add_bookmark(
    data: BookmarkPayload,
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Create a new bookmark together with its tags."""
    if data.id is not None:
        raise HTTPException(status_code=400, detail="New bookmark must not have an ID")

    try:
        bookmark = await bookmark_service.insert_bookmark(db, data)
    except DuplicateHashError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    tags = await _save_tags(db, bookmark.id, data.tags or [])
    return BookmarkResponse.from_entity(bookmark, tags)


@router.put("/update", response_model=BookmarkResponse)
async def update_bookmark(
    data: BookmarkPayload,
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Overwrite a bookmark and replace its tag set."""
    if data.id is None:
        raise HTTPException(status_code=400, detail="Bookmark to update must have an ID")

    try:
        bookmark = await bookmark_service.update_bookmark(db, data.id, data)
    except DuplicateHashError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    if bookmark is None:
        raise HTTPException(status_code=404, detail="Bookmark not found")

    tags = await _save_tags(db, bookmark.id, data.tags or [])
    return BookmarkResponse.from_entity(bookmark, tags)


@router.delete("/remove")
async def remove_bookmark(
    id: int = Query(),  # noqa: A002
    db: AsyncSession = Depends(get_async_session),
) -> dict:
    """Delete a bookmark."""
    deleted = await bookmark_service.delete_bookmark(db, id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    return {}


@router.get("/count", response_model=BookmarkCountResponse)
async def count_bookmarks(
    visibility: BookmarkVisibility = Query(default=BookmarkVisibility.ALL),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkCountResponse:
    """Count bookmarks, optionally only the public or private ones."""
    count = await bookmark_service.count_bookmarks(db, visibility)
    return BookmarkCountResponse(visibility=visibility, count=count)
