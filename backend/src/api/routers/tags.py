"""Tag endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import check_rate_limit, get_async_session
from schemas.bookmark import BookmarkVisibility, normalize_tag_names
from schemas.tag import TagListResponse
from services.tag_service import count_bookmarks_by_tags

router = APIRouter(
    prefix="/tags",
    tags=["tags"],
    dependencies=[Depends(check_rate_limit)],
)


@router.get("/", response_model=TagListResponse)
async def list_tags(
    tags: list[str] | None = Query(default=None, description="Only count these tags"),
    visibility: BookmarkVisibility = Query(default=BookmarkVisibility.ALL),
    db: AsyncSession = Depends(get_async_session),
) -> TagListResponse:
    """
    Get tags in use with the number of bookmarks carrying each.

    Returns tags sorted by count (most used first), then alphabetically.
    """
    try:
        tag_filter = normalize_tag_names(tags or [])
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    counts = await count_bookmarks_by_tags(db, tag_filter, visibility)
    return TagListResponse(tags=counts)
