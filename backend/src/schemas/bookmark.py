"""Pydantic schemas for bookmark endpoints."""
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, field_validator

from models.tag import TAG_MAX_LENGTH

if TYPE_CHECKING:
    from models.bookmark import Bookmark


class BookmarkVisibility(str, Enum):
    """Visibility filter for bookmark queries. Never stored as-is."""

    ALL = "all"
    PUBLIC = "public"
    PRIVATE = "private"


def visibility_private_flag(visibility: BookmarkVisibility) -> bool | None:
    """
    Map a visibility filter to the value ``bookmarks.private`` must have.

    Returns None for ``all``, meaning no predicate on the private column.
    """
    if visibility == BookmarkVisibility.ALL:
        return None
    return visibility == BookmarkVisibility.PRIVATE


def normalize_tag_names(tags: list[str]) -> list[str]:
    """
    Normalize free-form tags: strip whitespace, drop empties and duplicates.

    Case and characters are preserved; first-seen order is kept.
    """
    normalized: list[str] = []
    seen: set[str] = set()
    for tag in tags:
        name = tag.strip()
        if not name or name in seen:
            continue
        if len(name) > TAG_MAX_LENGTH:
            raise ValueError(
                f"Tag exceeds maximum length of {TAG_MAX_LENGTH} characters: '{name[:20]}...'",
            )
        seen.add(name)
        normalized.append(name)
    return normalized


class BookmarkFields(BaseModel):
    """The mutable fields of a bookmark, as written by insert and update."""

    hash: str = Field(min_length=1)
    url: str = Field(min_length=1)
    title: str
    description: str = ""
    thumbnail: str | None = None
    sticky: bool = False
    private: bool = False
    extra_data: Any = None  # Arbitrary JSON, never interpreted


class BookmarkPayload(BookmarkFields):
    """
    Request body of the add and update endpoints.

    ``id`` must be absent when adding and present when updating.
    ``created`` and ``updated`` are accepted so clients can echo a response
    back, but they are ignored.
    """

    id: int | None = None
    # null is accepted and means no tags
    tags: list[str] | None = Field(default_factory=list)
    created: datetime | None = None
    updated: datetime | None = None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str] | None) -> list[str]:
        """Normalize tags once pydantic has checked they are a list of strings."""
        return normalize_tag_names(v or [])


class BookmarkResponse(BaseModel):
    """A stored bookmark with its tags inlined as text."""

    id: int | None
    hash: str
    url: str
    title: str
    description: str
    thumbnail: str | None
    tags: list[str]
    sticky: bool
    private: bool
    extra_data: Any
    created: datetime | None
    updated: datetime | None

    @classmethod
    def from_entity(cls, bookmark: "Bookmark", tags: Iterable[str]) -> "BookmarkResponse":
        """Build the response from a stored row, inlining tag text in place of tag ids."""
        return cls(
            id=bookmark.id,
            hash=bookmark.hash,
            url=bookmark.url,
            title=bookmark.title,
            description=bookmark.description,
            thumbnail=bookmark.thumbnail,
            tags=list(tags),
            sticky=bookmark.sticky,
            private=bookmark.private,
            extra_data=bookmark.extra_data,
            created=bookmark.created,
            updated=bookmark.updated,
        )


class BookmarkCountResponse(BaseModel):
    """Schema for GET /bookmarks/count."""

    visibility: BookmarkVisibility
    count: int
