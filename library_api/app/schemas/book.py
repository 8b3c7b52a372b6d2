"""
Pydantic models for books.

A stored book references its author by id; ``BookRead`` always carries
the author resolved, so callers never need a second lookup.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .author import AuthorRead


class BookCreate(BaseModel):
    """Input for adding a book.

    Only the shape is checked here.  Domain rules (non-empty title,
    publication year not in the future) are enforced by
    ``CatalogService`` so they fail with the service's own error types.
    """

    title: str = ""
    author_name: str = ""
    published: Optional[int] = None
    genres: List[str] = Field(default_factory=list)

    @field_validator("genres", mode="before")
    @classmethod
    def default_genres(cls, v):
        return [] if v is None else v


class BookRead(BaseModel):
    """Schema for reading a book with its author joined."""

    id: str
    title: str
    published: Optional[int] = None
    author: AuthorRead
    genres: List[str] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: Dict[str, Any], author: AuthorRead) -> "BookRead":
        return cls(
            id=record["id"],
            title=record["title"],
            published=record.get("published"),
            author=author,
            genres=list(record.get("genres") or []),
        )
