"""Pydantic models for authors."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class AuthorRead(BaseModel):
    """Schema for reading an author.

    ``book_count`` is never stored.  It is filled in on read by the
    services that know how to count the author's books, and left as
    ``None`` where it was not computed.
    """

    id: str
    name: str
    born: Optional[int] = Field(None, description="Year of birth")
    book_count: Optional[int] = Field(None, description="Number of books referencing this author")

    model_config = {
        "from_attributes": True,
    }

    @classmethod
    def from_record(cls, record: Dict[str, Any], book_count: Optional[int] = None) -> "AuthorRead":
        return cls(id=record["id"], name=record["name"], born=record.get("born"), book_count=book_count)
