"""
Read-only aggregation over the catalog.

Counts, full listings and the ``me`` lookup.  An author's
``book_count`` is computed here at read time from the books
collection; it is never stored.
"""

from typing import Any, Dict, List, Optional

from ..core.db import SQLiteGateway
from ..schemas.author import AuthorRead
from ..schemas.book import BookRead
from ..schemas.user import UserRead
from .catalog_service import CatalogService


class QueryService:
    """Service answering the catalog's read queries."""

    def __init__(self, gateway: SQLiteGateway, catalog: Optional[CatalogService] = None) -> None:
        self.gateway = gateway
        self.catalog = catalog or CatalogService(gateway)

    async def hello(self) -> str:
        return "hello"

    async def book_count(self) -> int:
        return self.gateway.count("books")

    async def author_count(self) -> int:
        return self.gateway.count("authors")

    async def all_books(self, author: Optional[str] = None, genre: Optional[str] = None) -> List[BookRead]:
        """List books with their authors, optionally filtered by author name and genre."""
        return await self.catalog.find_books(author=author, genre=genre)

    async def all_authors(self, author: Optional[str] = None) -> List[AuthorRead]:
        """List authors annotated with their book counts.

        ``author`` restricts the listing to the author with exactly that
        name.
        """
        predicate = {"name": author} if author is not None else {}
        return [
            AuthorRead.from_record(record, await self.count_books_by_author(record["id"]))
            for record in self.gateway.find("authors", predicate)
        ]

    async def count_books_by_author(self, author_id: str) -> int:
        return self.gateway.count("books", {"author": author_id})

    async def me(self, identity: Optional[Dict[str, Any]]) -> Optional[UserRead]:
        """Return the user behind ``identity``, or ``None`` when unauthenticated."""
        if not identity or not identity.get("id"):
            return None
        record = self.gateway.find_one("users", {"id": identity["id"]})
        return UserRead.from_record(record) if record else None
