"""
Business logic for books and authors.

``CatalogService`` keeps the two collections consistent: a book can
only be stored once its author exists, and an author named for the
first time in ``add_book`` is created on the spot.  The author lookup
and creation form an idempotent find-or-create step: when two requests
race to create the same author, the loser of the uniqueness constraint
looks the author up again instead of failing.

Years are checked against the current calendar year; ``current_year``
is a module function so tests can pin it.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..core.db import SQLiteGateway
from ..core.errors import DuplicateKeyError, NotFoundError, PersistenceError, ValidationError
from ..schemas.author import AuthorRead
from ..schemas.book import BookCreate, BookRead

logger = logging.getLogger(__name__)


def current_year() -> int:
    return datetime.now().year


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class CatalogService:
    """Service for adding books, editing authors and searching books."""

    def __init__(self, gateway: SQLiteGateway) -> None:
        self.gateway = gateway

    async def add_book(
        self,
        title: str,
        author_name: str,
        published: Optional[int] = None,
        genres: Optional[List[str]] = None,
    ) -> BookRead:
        """Validate and store a new book, creating its author if needed.

        Raises ``ValidationError`` for an empty title or author name or
        a publication year after the current one; nothing is written in
        that case.  Store failures surface as ``PersistenceError`` with
        the store's message.
        """
        data = BookCreate(title=title or "", author_name=author_name or "", published=published, genres=genres)
        invalid_args = {
            "title": data.title,
            "authorName": data.author_name,
            "published": data.published,
            "genres": data.genres,
        }
        if _is_blank(data.title):
            raise ValidationError("Missing `title`", invalid_args)
        if _is_blank(data.author_name):
            raise ValidationError("Missing `authorName`", invalid_args)
        if data.published is not None and data.published > current_year():
            raise ValidationError("Cannot add book that hasn't been published yet", invalid_args)

        author = await self.find_or_create_author(data.author_name)

        try:
            book_id = self.gateway.insert(
                "books",
                {
                    "title": data.title,
                    "author": author["id"],
                    "published": data.published,
                    "genres": data.genres,
                },
            )
        except PersistenceError as exc:
            raise PersistenceError(exc.message, invalid_args) from exc
        logger.info("Added book %s (%s) by %s", book_id, data.title, data.author_name)

        record = self.gateway.find_one("books", {"id": book_id})
        if record is None:
            raise PersistenceError(f"Book {book_id} vanished after insert", invalid_args)
        return BookRead.from_record(record, AuthorRead.from_record(author))

    async def find_or_create_author(self, name: str) -> Dict[str, Any]:
        """Return the author record named ``name``, creating it if absent.

        The author is committed on its own.  No transaction spans this
        step and the book insert in ``add_book``, so if the book is then
        rejected (e.g. a duplicate title) the new author stays, with no
        books.
        """
        author = self.gateway.find_one("authors", {"name": name})
        if author is not None:
            return author
        try:
            author_id = self.gateway.insert("authors", {"name": name})
        except DuplicateKeyError:
            # Another request created the author between our lookup and
            # insert.
            author = self.gateway.find_one("authors", {"name": name})
            if author is None:
                raise
            logger.info("Author %s was created concurrently; reusing %s", name, author["id"])
            return author
        except PersistenceError as exc:
            raise PersistenceError(exc.message, {"name": name}) from exc
        logger.info("Created author %s (%s)", author_id, name)
        return {"id": author_id, "name": name, "born": None}

    async def edit_author(self, name: str, set_born_to: Optional[int]) -> AuthorRead:
        """Set the birth year of the author named ``name``.

        A missing author is reported with ``NotFoundError``; the call
        never returns ``None``.  Repeated edits overwrite the year.
        """
        invalid_args = {"name": name, "setBornTo": set_born_to}
        if _is_blank(name):
            raise ValidationError("Missing `name`", invalid_args)
        if set_born_to is None:
            raise ValidationError("Missing `setBornTo`", invalid_args)
        if set_born_to > current_year():
            raise ValidationError("Author is born in the future!?", invalid_args)

        author = self.gateway.find_one("authors", {"name": name})
        if author is None:
            raise NotFoundError("No such author", invalid_args)

        try:
            updated = self.gateway.update("authors", author["id"], {"born": set_born_to})
        except PersistenceError as exc:
            raise PersistenceError(exc.message, invalid_args) from exc
        if updated is None:
            raise NotFoundError("No such author", invalid_args)
        logger.info("Set born=%s for author %s", set_born_to, name)
        return AuthorRead.from_record(updated, self.gateway.count("books", {"author": updated["id"]}))

    async def find_books(
        self,
        title: Optional[str] = None,
        author: Optional[str] = None,
        genre: Optional[str] = None,
    ) -> List[BookRead]:
        """Return the books matching every supplied criterion.

        ``author`` is an author *name*: it is resolved to an id first,
        and an unknown name simply matches nothing.
        """
        predicate: Dict[str, Any] = {}
        if title is not None:
            predicate["title"] = title
        if genre is not None:
            predicate["genres"] = genre
        if author is not None:
            author_record = self.gateway.find_one("authors", {"name": author})
            if author_record is None:
                return []
            predicate["author"] = author_record["id"]
        return self._join_authors(self.gateway.find("books", predicate))

    def _join_authors(self, records: List[Dict[str, Any]]) -> List[BookRead]:
        """Attach the author to each book record, looking every author up once."""
        authors: Dict[str, AuthorRead] = {}
        books: List[BookRead] = []
        for record in records:
            author_id = record["author"]
            if author_id not in authors:
                author = self.gateway.find_one("authors", {"id": author_id})
                if author is None:
                    raise PersistenceError(
                        f"Book {record['id']} references missing author {author_id}",
                        {"book": record["id"]},
                    )
                authors[author_id] = AuthorRead.from_record(author)
            books.append(BookRead.from_record(record, authors[author_id]))
        return books
