"""GraphQL query resolvers."""

from typing import List, Optional

import strawberry
from strawberry.types import Info

from ..core.errors import LibraryError
from .context import graphql_error
from .types import AuthorType, BookType, UserType


@strawberry.type
class Query:
    @strawberry.field
    async def hello(self, info: Info) -> str:
        return await info.context.queries.hello()

    @strawberry.field
    async def book_count(self, info: Info) -> int:
        return await info.context.queries.book_count()

    @strawberry.field
    async def author_count(self, info: Info) -> int:
        return await info.context.queries.author_count()

    @strawberry.field
    async def all_books(
        self,
        info: Info,
        author: Optional[str] = None,
        genre: Optional[str] = None,
    ) -> List[BookType]:
        try:
            books = await info.context.queries.all_books(author=author, genre=genre)
        except LibraryError as exc:
            raise graphql_error(exc) from exc
        return [BookType.from_schema(book) for book in books]

    @strawberry.field
    async def all_authors(self, info: Info, author: Optional[str] = None) -> List[AuthorType]:
        authors = await info.context.queries.all_authors(author=author)
        return [AuthorType.from_schema(a) for a in authors]

    @strawberry.field
    async def find_books(
        self,
        info: Info,
        title: Optional[str] = None,
        author: Optional[str] = None,
        genre: Optional[str] = None,
    ) -> List[BookType]:
        """Books matching every given criterion; ``author`` is an author name."""
        try:
            books = await info.context.catalog.find_books(title=title, author=author, genre=genre)
        except LibraryError as exc:
            raise graphql_error(exc) from exc
        return [BookType.from_schema(book) for book in books]

    @strawberry.field
    async def me(self, info: Info) -> Optional[UserType]:
        user = await info.context.queries.me(info.context.identity)
        return UserType.from_schema(user) if user else None
