"""
GraphQL mutation resolvers.

``addBook`` and ``editAuthor`` pass through the token gate before
anything else, so an unauthenticated request is rejected even when its
input is also invalid.  ``createUser`` and ``login`` are open.
"""

from typing import List, Optional

import strawberry
from strawberry.types import Info

from ..core.errors import LibraryError
from .context import graphql_error
from .types import AuthorType, BookType, TokenType, UserType


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def add_book(
        self,
        info: Info,
        title: str,
        author_name: str,
        published: Optional[int] = None,
        genres: Optional[List[str]] = None,
        token: Optional[str] = None,
    ) -> BookType:
        try:
            info.context.authorize_mutation(token)
            book = await info.context.catalog.add_book(
                title=title,
                author_name=author_name,
                published=published,
                genres=genres,
            )
        except LibraryError as exc:
            raise graphql_error(exc) from exc
        return BookType.from_schema(book)

    @strawberry.mutation
    async def edit_author(
        self,
        info: Info,
        name: str,
        set_born_to: Optional[int] = None,
        token: Optional[str] = None,
    ) -> Optional[AuthorType]:
        try:
            info.context.authorize_mutation(token)
            author = await info.context.catalog.edit_author(name=name, set_born_to=set_born_to)
        except LibraryError as exc:
            raise graphql_error(exc) from exc
        return AuthorType.from_schema(author)

    @strawberry.mutation
    async def create_user(
        self,
        info: Info,
        username: str,
        favorite_genre: Optional[str] = None,
        password: Optional[str] = None,
    ) -> UserType:
        try:
            user = await info.context.auth.create_user(
                username=username,
                favorite_genre=favorite_genre,
                password=password,
            )
        except LibraryError as exc:
            raise graphql_error(exc) from exc
        return UserType.from_schema(user)

    @strawberry.mutation
    async def login(self, info: Info, username: str, password: str) -> TokenType:
        try:
            token = await info.context.auth.login(username=username, password=password)
        except LibraryError as exc:
            raise graphql_error(exc) from exc
        return TokenType.from_schema(token)
