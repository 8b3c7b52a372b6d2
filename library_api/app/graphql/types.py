"""
GraphQL types for the catalog.

The types mirror the pydantic read schemas.  ``Author.bookCount`` is
resolved on demand unless the service already computed it (as
``allAuthors`` does), so authors nested in books cost nothing when the
client does not ask for their count.
"""

from typing import List, Optional

import strawberry
from strawberry.types import Info

from ..schemas.author import AuthorRead
from ..schemas.book import BookRead
from ..schemas.user import Token, UserRead


@strawberry.type(name="Author")
class AuthorType:
    id: strawberry.ID
    name: str
    born: Optional[int] = None
    known_book_count: strawberry.Private[Optional[int]] = None

    @strawberry.field
    async def book_count(self, info: Info) -> int:
        if self.known_book_count is not None:
            return self.known_book_count
        return await info.context.queries.count_books_by_author(str(self.id))

    @classmethod
    def from_schema(cls, author: AuthorRead) -> "AuthorType":
        return cls(
            id=strawberry.ID(author.id),
            name=author.name,
            born=author.born,
            known_book_count=author.book_count,
        )


@strawberry.type(name="Book")
class BookType:
    id: strawberry.ID
    title: str
    author: AuthorType
    published: Optional[int] = None
    genres: List[str] = strawberry.field(default_factory=list)

    @classmethod
    def from_schema(cls, book: BookRead) -> "BookType":
        return cls(
            id=strawberry.ID(book.id),
            title=book.title,
            author=AuthorType.from_schema(book.author),
            published=book.published,
            genres=list(book.genres),
        )


@strawberry.type(name="User")
class UserType:
    id: strawberry.ID
    username: str
    favorite_genre: Optional[str] = None

    @classmethod
    def from_schema(cls, user: UserRead) -> "UserType":
        return cls(id=strawberry.ID(user.id), username=user.username, favorite_genre=user.favorite_genre)


@strawberry.type(name="Token")
class TokenType:
    value: str

    @classmethod
    def from_schema(cls, token: Token) -> "TokenType":
        return cls(value=token.value)
