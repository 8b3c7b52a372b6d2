"""Tests for QueryService: counts, listings and ``me``."""

import pytest


@pytest.mark.asyncio
async def test_hello(queries):
    assert await queries.hello() == "hello"


@pytest.mark.asyncio
async def test_counts(queries, catalog):
    assert await queries.book_count() == 0
    assert await queries.author_count() == 0

    await catalog.add_book("Clean Code", "Robert Martin")
    await catalog.add_book("Clean Coder", "Robert Martin")
    await catalog.add_book("Demons", "Fyodor Dostoevsky")

    assert await queries.book_count() == 3
    assert await queries.author_count() == 2


@pytest.mark.asyncio
async def test_all_authors_reports_book_counts(queries, catalog, gateway):
    await catalog.add_book("Clean Code", "Robert Martin")
    await catalog.add_book("Clean Coder", "Robert Martin")
    gateway.insert("authors", {"name": "Joshua Kerievsky"})

    counts = {a.name: a.book_count for a in await queries.all_authors()}
    assert counts == {"Robert Martin": 2, "Joshua Kerievsky": 0}


@pytest.mark.asyncio
async def test_all_authors_filtered_by_name(queries, catalog):
    await catalog.add_book("Clean Code", "Robert Martin")
    await catalog.add_book("Demons", "Fyodor Dostoevsky")

    authors = await queries.all_authors(author="Fyodor Dostoevsky")
    assert [a.name for a in authors] == ["Fyodor Dostoevsky"]
    assert await queries.all_authors(author="Nobody") == []


@pytest.mark.asyncio
async def test_all_books_joins_authors_and_filters(queries, catalog):
    await catalog.add_book("Clean Code", "Robert Martin", genres=["refactoring"])
    await catalog.add_book("Demons", "Fyodor Dostoevsky", genres=["classic", "revolution"])

    books = await queries.all_books()
    assert [(b.title, b.author.name) for b in books] == [
        ("Clean Code", "Robert Martin"),
        ("Demons", "Fyodor Dostoevsky"),
    ]
    assert [b.title for b in await queries.all_books(genre="classic")] == ["Demons"]
    assert [b.title for b in await queries.all_books(author="Robert Martin")] == ["Clean Code"]


@pytest.mark.asyncio
async def test_me(queries, auth):
    user = await auth.create_user("alice", favorite_genre="classic")
    token = await auth.login("alice", "secret")

    me = await queries.me(auth.identify(token.value))
    assert me.id == user.id
    assert me.favorite_genre == "classic"

    assert await queries.me(None) is None
    assert await queries.me({"username": "ghost", "id": "missing"}) is None
