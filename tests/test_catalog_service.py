"""Tests for CatalogService: adding books, editing authors, searching."""

import pytest
import pytest_asyncio

from library_api.app.core.errors import NotFoundError, PersistenceError, ValidationError
from library_api.app.services import catalog_service


@pytest_asyncio.fixture
async def seeded(catalog):
    await catalog.add_book("Clean Code", "Robert Martin", published=2008, genres=["refactoring"])
    await catalog.add_book("Agile software development", "Robert Martin", published=2002, genres=["agile", "patterns", "design"])
    await catalog.add_book("Crime and punishment", "Fyodor Dostoevsky", published=1866, genres=["classic", "crime"])
    return catalog


@pytest.mark.asyncio
async def test_add_book_with_new_author_creates_author_and_book(catalog, gateway):
    book = await catalog.add_book("Clean Code", "Robert Martin", published=2008, genres=["refactoring"])

    assert book.title == "Clean Code"
    assert book.author.name == "Robert Martin"
    assert book.author.born is None
    assert book.genres == ["refactoring"]
    assert gateway.count("authors") == 1
    assert gateway.count("books") == 1
    assert gateway.find_one("books", {"id": book.id})["author"] == book.author.id


@pytest.mark.asyncio
async def test_add_book_with_existing_author_reuses_it(catalog, gateway):
    first = await catalog.add_book("Clean Code", "Robert Martin")
    second = await catalog.add_book("Clean Coder", "Robert Martin")

    assert gateway.count("authors") == 1
    assert second.author.id == first.author.id


@pytest.mark.asyncio
async def test_add_book_defaults_genres_to_empty(catalog):
    book = await catalog.add_book("Untitled draft", "Anonymous")
    assert book.genres == []
    assert book.published is None


@pytest.mark.asyncio
async def test_add_book_from_the_future_fails_without_writing(catalog, gateway, monkeypatch):
    monkeypatch.setattr(catalog_service, "current_year", lambda: 2020)

    with pytest.raises(ValidationError) as excinfo:
        await catalog.add_book("Tomorrow", "Future Writer", published=2021)

    assert excinfo.value.invalid_args["published"] == 2021
    assert gateway.count("authors") == 0
    assert gateway.count("books") == 0


@pytest.mark.asyncio
async def test_add_book_accepts_current_year(catalog, monkeypatch):
    monkeypatch.setattr(catalog_service, "current_year", lambda: 2020)
    book = await catalog.add_book("Today", "Present Writer", published=2020)
    assert book.published == 2020


@pytest.mark.asyncio
@pytest.mark.parametrize("title, author_name", [("", "Robert Martin"), ("   ", "Robert Martin"), ("Clean Code", "")])
async def test_add_book_requires_title_and_author(catalog, gateway, title, author_name):
    with pytest.raises(ValidationError):
        await catalog.add_book(title, author_name)
    assert gateway.count("authors") == 0


@pytest.mark.asyncio
async def test_duplicate_title_is_a_persistence_error(catalog):
    await catalog.add_book("Clean Code", "Robert Martin")
    with pytest.raises(PersistenceError) as excinfo:
        await catalog.add_book("Clean Code", "Someone Else")
    assert "UNIQUE" in excinfo.value.message
    assert excinfo.value.invalid_args["title"] == "Clean Code"


@pytest.mark.asyncio
async def test_find_or_create_author_recovers_from_creation_race(catalog, gateway, monkeypatch):
    existing_id = gateway.insert("authors", {"name": "Robert Martin"})
    real_find_one = gateway.find_one
    calls = []

    def racing_find_one(collection, predicate):
        calls.append(predicate)
        # The first lookup runs before the concurrent insert is visible
        if len(calls) == 1:
            return None
        return real_find_one(collection, predicate)

    monkeypatch.setattr(gateway, "find_one", racing_find_one)

    author = await catalog.find_or_create_author("Robert Martin")

    assert author["id"] == existing_id
    assert real_find_one("authors", {"name": "Robert Martin"})["id"] == existing_id
    assert gateway.count("authors") == 1


@pytest.mark.asyncio
async def test_edit_author_sets_born(seeded):
    author = await seeded.edit_author("Robert Martin", 1952)
    assert author.name == "Robert Martin"
    assert author.born == 1952
    assert author.book_count == 2


@pytest.mark.asyncio
async def test_edit_author_overwrites_previous_year(seeded, gateway):
    await seeded.edit_author("Robert Martin", 1952)
    author = await seeded.edit_author("Robert Martin", 1999)
    assert author.born == 1999
    assert gateway.find_one("authors", {"name": "Robert Martin"})["born"] == 1999


@pytest.mark.asyncio
async def test_edit_missing_author_fails_and_changes_nothing(seeded, gateway):
    before = gateway.find("authors")
    with pytest.raises(NotFoundError):
        await seeded.edit_author("Nobody", 1950)
    assert gateway.find("authors") == before


@pytest.mark.asyncio
async def test_edit_author_validation(seeded, monkeypatch):
    monkeypatch.setattr(catalog_service, "current_year", lambda: 2020)
    with pytest.raises(ValidationError):
        await seeded.edit_author("", 1950)
    with pytest.raises(ValidationError):
        await seeded.edit_author("Robert Martin", None)
    with pytest.raises(ValidationError):
        await seeded.edit_author("Robert Martin", 2021)


@pytest.mark.asyncio
async def test_find_books_by_genre(seeded):
    books = await seeded.find_books(genre="refactoring")
    assert [b.title for b in books] == ["Clean Code"]


@pytest.mark.asyncio
async def test_find_books_by_author_name(seeded):
    books = await seeded.find_books(author="Robert Martin")
    assert sorted(b.title for b in books) == ["Agile software development", "Clean Code"]
    assert all(b.author.name == "Robert Martin" for b in books)


@pytest.mark.asyncio
async def test_find_books_combines_criteria(seeded):
    assert [b.title for b in await seeded.find_books(author="Robert Martin", genre="agile")] == [
        "Agile software development"
    ]
    assert await seeded.find_books(author="Fyodor Dostoevsky", genre="agile") == []
    assert [b.title for b in await seeded.find_books(title="Crime and punishment")] == ["Crime and punishment"]


@pytest.mark.asyncio
async def test_find_books_without_criteria_lists_everything(seeded):
    assert len(await seeded.find_books()) == 3


@pytest.mark.asyncio
async def test_find_books_with_unknown_author_is_empty(seeded):
    assert await seeded.find_books(author="Nobody") == []


@pytest.mark.asyncio
async def test_add_book_errors_echo_argument_names(catalog):
    with pytest.raises(ValidationError) as excinfo:
        await catalog.add_book("", "Robert Martin", genres=["refactoring"])
    assert excinfo.value.invalid_args == {
        "title": "",
        "authorName": "Robert Martin",
        "published": None,
        "genres": ["refactoring"],
    }


@pytest.mark.asyncio
async def test_author_created_for_rejected_book_is_kept(catalog, gateway):
    await catalog.add_book("Clean Code", "Robert Martin")
    with pytest.raises(PersistenceError):
        await catalog.add_book("Clean Code", "Someone Else")

    assert gateway.find_one("authors", {"name": "Someone Else"}) is not None
    assert gateway.count("authors") == 2
    assert gateway.count("books") == 1
