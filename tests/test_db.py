"""Tests for the SQLite persistence gateway."""

import pytest

from library_api.app.core.db import SQLiteGateway
from library_api.app.core.errors import DuplicateKeyError, PersistenceError


def test_init_db_is_idempotent(db_path):
    gw = SQLiteGateway(db_path)
    gw.init_db()
    gw.init_db()
    with gw.cursor() as cursor:
        versions = [row["version"] for row in cursor.execute("SELECT version FROM migrations ORDER BY version")]
    assert versions == [1, 2]


def test_insert_assigns_unique_string_ids(gateway):
    first = gateway.insert("authors", {"name": "Robert Martin"})
    second = gateway.insert("authors", {"name": "Martin Fowler"})
    assert isinstance(first, str) and first
    assert first != second


def test_find_one_and_find(gateway):
    author_id = gateway.insert("authors", {"name": "Fyodor Dostoevsky", "born": 1821})
    record = gateway.find_one("authors", {"name": "Fyodor Dostoevsky"})
    assert record == {"id": author_id, "name": "Fyodor Dostoevsky", "born": 1821}
    assert gateway.find_one("authors", {"name": "fyodor dostoevsky"}) is None
    assert [a["id"] for a in gateway.find("authors")] == [author_id]


def test_find_matches_list_fields_by_membership(gateway):
    author_id = gateway.insert("authors", {"name": "Robert Martin"})
    gateway.insert("books", {"title": "Clean Code", "author": author_id, "genres": ["refactoring"]})
    gateway.insert("books", {"title": "Agile software development", "author": author_id, "genres": ["agile", "patterns"]})

    found = gateway.find("books", {"genres": "patterns"})
    assert [b["title"] for b in found] == ["Agile software development"]
    assert found[0]["genres"] == ["agile", "patterns"]
    assert gateway.find("books", {"genres": "crime"}) == []


def test_count_with_and_without_predicate(gateway):
    a = gateway.insert("authors", {"name": "A. Author"})
    b = gateway.insert("authors", {"name": "B. Author"})
    gateway.insert("books", {"title": "One", "author": a, "genres": []})
    gateway.insert("books", {"title": "Two", "author": a, "genres": []})
    assert gateway.count("books") == 2
    assert gateway.count("books", {"author": a}) == 2
    assert gateway.count("books", {"author": b}) == 0


def test_duplicate_key_raises(gateway):
    gateway.insert("authors", {"name": "Robert Martin"})
    with pytest.raises(DuplicateKeyError) as excinfo:
        gateway.insert("authors", {"name": "Robert Martin"})
    assert "UNIQUE" in excinfo.value.message
    assert excinfo.value.invalid_args == {"name": "Robert Martin"}


def test_missing_author_reference_is_a_persistence_error(gateway):
    with pytest.raises(PersistenceError) as excinfo:
        gateway.insert("books", {"title": "Orphan", "author": "nope", "genres": []})
    assert not isinstance(excinfo.value, DuplicateKeyError)


def test_unknown_collection_or_field_is_rejected(gateway):
    with pytest.raises(PersistenceError):
        gateway.insert("publishers", {"name": "x"})
    with pytest.raises(PersistenceError):
        gateway.find("authors", {"nationality": "RU"})


def test_update_returns_updated_record(gateway):
    author_id = gateway.insert("authors", {"name": "Robert Martin"})
    updated = gateway.update("authors", author_id, {"born": 1952})
    assert updated["born"] == 1952
    assert gateway.update("authors", "missing", {"born": 1952}) is None
