"""
SQLite persistence gateway and simple migration system.

The catalog talks to its store through a small document-style
interface: records are plain dictionaries addressed by collection
name, and lookups take a *predicate*, a mapping of field name to the
value that field must equal.  List-valued fields (a book's genres)
match when the list contains the value.  ``SQLiteGateway`` implements
that interface on top of SQLite; switching to another store means
providing another class with the same five methods.

Every operation opens its own connection with foreign keys enabled
and closes it afterwards, so a gateway instance holds no state other
than the database path and can be shared between requests.

Migrations are stored as ``(version, sql)`` pairs.  Applied versions
are recorded in the ``migrations`` table and only newer ones run.
"""

import json
import logging
import os
import sqlite3
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .config import settings
from .errors import DuplicateKeyError, PersistenceError

logger = logging.getLogger(__name__)

# Writable fields of each collection.  ``id`` is always assigned by the
# gateway and never appears here.
COLLECTIONS: Dict[str, Tuple[str, ...]] = {
    "authors": ("name", "born"),
    "books": ("title", "published", "author", "genres"),
    "users": ("username", "favorite_genre", "password"),
}

# Fields stored as JSON arrays.
LIST_FIELDS: Dict[str, Tuple[str, ...]] = {
    "books": ("genres",),
}

MIGRATIONS: List[Tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS authors (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL UNIQUE CHECK (length(name) > 0),
            born INTEGER,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS books (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL UNIQUE CHECK (length(title) > 0),
            published INTEGER,
            author TEXT NOT NULL,
            genres TEXT NOT NULL DEFAULT '[]',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(author) REFERENCES authors(id)
        );

        CREATE INDEX IF NOT EXISTS idx_books_author ON books(author);
        """,
    ),
    (
        2,
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            username TEXT NOT NULL UNIQUE CHECK (length(username) > 0),
            favorite_genre TEXT,
            password TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """,
    ),
]


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are used as they are; relative ones are resolved
    against the ``library_api`` package directory.
    """
    db_url = database_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # library_api/
    return str((base_dir / db_url).resolve())


class SQLiteGateway:
    """Document-style access to the catalog tables."""

    def __init__(self, database_path: Optional[str] = None) -> None:
        self.database_path = database_path or get_database_path()

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------
    def get_connection(self) -> sqlite3.Connection:
        """Create and return a new SQLite connection.

        Rows are returned as ``sqlite3.Row`` so columns can be read by
        name, and foreign key enforcement is switched on (SQLite
        disables it per connection by default).
        """
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor, commit on success and always close the connection."""
        conn = self.get_connection()
        try:
            yield conn.cursor()
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_db(self) -> None:
        """Create the database file if needed and apply pending migrations."""
        with self.cursor() as cursor:
            cursor.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
            cursor.execute("SELECT MAX(version) AS version FROM migrations")
            row = cursor.fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    logger.info("Applying migration %s to %s", version, self.database_path)
                    cursor.executescript(sql)
                    cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                    current_version = version

    # ------------------------------------------------------------------
    # Collection operations
    # ------------------------------------------------------------------
    def insert(self, collection: str, record: Mapping[str, Any]) -> str:
        """Insert a record and return its newly assigned id.

        Raises ``DuplicateKeyError`` when a uniqueness constraint is
        violated and ``PersistenceError`` for any other store failure.
        """
        fields = self._fields(collection, record)
        record_id = uuid.uuid4().hex
        columns = ["id"] + fields
        values = [record_id] + [self._to_column(collection, f, record[f]) for f in fields]
        placeholders = ", ".join("?" for _ in columns)
        sql = f"INSERT INTO {collection} ({', '.join(columns)}) VALUES ({placeholders})"
        try:
            with self.cursor() as cursor:
                cursor.execute(sql, values)
        except sqlite3.IntegrityError as exc:
            message = str(exc)
            if "UNIQUE" in message:
                logger.warning("Duplicate key in %s: %s", collection, message)
                raise DuplicateKeyError(message, dict(record)) from exc
            raise PersistenceError(message, dict(record)) from exc
        except sqlite3.Error as exc:
            raise PersistenceError(str(exc), dict(record)) from exc
        return record_id

    def find_one(self, collection: str, predicate: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Return the first record matching the predicate, or ``None``."""
        where, params = self._where(collection, predicate)
        sql = f"SELECT * FROM {collection}{where} ORDER BY rowid LIMIT 1"
        with self.cursor() as cursor:
            row = cursor.execute(sql, params).fetchone()
        return self._to_record(collection, row) if row else None

    def find(self, collection: str, predicate: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """Return all records matching the predicate in insertion order."""
        where, params = self._where(collection, predicate or {})
        sql = f"SELECT * FROM {collection}{where} ORDER BY rowid"
        with self.cursor() as cursor:
            rows = cursor.execute(sql, params).fetchall()
        return [self._to_record(collection, row) for row in rows]

    def count(self, collection: str, predicate: Optional[Mapping[str, Any]] = None) -> int:
        """Return the number of records matching the predicate."""
        where, params = self._where(collection, predicate or {})
        with self.cursor() as cursor:
            row = cursor.execute(f"SELECT COUNT(*) AS count FROM {collection}{where}", params).fetchone()
        return int(row["count"])

    def update(self, collection: str, record_id: str, changes: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply ``changes`` to the record with ``record_id``.

        Returns the updated record, or ``None`` when no record has that
        id.  Store failures raise ``PersistenceError``.
        """
        fields = self._fields(collection, changes)
        if fields:
            assignments = ", ".join(f"{f} = ?" for f in fields)
            values = [self._to_column(collection, f, changes[f]) for f in fields]
            sql = f"UPDATE {collection} SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?"
            try:
                with self.cursor() as cursor:
                    cursor.execute(sql, values + [record_id])
            except sqlite3.IntegrityError as exc:
                if "UNIQUE" in str(exc):
                    raise DuplicateKeyError(str(exc), dict(changes)) from exc
                raise PersistenceError(str(exc), dict(changes)) from exc
            except sqlite3.Error as exc:
                raise PersistenceError(str(exc), dict(changes)) from exc
        return self.find_one(collection, {"id": record_id})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _fields(collection: str, record: Mapping[str, Any]) -> List[str]:
        """Return the writable fields present in ``record``.

        Unknown collections and fields are rejected so that only
        whitelisted identifiers are ever interpolated into SQL.
        """
        if collection not in COLLECTIONS:
            raise PersistenceError(f"Unknown collection {collection!r}")
        allowed = COLLECTIONS[collection]
        unknown = [key for key in record if key not in allowed]
        if unknown:
            raise PersistenceError(
                f"Unknown field(s) for {collection}: {', '.join(sorted(unknown))}",
                dict(record),
            )
        return [key for key in allowed if key in record]

    @staticmethod
    def _to_column(collection: str, field: str, value: Any) -> Any:
        if field in LIST_FIELDS.get(collection, ()):
            return json.dumps(list(value or []))
        return value

    @staticmethod
    def _to_record(collection: str, row: sqlite3.Row) -> Dict[str, Any]:
        record = {key: row[key] for key in row.keys() if key not in ("created_at", "updated_at")}
        for field in LIST_FIELDS.get(collection, ()):
            record[field] = json.loads(record[field]) if record.get(field) else []
        return record

    def _where(self, collection: str, predicate: Mapping[str, Any]) -> Tuple[str, List[Any]]:
        """Translate an equality predicate into a WHERE clause."""
        searchable = {k: v for k, v in predicate.items() if k != "id"}
        self._fields(collection, searchable)
        clauses: List[str] = []
        params: List[Any] = []
        for field, value in predicate.items():
            if field in LIST_FIELDS.get(collection, ()):
                clauses.append(
                    f"EXISTS (SELECT 1 FROM json_each({collection}.{field}) WHERE json_each.value = ?)"
                )
                params.append(value)
            elif value is None:
                clauses.append(f"{field} IS NULL")
            else:
                clauses.append(f"{field} = ?")
                params.append(value)
        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params
